import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "0") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


class Settings:
    def __init__(self):
        self.ROW_STORE_BACKEND = os.environ.get("ROW_STORE_BACKEND", "sql").strip().lower()

        # Google Sheets backend
        self.SHEET_ID = os.environ.get("SHEET_ID", "")
        self.GOOGLE_SHEETS_CREDENTIALS = os.environ.get("GOOGLE_SHEETS_CREDENTIALS", "")
        self.GOOGLE_SA_FILE = os.environ.get("GOOGLE_SA_FILE", "")
        self.GOOGLE_HTTP_TIMEOUT_SECONDS = int(os.environ.get("GOOGLE_HTTP_TIMEOUT_SECONDS", "30"))

        # SQL backend
        self.DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///./ledger.db")

        self.JWT_SECRET = os.environ.get("JWT_SECRET", "dev-only-secret-change-me-before-deploying")
        self.JWT_ALGO = os.environ.get("JWT_ALGO", "HS256")
        self.ACCESS_TOKEN_MINUTES = int(os.environ.get("ACCESS_TOKEN_MINUTES", "1440"))
        self.REFRESH_TOKEN_DAYS = int(os.environ.get("REFRESH_TOKEN_DAYS", "7"))
        self.COOKIE_SECURE = _flag("COOKIE_SECURE")

        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

        # admin-summary lists every active user (zero-filled) instead of only users with shares
        self.ADMIN_SUMMARY_ZERO_FILL = _flag("ADMIN_SUMMARY_ZERO_FILL")


settings = Settings()
