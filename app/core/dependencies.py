import logging
from functools import lru_cache
from fastapi import Request
from app.core.config import settings
from app.core.errors import Unauthorized
from app.core.jwt_config import decode_token, get_token_from_cookie
from app.core.security import verify_password
from app.models.user import ROLE_USER
from app.schemas.user import CurrentUser
from app.services.user_service import get_user_by_email
from app.store.base import RowStore

logger = logging.getLogger(__name__)

@lru_cache(maxsize=1)
def build_row_store() -> RowStore:
    if settings.ROW_STORE_BACKEND == "sheets":
        from app.store.google_sheets import GoogleSheetsRowStore

        logger.info("Using Google Sheets row store")
        return GoogleSheetsRowStore.from_settings(settings)

    from app.db.session import async_session
    from app.store.sql import SqlRowStore

    logger.info("Using SQL row store")
    return SqlRowStore(async_session)

async def get_store() -> RowStore:
    return build_row_store()

def user_from_claims(payload: dict) -> CurrentUser:
    email = payload.get("sub")
    company = payload.get("company")

    if not email or not company or payload.get("type") != "access":
        raise Unauthorized("Invalid authentication credentials")

    return CurrentUser(
        email=email,
        name=payload.get("name") or "",
        role=payload.get("role") or ROLE_USER,
        company_name=company,
        password_changed_at=payload.get("pwd_at") or "",
    )

async def get_current_user(request: Request) -> CurrentUser:
    token = get_token_from_cookie(request=request)

    if token is None:
        raise Unauthorized()

    return user_from_claims(decode_token(token))

async def authenticate_user(store: RowStore, email:str, password:str):
    user = await get_user_by_email(store, email)
    if not user:
        raise Unauthorized("Invalid email or password")

    if not user.is_active:
        raise Unauthorized("Account is disabled")

    if not verify_password(password, user.password_hash):
        raise Unauthorized("Invalid email or password")

    return user
