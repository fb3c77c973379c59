import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from app.core.config import settings
from app.api.v1.routes.user import router as user_router
from app.api.v1.routes.expense import router as expense_router
from app.api.v1.routes.menu import router as menu_router
from app.api.v1.routes.company import router as company_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ROW_STORE_BACKEND == "sql":
        from app.db.session import Base, engine
        from app.models import sheet_row  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("SQL row store ready at %s", engine.url.render_as_string(hide_password=True))

    yield

app = FastAPI(title="Card Ledger Backend", lifespan=lifespan)

@app.get("/")
async def root():
    return {"message": "Card Ledger Backend is live"}

app.include_router(user_router, prefix="/api/v1/users")
app.include_router(expense_router, prefix="/api/v1/expenses")
app.include_router(menu_router, prefix="/api/v1/menus")
app.include_router(company_router, prefix="/api/v1")
