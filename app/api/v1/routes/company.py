from fastapi import APIRouter, Depends, Query
from app.core.dependencies import get_current_user, get_store
from app.schemas.company import CompanyOut, MonthlyUsage, NoticeOut
from app.schemas.user import CurrentUser
from app.services.company_services import list_companies, list_notices
from app.services.usage_services import get_monthly_usage
from app.store.base import RowStore

router = APIRouter()

@router.get("/companies", response_model=list[CompanyOut])
async def companies(store: RowStore = Depends(get_store)):
    return await list_companies(store)

@router.get("/notices", response_model=list[NoticeOut])
async def notices(store: RowStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    return [
        NoticeOut(content=n.content, date=n.date.isoformat() if n.date else "")
        for n in await list_notices(store, current_user.company_name)
    ]

@router.get("/usage/monthly", response_model=MonthlyUsage)
async def monthly_usage(
    year: int = Query(..., ge=1970),
    month: int = Query(..., ge=1, le=12),
    store: RowStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await get_monthly_usage(store, current_user, year, month)
