from fastapi import APIRouter, Depends, Query
from app.core.dependencies import get_current_user, get_store
from app.core.errors import ValidationError
from app.schemas.menu import MenuAnalysis, MenuCalendarEntry
from app.schemas.user import CurrentUser
from app.services.menu_services import SCOPE_ALL, SCOPE_PERSONAL, analyze_menus, get_menu_calendar, list_menus
from app.store.base import RowStore

router = APIRouter()

@router.get("/", response_model=list[str])
async def menus(store: RowStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    return await list_menus(store, current_user.company_name)

@router.get("/analysis", response_model=MenuAnalysis)
async def menu_analysis(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    scope: str = Query(SCOPE_ALL, alias="viewType"),
    store: RowStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    if scope not in (SCOPE_ALL, SCOPE_PERSONAL):
        raise ValidationError("viewType must be 'all' or 'personal'")

    return await analyze_menus(
        store,
        start_date,
        end_date,
        scope,
        current_user.company_name,
        user_name=current_user.name,
    )

@router.get("/calendar", response_model=list[MenuCalendarEntry])
async def menu_calendar(
    year: int = Query(..., ge=1970),
    month: int = Query(..., ge=1, le=12),
    store: RowStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    return await get_menu_calendar(store, current_user.name, current_user.company_name, year, month)
