from fastapi import APIRouter, Depends, Query
from app.core.dependencies import get_current_user, get_store
from app.schemas.expense import ExpenseCreated, ExpenseFilters, ExpenseForm, ExpenseRecord, ViewType
from app.schemas.user import CurrentUser
from app.services.expense_services import check_owner, create_expense, delete_expense, get_expense_by_id, query_expenses, update_expense
from app.core.errors import NotFound
from app.store.base import RowStore

router = APIRouter()

@router.get("/", response_model=list[ExpenseRecord])
async def list_expenses(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    is_card_usage: bool | None = Query(None, alias="isCardUsage"),
    view_type: ViewType = Query(ViewType.REGISTRANT, alias="viewType"),
    selected_user: str | None = Query(None, alias="selectedUser"),
    expense_types: str | None = Query(None, alias="expenseTypes"),
    search_keyword: str | None = Query(None, alias="searchKeyword"),
    store: RowStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    filters = ExpenseFilters(
        start_date=start_date,
        end_date=end_date,
        is_card_usage=is_card_usage,
        view_type=view_type,
        selected_user=selected_user or None,
        expense_types=expense_types,
        search_keyword=search_keyword,
    )
    return await query_expenses(store, current_user, filters)

@router.post("/", response_model=ExpenseCreated)
async def add_expense(data: ExpenseForm, store: RowStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    expense_id = await create_expense(store, data, current_user)
    return ExpenseCreated(message="Expense registered", expense_id=expense_id)

@router.get("/{expense_id}", response_model=ExpenseRecord)
async def fetch(
    expense_id: str,
    store: RowStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    expense = await get_expense_by_id(store, expense_id, current_user.company_name)
    if expense is None:
        raise NotFound()
    return expense

@router.put("/{expense_id}")
async def edit(data: ExpenseForm, expense_id: str, store: RowStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    await check_owner(store, expense_id, current_user)
    await update_expense(store, expense_id, data, current_user)
    return {"message": "Expense updated"}

@router.delete("/{expense_id}")
async def del_expense(expense_id: str, store: RowStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    await check_owner(store, expense_id, current_user)
    await delete_expense(store, expense_id, current_user.company_name)
    return {"status": "deleted"}
