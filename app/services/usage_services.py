from app.core.errors import Unauthorized, ValidationError
from app.models.expense import ExpenseMaster
from app.models.expense_share import ExpenseShare
from app.schemas.company import MonthlyUsage
from app.schemas.user import CurrentUser
from app.services.company_services import get_company
from app.store.base import RowStore

async def get_monthly_usage(store: RowStore, current_user: CurrentUser | None, year: int, month: int) -> MonthlyUsage:
    if current_user is None:
        raise Unauthorized()

    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")

    company_name = current_user.company_name

    # Company-card masters of the month
    card_ids = set()
    for r in await store.get(ExpenseMaster.__tablename__):
        if not r:
            continue
        m = ExpenseMaster.from_row(r)
        if (
            m.company_name == company_name
            and m.is_card_usage
            and m.date is not None
            and m.date.year == year
            and m.date.month == month
        ):
            card_ids.add(m.id)

    used = 0
    for r in await store.get(ExpenseShare.__tablename__):
        if not r:
            continue
        s = ExpenseShare.from_row(r)
        if s.company_name == company_name and s.master_id in card_ids and s.user_name == current_user.name:
            used += s.amount

    company = await get_company(store, company_name)
    limit = company.monthly_limit if company else 0

    return MonthlyUsage(year=year, month=month, used=used, limit=limit, remaining=limit - used)
