import asyncio
import logging
import uuid
import weakref
from datetime import datetime, timezone
from app.core.errors import Forbidden, NotFound, Unauthorized
from app.models.expense import ExpenseMaster, OTHER_TYPE
from app.models.expense_share import ExpenseShare
from app.schemas.expense import ExpenseFilters, ExpenseForm, ExpenseRecord, ViewType
from app.schemas.user import CurrentUser
from app.services.expense_query import build_expense_records, expense_record
from app.services.menu_services import register_custom_menus
from app.services.user_service import company_directory, get_all_users
from app.store.base import RowStore
from app.core.config import settings

logger = logging.getLogger(__name__)

MASTER = ExpenseMaster.__tablename__
DETAIL = ExpenseShare.__tablename__

# Serializes update/delete of one id inside this process only; the row store
# itself offers no locking, so writers in other processes can still interleave.
_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

def _expense_lock(expense_id: str) -> asyncio.Lock:
    lock = _locks.get(expense_id)
    if lock is None:
        lock = asyncio.Lock()
        _locks[expense_id] = lock
    return lock

async def load_masters(store: RowStore) -> list[tuple[int, ExpenseMaster]]:
    rows = await store.get(MASTER)
    return [(i, ExpenseMaster.from_row(r)) for i, r in enumerate(rows) if r]

async def load_shares(store: RowStore) -> list[tuple[int, ExpenseShare]]:
    rows = await store.get(DETAIL)
    return [(i, ExpenseShare.from_row(r)) for i, r in enumerate(rows) if r]

def _resolve_menu(share) -> str:
    menu = (share.menu or "").strip()
    if menu == OTHER_TYPE:
        return (share.custom_menu or "").strip()
    return menu

def _custom_menus(data: ExpenseForm) -> list[str]:
    values = []
    for s in data.users:
        if (s.menu or "").strip() == OTHER_TYPE and (s.custom_menu or "").strip():
            value = s.custom_menu.strip()
            if value not in values:
                values.append(value)
    return values

def _rows_for(expense_id: str, data: ExpenseForm, registrant: CurrentUser, created_at: str):
    master = ExpenseMaster(
        id=expense_id,
        date=data.date,
        registrant_email=registrant.email,
        registrant_name=registrant.name,
        total_amount=sum(s.amount for s in data.users),
        memo=data.memo.strip(),
        is_card_usage=data.is_card_usage,
        company_name=registrant.company_name,
        created_at=created_at,
    )
    shares = [
        ExpenseShare(
            master_id=expense_id,
            user_name=s.name.strip(),
            amount=s.amount,
            menu=_resolve_menu(s),
            company_name=registrant.company_name,
        )
        for s in data.users
    ]
    return master, shares

async def _write(store: RowStore, master: ExpenseMaster, shares: list[ExpenseShare]):
    # master first: a crash before the details land leaves a master without
    # shares, which readers render with its stored total
    await store.append(MASTER, [master.to_row()])
    await store.append(DETAIL, [s.to_row() for s in shares])

async def query_expenses(store: RowStore, current_user: CurrentUser | None, filters: ExpenseFilters) -> list[ExpenseRecord]:
    if current_user is None:
        raise Unauthorized()

    if filters.view_type in (ViewType.ADMIN, ViewType.ADMIN_SUMMARY) and not current_user.is_admin:
        raise Forbidden("Admin access required")

    masters = [m for _, m in await load_masters(store)]
    shares = [s for _, s in await load_shares(store)]
    directory = await company_directory(store, current_user.company_name)

    roster = None
    if filters.view_type == ViewType.ADMIN_SUMMARY and settings.ADMIN_SUMMARY_ZERO_FILL:
        roster = [u.name for u in await get_all_users(store, current_user.company_name)]

    return build_expense_records(
        current_user,
        filters,
        masters,
        shares,
        directory=directory,
        roster=roster,
    )

async def get_expense_by_id(store: RowStore, expense_id: str, company_name: str) -> ExpenseRecord | None:
    master = next(
        (m for _, m in await load_masters(store) if m.id == expense_id and m.company_name == company_name),
        None,
    )
    if master is None:
        return None

    shares = [
        s for _, s in await load_shares(store)
        if s.master_id == expense_id and s.company_name == company_name
    ]
    directory = await company_directory(store, company_name)
    return expense_record(master, shares, directory)

async def create_expense(store: RowStore, data: ExpenseForm, registrant: CurrentUser) -> str:
    expense_id = uuid.uuid4().hex
    created_at = datetime.now(timezone.utc).isoformat(timespec="seconds")

    master, shares = _rows_for(expense_id, data, registrant, created_at)
    await _write(store, master, shares)
    await register_custom_menus(store, registrant.company_name, _custom_menus(data))

    logger.info("Created expense %s for %s (%d shares)", expense_id, registrant.company_name, len(shares))
    return expense_id

async def _locate(store: RowStore, expense_id: str, company_name: str):
    master_rows = [
        (i, m) for i, m in await load_masters(store)
        if m.id == expense_id and m.company_name == company_name
    ]
    if not master_rows:
        raise NotFound()

    share_rows = [
        i for i, s in await load_shares(store)
        if s.master_id == expense_id and s.company_name == company_name
    ]
    return master_rows, share_rows

async def update_expense(store: RowStore, expense_id: str, data: ExpenseForm, registrant: CurrentUser) -> None:
    async with _expense_lock(expense_id):
        master_rows, share_rows = await _locate(store, expense_id, registrant.company_name)
        created_at = master_rows[0][1].created_at

        # 1. Clear the old aggregate
        await store.clear(MASTER, [i for i, _ in master_rows])
        await store.clear(DETAIL, share_rows)

        # 2. Re-append it under the same id
        master, shares = _rows_for(expense_id, data, registrant, created_at)
        await _write(store, master, shares)

    await register_custom_menus(store, registrant.company_name, _custom_menus(data))
    logger.info("Updated expense %s for %s", expense_id, registrant.company_name)

async def delete_expense(store: RowStore, expense_id: str, company_name: str) -> None:
    async with _expense_lock(expense_id):
        master_rows, share_rows = await _locate(store, expense_id, company_name)

        await store.clear(MASTER, [i for i, _ in master_rows])
        await store.clear(DETAIL, share_rows)

    logger.info("Deleted expense %s for %s", expense_id, company_name)

async def check_owner(store: RowStore, expense_id: str, user: CurrentUser) -> ExpenseRecord:
    expense = await get_expense_by_id(store, expense_id, user.company_name)

    if not expense:
        raise NotFound()

    # Authorization: only the registrant can edit or delete
    if expense.registrant.email != user.email:
        raise Forbidden("You cannot modify this expense")

    return expense
