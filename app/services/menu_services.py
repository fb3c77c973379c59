import logging
from datetime import date
from dateutil.relativedelta import relativedelta
from app.core.utils import collation_key, parse_filter_date
from app.models.company import MenuCatalogEntry
from app.models.expense import ExpenseMaster, MEAL_MEMOS
from app.models.expense_share import ExpenseShare
from app.schemas.menu import MenuAnalysis, MenuCalendarEntry, MenuStat
from app.store.base import RowStore

logger = logging.getLogger(__name__)

CATALOG = MenuCatalogEntry.__tablename__

SCOPE_ALL = "all"
SCOPE_PERSONAL = "personal"

def default_analysis_range(today: date | None = None) -> tuple[date, date]:
    end = today or date.today()
    return end - relativedelta(months=3), end

async def _company_rows(store: RowStore, company_name: str):
    masters = {}
    for r in await store.get(ExpenseMaster.__tablename__):
        if not r:
            continue
        m = ExpenseMaster.from_row(r)
        if m.id and m.company_name == company_name:
            masters.setdefault(m.id, m)

    shares = [
        s for s in (ExpenseShare.from_row(r) for r in await store.get(ExpenseShare.__tablename__) if r)
        if s.company_name == company_name
    ]
    return masters, shares

def menu_stats(
    masters: dict[str, ExpenseMaster],
    shares: list[ExpenseShare],
    start: date,
    end: date,
    scope: str = SCOPE_ALL,
    user_name: str | None = None,
) -> MenuAnalysis:
    counts: dict[str, int] = {}
    last_used: dict[str, date] = {}

    for s in shares:
        if not s.menu:
            continue
        m = masters.get(s.master_id)
        if m is None or m.date is None or not (start <= m.date <= end):
            continue
        if scope == SCOPE_PERSONAL and s.user_name != user_name:
            continue

        counts[s.menu] = counts.get(s.menu, 0) + 1
        if s.menu not in last_used or m.date > last_used[s.menu]:
            last_used[s.menu] = m.date

    total = sum(counts.values())
    stats = [
        MenuStat(
            menu=menu,
            count=count,
            percentage=f"{count / total * 100:.1f}",
            last_used=last_used[menu].isoformat(),
        )
        for menu, count in counts.items()
    ]

    by_name = sorted(stats, key=lambda st: collation_key(st.menu))
    return MenuAnalysis(
        popularity=sorted(by_name, key=lambda st: st.count, reverse=True),
        oldest_used=sorted(by_name, key=lambda st: st.last_used),
    )

async def analyze_menus(
    store: RowStore,
    start_date: str | None,
    end_date: str | None,
    scope: str,
    company_name: str,
    user_name: str | None = None,
) -> MenuAnalysis:
    default_start, default_end = default_analysis_range()
    start = parse_filter_date(start_date, "startDate", default_start)
    end = parse_filter_date(end_date, "endDate", default_end)

    masters, shares = await _company_rows(store, company_name)
    return menu_stats(masters, shares, start, end, scope=scope, user_name=user_name)

async def get_menu_calendar(store: RowStore, user_name: str, company_name: str, year: int, month: int) -> list[MenuCalendarEntry]:
    masters, shares = await _company_rows(store, company_name)

    entries = []
    for s in shares:
        if s.user_name != user_name or not s.menu:
            continue
        m = masters.get(s.master_id)
        if m is None or m.date is None or m.memo not in MEAL_MEMOS:
            continue
        if m.date.year != year or m.date.month != month:
            continue
        entries.append(MenuCalendarEntry(date=m.date.isoformat(), menu=s.menu, type=m.memo))

    entries.sort(key=lambda e: e.date)
    return entries

async def list_menus(store: RowStore, company_name: str) -> list[str]:
    rows = await store.get(CATALOG)
    names = {
        entry.name for entry in (MenuCatalogEntry.from_row(r) for r in rows if r)
        if entry.name and entry.company_name == company_name
    }
    return sorted(names, key=collation_key)

async def register_custom_menus(store: RowStore, company_name: str, menus: list[str]) -> list[str]:
    """Append menus the company's catalog has not seen yet (exact match)."""
    if not menus:
        return []

    known = set(await list_menus(store, company_name))
    new = []
    for menu in menus:
        if menu and menu not in known and menu not in new:
            new.append(menu)

    if new:
        await store.append(CATALOG, [MenuCatalogEntry(name=m, company_name=company_name).to_row() for m in new])
        logger.info("Added %d menu(s) to the %s catalog", len(new), company_name)

    return new
