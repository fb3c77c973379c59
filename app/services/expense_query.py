"""Expense aggregation engine.

No store access here: functions take already-decoded master and share rows and
return shaped, sorted `ExpenseRecord`s. Rows from other companies are dropped
first, and shares whose master was filtered out (or never existed) are skipped.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable

from app.core.utils import EPOCH, collation_key, parse_filter_date
from app.models.expense import ALL_TYPES, FIXED_MEMOS, OTHER_TYPE, ExpenseMaster
from app.models.expense_share import ExpenseShare
from app.schemas.expense import ExpenseFilters, ExpenseRecord, Registrant, ShareOut, ViewType
from app.schemas.user import CurrentUser

logger = logging.getLogger(__name__)


def parse_expense_types(raw: str | Iterable[str] | None) -> set[str] | None:
    """Selected categories, or None when the category filter is off."""
    if raw is None:
        return None
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    types = {p.strip() for p in parts if p and p.strip()}
    if not types or ALL_TYPES in types:
        return None
    return types


def memo_matches(memo: str, types: set[str] | None, keyword: str | None = None) -> bool:
    if types is None:
        return True
    if memo in types:
        return True
    if OTHER_TYPE in types and memo not in FIXED_MEMOS:
        if keyword and keyword.strip():
            return keyword.strip().casefold() in memo.casefold()
        return True
    return False


def date_range(filters: ExpenseFilters, today: date | None = None) -> tuple[date, date]:
    start = parse_filter_date(filters.start_date, "startDate", EPOCH)
    end = parse_filter_date(filters.end_date, "endDate", today or date.today())
    return start, end


def filter_masters(
    masters: Iterable[ExpenseMaster],
    *,
    company_name: str,
    start: date,
    end: date,
    is_card_usage: bool | None = None,
    types: set[str] | None = None,
    keyword: str | None = None,
) -> dict[str, ExpenseMaster]:
    kept: dict[str, ExpenseMaster] = {}
    for m in masters:
        if not m.id or m.company_name != company_name:
            continue
        if m.date is None or not (start <= m.date <= end):
            continue
        if is_card_usage is not None and m.is_card_usage != is_card_usage:
            continue
        if not memo_matches(m.memo, types, keyword):
            continue
        kept.setdefault(m.id, m)
    return kept


def join_shares(
    shares: Iterable[ExpenseShare],
    masters: dict[str, ExpenseMaster],
    *,
    company_name: str,
) -> dict[str, list[ExpenseShare]]:
    joined: dict[str, list[ExpenseShare]] = {}
    for s in shares:
        if s.company_name != company_name:
            continue
        if s.master_id not in masters:
            logger.debug("Skipping share of %s: master filtered out or missing", s.master_id)
            continue
        joined.setdefault(s.master_id, []).append(s)
    return joined


def _registrant(m: ExpenseMaster) -> Registrant:
    return Registrant(email=m.registrant_email, name=m.registrant_name, company_name=m.company_name)


def _share_out(s: ExpenseShare, directory: dict[str, str]) -> ShareOut:
    return ShareOut(name=s.user_name, email=directory.get(s.user_name, ""), amount=s.amount, menu=s.menu)


def _record(m: ExpenseMaster, amount: int, users: list[ShareOut]) -> ExpenseRecord:
    return ExpenseRecord(
        id=m.id,
        date=m.date.isoformat() if m.date else "",
        registrant=_registrant(m),
        amount=amount,
        memo=m.memo,
        is_card_usage=m.is_card_usage,
        users=users,
    )


def expense_record(m: ExpenseMaster, shares: list[ExpenseShare], directory: dict[str, str]) -> ExpenseRecord:
    """Full record of one master; the amount is recomputed from its shares."""
    amount = sum(s.amount for s in shares) if shares else m.total_amount
    return _record(m, amount, [_share_out(s, directory) for s in shares])


def registrant_records(current_user, masters, joined, directory) -> list[ExpenseRecord]:
    return [
        expense_record(m, joined.get(mid, []), directory)
        for mid, m in masters.items()
        if m.registrant_email == current_user.email
    ]


def user_records(current_user, masters, joined, directory) -> list[ExpenseRecord]:
    out = []
    for mid, m in masters.items():
        mine = [s for s in joined.get(mid, []) if s.user_name == current_user.name]
        if not mine:
            continue
        out.append(_record(m, sum(s.amount for s in mine), [_share_out(s, directory) for s in mine]))
    return out


def admin_records(masters, joined, directory, selected_user: str | None = None) -> list[ExpenseRecord]:
    out = []
    for mid, m in masters.items():
        for s in joined.get(mid, []):
            if selected_user and s.user_name != selected_user:
                continue
            out.append(_record(m, s.amount, [_share_out(s, directory)]))
    return out


def admin_summary_records(
    current_user,
    joined,
    directory,
    *,
    selected_user: str | None = None,
    is_card_usage: bool | None = None,
    roster: list[str] | None = None,
) -> list[ExpenseRecord]:
    """One synthetic record per share owner with the sum of their shares.

    With `roster`, every roster name is listed and users without matching
    shares get 0; without it only names that own a matching share appear.
    """
    totals: dict[str, int] = {}
    if roster is not None:
        for name in roster:
            totals.setdefault(name, 0)

    for shares in joined.values():
        for s in shares:
            totals[s.user_name] = totals.get(s.user_name, 0) + s.amount

    if selected_user:
        totals = {name: amt for name, amt in totals.items() if name == selected_user}

    out = []
    for name, amount in totals.items():
        email = directory.get(name, "")
        out.append(
            ExpenseRecord(
                id=name,
                date="",
                registrant=Registrant(email=email, name=name, company_name=current_user.company_name),
                amount=amount,
                memo="",
                is_card_usage=is_card_usage,
                users=[ShareOut(name=name, email=email, amount=amount)],
            )
        )

    out.sort(key=lambda r: collation_key(r.registrant.name))
    return out


def sort_records(records: list[ExpenseRecord]) -> list[ExpenseRecord]:
    # two stable passes: memo ascending, then date descending
    records.sort(key=lambda r: collation_key(r.memo))
    records.sort(key=lambda r: r.date, reverse=True)
    return records


def build_expense_records(
    current_user: CurrentUser,
    filters: ExpenseFilters,
    masters: Iterable[ExpenseMaster],
    shares: Iterable[ExpenseShare],
    *,
    directory: dict[str, str] | None = None,
    roster: list[str] | None = None,
    today: date | None = None,
) -> list[ExpenseRecord]:
    directory = directory or {}
    company = current_user.company_name
    start, end = date_range(filters, today=today)

    kept = filter_masters(
        masters,
        company_name=company,
        start=start,
        end=end,
        is_card_usage=filters.is_card_usage,
        types=parse_expense_types(filters.expense_types),
        keyword=filters.search_keyword,
    )
    joined = join_shares(shares, kept, company_name=company)

    view = filters.view_type
    if view == ViewType.ADMIN_SUMMARY:
        return admin_summary_records(
            current_user,
            joined,
            directory,
            selected_user=filters.selected_user,
            is_card_usage=filters.is_card_usage,
            roster=roster,
        )

    if view == ViewType.USER:
        records = user_records(current_user, kept, joined, directory)
    elif view == ViewType.ADMIN:
        records = admin_records(kept, joined, directory, selected_user=filters.selected_user)
    else:
        records = registrant_records(current_user, kept, joined, directory)

    return sort_records(records)
