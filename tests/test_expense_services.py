from __future__ import annotations

import asyncio
from datetime import date

import pytest

from app.core.config import settings
from app.core.errors import Forbidden, NotFound, Unauthorized
from app.models.expense import ExpenseMaster
from app.schemas.expense import ExpenseFilters, ExpenseForm, ShareInput, ViewType
from app.services.expense_services import (
    check_owner,
    create_expense,
    delete_expense,
    get_expense_by_id,
    query_expenses,
    update_expense,
)


def lunch_form(**overrides) -> ExpenseForm:
    data = dict(
        date=date(2024, 5, 1),
        memo="점심식대",
        is_card_usage=True,
        users=[
            ShareInput(name="Kim", amount=10000, menu="김치찌개"),
            ShareInput(name="Lee", amount=20000, menu="기타", custom_menu="마라탕"),
            ShareInput(name="Park", amount=30000, menu="기타", custom_menu="마라탕"),
        ],
    )
    data.update(overrides)
    return ExpenseForm(**data)


def test_create_then_get_round_trip(store, kim) -> None:
    expense_id = asyncio.run(create_expense(store, lunch_form(), kim))

    record = asyncio.run(get_expense_by_id(store, expense_id, kim.company_name))

    assert record is not None
    assert record.date == "2024-05-01"
    assert record.memo == "점심식대"
    assert record.is_card_usage is True
    assert record.registrant.email == kim.email
    assert [(u.name, u.amount, u.menu) for u in record.users] == [
        ("Kim", 10000, "김치찌개"),
        ("Lee", 20000, "마라탕"),
        ("Park", 30000, "마라탕"),
    ]


def test_create_stores_sum_of_shares_as_total(store, kim) -> None:
    asyncio.run(create_expense(store, lunch_form(), kim))

    master = ExpenseMaster.from_row(store.tables["ExpenseMaster"][0])
    assert master.total_amount == 60000
    assert master.company_name == "ACME"
    assert len(store.tables["ExpenseDetail"]) == 3


def test_create_appends_new_custom_menu_once(store, kim) -> None:
    asyncio.run(create_expense(store, lunch_form(), kim))

    acme_menus = [r[0] for r in store.tables["MenuCatalog"] if r[1] == "ACME"]
    assert acme_menus.count("마라탕") == 1
    assert acme_menus.count("김치찌개") == 1

    asyncio.run(create_expense(store, lunch_form(), kim))
    acme_menus = [r[0] for r in store.tables["MenuCatalog"] if r[1] == "ACME"]
    assert acme_menus.count("마라탕") == 1


def test_get_expense_by_id_is_company_scoped(store, kim, outsider) -> None:
    expense_id = asyncio.run(create_expense(store, lunch_form(), kim))

    assert asyncio.run(get_expense_by_id(store, expense_id, outsider.company_name)) is None


def test_update_replaces_master_and_shares(store, kim) -> None:
    expense_id = asyncio.run(create_expense(store, lunch_form(), kim))
    created_at = ExpenseMaster.from_row(store.tables["ExpenseMaster"][0]).created_at

    new_form = lunch_form(
        memo="저녁식대",
        is_card_usage=False,
        users=[ShareInput(name="Kim", amount=15000), ShareInput(name="Lee", amount=5000)],
    )
    asyncio.run(update_expense(store, expense_id, new_form, kim))

    record = asyncio.run(get_expense_by_id(store, expense_id, kim.company_name))
    assert record.memo == "저녁식대"
    assert record.is_card_usage is False
    assert record.amount == 20000
    assert [u.name for u in record.users] == ["Kim", "Lee"]

    live_masters = [r for r in store.tables["ExpenseMaster"] if r]
    assert len(live_masters) == 1
    assert ExpenseMaster.from_row(live_masters[0]).total_amount == 20000
    assert ExpenseMaster.from_row(live_masters[0]).created_at == created_at
    assert len([r for r in store.tables["ExpenseDetail"] if r]) == 2


def test_update_missing_expense_raises_not_found(store, kim) -> None:
    with pytest.raises(NotFound):
        asyncio.run(update_expense(store, "nope", lunch_form(), kim))


def test_delete_then_query_never_returns_expense(store, kim, park) -> None:
    keep_id = asyncio.run(create_expense(store, lunch_form(), kim))
    gone_id = asyncio.run(create_expense(store, lunch_form(memo="야근식대"), kim))

    asyncio.run(delete_expense(store, gone_id, kim.company_name))

    assert asyncio.run(get_expense_by_id(store, gone_id, kim.company_name)) is None
    for user, view in (
        (kim, ViewType.REGISTRANT),
        (kim, ViewType.USER),
        (park, ViewType.ADMIN),
    ):
        ids = {r.id for r in asyncio.run(query_expenses(store, user, ExpenseFilters(view_type=view)))}
        assert gone_id not in ids
        assert keep_id in ids


def test_delete_missing_expense_raises_not_found(store, kim) -> None:
    with pytest.raises(NotFound):
        asyncio.run(delete_expense(store, "nope", kim.company_name))


def test_query_requires_user_before_touching_store(store) -> None:
    with pytest.raises(Unauthorized):
        asyncio.run(query_expenses(store, None, ExpenseFilters()))

    assert store.calls == []


def test_admin_views_require_admin_role(store, kim) -> None:
    for view in (ViewType.ADMIN, ViewType.ADMIN_SUMMARY):
        with pytest.raises(Forbidden):
            asyncio.run(query_expenses(store, kim, ExpenseFilters(view_type=view)))


def test_scenario_user_view_for_share_owner(store, kim, lee) -> None:
    asyncio.run(create_expense(store, lunch_form(), kim))

    records = asyncio.run(query_expenses(store, lee, ExpenseFilters(view_type=ViewType.USER)))

    assert len(records) == 1
    assert records[0].amount == 20000


def test_admin_summary_zero_fill_uses_active_roster(store, kim, park, monkeypatch) -> None:
    asyncio.run(create_expense(store, lunch_form(users=[ShareInput(name="Kim", amount=3000)]), kim))
    monkeypatch.setattr(settings, "ADMIN_SUMMARY_ZERO_FILL", True)

    records = asyncio.run(query_expenses(store, park, ExpenseFilters(view_type=ViewType.ADMIN_SUMMARY)))

    # Choi is inactive and stays out of the roster
    assert [(r.registrant.name, r.amount) for r in records] == [("Kim", 3000), ("Lee", 0), ("Park", 0)]


def test_outsider_never_sees_acme_rows(store, kim, outsider) -> None:
    asyncio.run(create_expense(store, lunch_form(), kim))

    for view in ViewType:
        assert asyncio.run(query_expenses(store, outsider, ExpenseFilters(view_type=view))) == []


def test_check_owner(store, kim, lee) -> None:
    expense_id = asyncio.run(create_expense(store, lunch_form(), kim))

    assert asyncio.run(check_owner(store, expense_id, kim)).id == expense_id

    with pytest.raises(Forbidden):
        asyncio.run(check_owner(store, expense_id, lee))

    with pytest.raises(NotFound):
        asyncio.run(check_owner(store, "missing", kim))


def test_update_registers_new_custom_menu_once(store, kim) -> None:
    expense_id = asyncio.run(create_expense(store, lunch_form(), kim))

    new_form = lunch_form(
        users=[
            ShareInput(name="Kim", amount=9000, menu="기타", custom_menu="쌀국수"),
            ShareInput(name="Lee", amount=9000, menu="기타", custom_menu="쌀국수"),
        ]
    )
    asyncio.run(update_expense(store, expense_id, new_form, kim))
    asyncio.run(update_expense(store, expense_id, new_form, kim))

    acme_menus = [r[0] for r in store.tables["MenuCatalog"] if r[1] == "ACME"]
    assert acme_menus.count("쌀국수") == 1
    record = asyncio.run(get_expense_by_id(store, expense_id, kim.company_name))
    assert [u.menu for u in record.users] == ["쌀국수", "쌀국수"]
