"""Shared fixtures: an in-memory row store that behaves like a sheet."""

from __future__ import annotations

import pytest

from app.schemas.user import CurrentUser


def is_blank_row(row: list) -> bool:
    return not any(str(c or "").strip() for c in row)


def _as_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class InMemoryRowStore:
    """Row store fake with spreadsheet semantics.

    Cleared rows stay as [] so indexes keep lining up, trailing empty rows are
    not returned, and every call is recorded.
    """

    def __init__(self, tables: dict[str, list[list]] | None = None) -> None:
        self.tables: dict[str, list[list[str]]] = {}
        self.calls: list[tuple[str, str]] = []
        for name, rows in (tables or {}).items():
            self.tables[name] = [[_as_cell(v) for v in r] for r in rows]

    async def get(self, table: str) -> list[list[str]]:
        self.calls.append(("get", table))
        rows = [list(r) for r in self.tables.get(table, [])]
        while rows and is_blank_row(rows[-1]):
            rows.pop()
        return [[] if is_blank_row(r) else r for r in rows]

    async def append(self, table: str, rows: list[list]) -> None:
        self.calls.append(("append", table))
        self.tables.setdefault(table, []).extend([[_as_cell(v) for v in r] for r in rows])

    async def update(self, table: str, row_index: int, rows: list[list]) -> None:
        self.calls.append(("update", table))
        existing = self.tables.setdefault(table, [])
        for offset, row in enumerate(rows):
            while len(existing) <= row_index + offset:
                existing.append([])
            existing[row_index + offset] = [_as_cell(v) for v in row]

    async def clear(self, table: str, row_indexes) -> None:
        self.calls.append(("clear", table))
        existing = self.tables.setdefault(table, [])
        for i in row_indexes:
            if i < len(existing):
                existing[i] = []


ACME = "ACME"
OTHER = "Other Corp"


def make_user(email: str, name: str, role: str = "USER", company: str = ACME) -> CurrentUser:
    return CurrentUser(email=email, name=name, role=role, company_name=company)


@pytest.fixture
def kim() -> CurrentUser:
    return make_user("kim@acme.test", "Kim")


@pytest.fixture
def lee() -> CurrentUser:
    return make_user("lee@acme.test", "Lee")


@pytest.fixture
def park() -> CurrentUser:
    return make_user("park@acme.test", "Park", role="ADMIN")


@pytest.fixture
def outsider() -> CurrentUser:
    # same display name as an ACME user, different company
    return make_user("kim@other.test", "Kim", role="ADMIN", company=OTHER)


@pytest.fixture
def store() -> InMemoryRowStore:
    return InMemoryRowStore(
        {
            "Companies": [
                [ACME, "200000", "TRUE"],
                [OTHER, "100,000", "TRUE"],
                ["Closed Inc", "0", "FALSE"],
            ],
            "Users": [
                ["kim@acme.test", "Kim", "", "USER", "TRUE", ACME, "2024-01-01"],
                ["lee@acme.test", "Lee", "", "USER", "TRUE", ACME, "2024-01-01"],
                ["park@acme.test", "Park", "", "ADMIN", "TRUE", ACME, "2024-01-01"],
                ["choi@acme.test", "Choi", "", "USER", "FALSE", ACME, "2024-01-01"],
                ["kim@other.test", "Kim", "", "ADMIN", "TRUE", OTHER, "2024-01-01"],
            ],
            "ExpenseMaster": [],
            "ExpenseDetail": [],
            "MenuCatalog": [
                ["김치찌개", ACME],
                ["된장찌개", ACME],
                ["피자", OTHER],
            ],
            "Notices": [
                ["Card limit raised", "2024-04-01", ACME],
                ["Welcome", "2024-05-02", ACME],
                ["Other news", "2024-05-03", OTHER],
            ],
        }
    )
