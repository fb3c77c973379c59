from dataclasses import dataclass
from datetime import date

from app.core.utils import cell, parse_amount, parse_bool_cell, parse_cell_date


@dataclass(frozen=True, slots=True)
class Company:
    __tablename__ = "Companies"

    name: str
    monthly_limit: int
    is_active: bool

    @classmethod
    def from_row(cls, row: list) -> "Company":
        # a company row without the active column counts as active
        active = cell(row, 2)
        return cls(
            name=cell(row, 0),
            monthly_limit=parse_amount(cell(row, 1)),
            is_active=parse_bool_cell(active) if active else True,
        )


@dataclass(frozen=True, slots=True)
class MenuCatalogEntry:
    __tablename__ = "MenuCatalog"

    name: str
    company_name: str

    @classmethod
    def from_row(cls, row: list) -> "MenuCatalogEntry":
        return cls(name=cell(row, 0), company_name=cell(row, 1))

    def to_row(self) -> list:
        return [self.name, self.company_name]


@dataclass(frozen=True, slots=True)
class Notice:
    __tablename__ = "Notices"

    content: str
    date: date | None
    company_name: str

    @classmethod
    def from_row(cls, row: list) -> "Notice":
        return cls(
            content=cell(row, 0),
            date=parse_cell_date(cell(row, 1)),
            company_name=cell(row, 2),
        )
