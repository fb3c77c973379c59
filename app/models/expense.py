from dataclasses import dataclass
from datetime import date

from app.core.utils import bool_cell, cell, parse_amount, parse_bool_cell, parse_cell_date

# Fixed memo categories. Any other memo is "기타" (other); adding a label here
# narrows what the "기타" filter matches.
LUNCH = "점심식대"
DINNER = "저녁식대"
LATE_NIGHT = "야근식대"
TRANSPORT = "차대"
HOLIDAY_WORK = "휴일근무"

FIXED_MEMOS = (LUNCH, DINNER, LATE_NIGHT, TRANSPORT, HOLIDAY_WORK)
MEAL_MEMOS = (LUNCH, DINNER, LATE_NIGHT)

ALL_TYPES = "전체"
OTHER_TYPE = "기타"


@dataclass(frozen=True, slots=True)
class ExpenseMaster:
    __tablename__ = "ExpenseMaster"

    id: str
    date: date | None
    registrant_email: str
    registrant_name: str
    total_amount: int
    memo: str
    is_card_usage: bool
    company_name: str
    created_at: str = ""

    @classmethod
    def from_row(cls, row: list) -> "ExpenseMaster":
        return cls(
            id=cell(row, 0),
            date=parse_cell_date(cell(row, 1)),
            registrant_email=cell(row, 2),
            registrant_name=cell(row, 3),
            total_amount=parse_amount(cell(row, 4)),
            memo=cell(row, 5),
            is_card_usage=parse_bool_cell(cell(row, 6)),
            company_name=cell(row, 7),
            created_at=cell(row, 8),
        )

    def to_row(self) -> list:
        return [
            self.id,
            self.date.isoformat() if self.date else "",
            self.registrant_email,
            self.registrant_name,
            self.total_amount,
            self.memo,
            bool_cell(self.is_card_usage),
            self.company_name,
            self.created_at,
        ]
