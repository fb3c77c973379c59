from dataclasses import dataclass

from app.core.utils import cell, parse_amount


@dataclass(frozen=True, slots=True)
class ExpenseShare:
    __tablename__ = "ExpenseDetail"

    master_id: str
    user_name: str
    amount: int
    menu: str
    company_name: str

    @classmethod
    def from_row(cls, row: list) -> "ExpenseShare":
        return cls(
            master_id=cell(row, 0),
            user_name=cell(row, 1),
            amount=parse_amount(cell(row, 2)),
            menu=cell(row, 3),
            company_name=cell(row, 4),
        )

    def to_row(self) -> list:
        return [self.master_id, self.user_name, self.amount, self.menu, self.company_name]
