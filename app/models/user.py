from dataclasses import dataclass

from app.core.utils import bool_cell, cell, parse_bool_cell

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"


@dataclass(frozen=True, slots=True)
class UserRecord:
    __tablename__ = "Users"

    email: str
    name: str
    password_hash: str
    role: str
    is_active: bool
    company_name: str
    password_changed_at: str = ""

    @classmethod
    def from_row(cls, row: list) -> "UserRecord":
        return cls(
            email=cell(row, 0),
            name=cell(row, 1),
            password_hash=cell(row, 2),
            role=cell(row, 3).upper() or ROLE_USER,
            is_active=parse_bool_cell(cell(row, 4)),
            company_name=cell(row, 5),
            password_changed_at=cell(row, 6),
        )

    def to_row(self) -> list:
        return [
            self.email,
            self.name,
            self.password_hash,
            self.role,
            bool_cell(self.is_active),
            self.company_name,
            self.password_changed_at,
        ]
