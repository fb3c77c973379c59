from datetime import date
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class ViewType(str, Enum):
    REGISTRANT = "registrant"
    USER = "user"
    ADMIN = "admin"
    ADMIN_SUMMARY = "admin-summary"

class ShareInput(CamelModel):
    name: str = Field(min_length=1)
    amount: int = Field(ge=0)
    menu: str | None = None
    custom_menu: str | None = None

class ExpenseForm(CamelModel):
    date: date
    memo: str = ""
    is_card_usage: bool = True
    users: List[ShareInput] = Field(min_length=1)

class ShareOut(CamelModel):
    name: str
    email: str = ""
    amount: int
    menu: str = ""

class Registrant(CamelModel):
    email: str
    name: str
    company_name: str

class ExpenseRecord(CamelModel):
    id: str
    date: str
    registrant: Registrant
    amount: int
    memo: str
    is_card_usage: bool | None = None
    users: List[ShareOut]

class ExpenseFilters(CamelModel):
    start_date: str | None = None
    end_date: str | None = None
    is_card_usage: bool | None = None
    view_type: ViewType = ViewType.REGISTRANT
    selected_user: str | None = None
    expense_types: str | None = None
    search_keyword: str | None = None

class ExpenseCreated(CamelModel):
    message: str
    expense_id: str
