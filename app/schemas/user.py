from pydantic import EmailStr, Field

from app.models.user import ROLE_ADMIN, ROLE_USER
from app.schemas.expense import CamelModel


class CurrentUser(CamelModel):
    email: str
    name: str
    role: str = ROLE_USER
    company_name: str
    password_changed_at: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class UserCreate(CamelModel):
    email: EmailStr
    name: str = Field(min_length=1)
    password: str = Field(min_length=4)
    company_name: str = Field(min_length=1)


class UserLogin(CamelModel):
    email: str
    password: str


class PasswordChange(CamelModel):
    current_password: str
    new_password: str = Field(min_length=4)


class UserOut(CamelModel):
    email: str
    name: str
    role: str = ROLE_USER
    company_name: str = ""
