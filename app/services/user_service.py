from datetime import date
from app.core.errors import NotFound, ValidationError
from app.core.security import hash_password, verify_password
from app.models.user import ROLE_USER, UserRecord
from app.schemas.user import UserCreate
from app.services.company_services import get_company
from app.store.base import RowStore

USERS = UserRecord.__tablename__

async def _user_rows(store: RowStore) -> list[tuple[int, UserRecord]]:
    rows = await store.get(USERS)
    return [(i, UserRecord.from_row(r)) for i, r in enumerate(rows) if r]

async def get_user_by_email(store: RowStore, email:str):
    for _, user in await _user_rows(store):
        if user.email == email:
            return user
    return None

async def get_all_users(store: RowStore, company_name: str):
    return [
        user for _, user in await _user_rows(store)
        if user.is_active and user.company_name == company_name
    ]

async def company_directory(store: RowStore, company_name: str) -> dict[str, str]:
    """Display name -> email for everyone registered under the company."""
    directory = {}
    for _, user in await _user_rows(store):
        if user.company_name == company_name and user.name:
            directory.setdefault(user.name, user.email)
    return directory

async def create_user(store: RowStore, data: UserCreate):
    existing = await get_user_by_email(store, data.email)
    if existing:
        raise ValueError("User already Exists")

    company = await get_company(store, data.company_name)
    if not company or not company.is_active:
        raise ValueError("Unknown company")

    user = UserRecord(
        email = data.email,
        name = data.name.strip(),
        password_hash = hash_password(data.password),
        role = ROLE_USER,
        is_active = True,
        company_name = company.name,
        password_changed_at = date.today().isoformat(),
    )

    await store.append(USERS, [user.to_row()])
    return user

async def change_password(store: RowStore, email: str, current_password: str, new_password: str):
    match = next(((i, u) for i, u in await _user_rows(store) if u.email == email), None)

    if not match:
        raise NotFound("User does not exist")

    index, user = match
    if not verify_password(current_password, user.password_hash):
        raise ValidationError("Current password does not match")

    updated = UserRecord(
        email = user.email,
        name = user.name,
        password_hash = hash_password(new_password),
        role = user.role,
        is_active = user.is_active,
        company_name = user.company_name,
        password_changed_at = date.today().isoformat(),
    )

    await store.update(USERS, index, [updated.to_row()])
    return updated
