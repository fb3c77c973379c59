from app.models.company import Company, Notice
from app.store.base import RowStore

COMPANIES = Company.__tablename__
NOTICES = Notice.__tablename__

async def list_companies(store: RowStore) -> list[Company]:
    rows = await store.get(COMPANIES)
    companies = [Company.from_row(r) for r in rows if r]
    return [c for c in companies if c.name and c.is_active]

async def get_company(store: RowStore, name: str) -> Company | None:
    rows = await store.get(COMPANIES)
    for r in rows:
        if not r:
            continue
        company = Company.from_row(r)
        if company.name == name:
            return company
    return None

async def list_notices(store: RowStore, company_name: str) -> list[Notice]:
    rows = await store.get(NOTICES)
    notices = [
        n for n in (Notice.from_row(r) for r in rows if r)
        if n.content and n.company_name == company_name
    ]
    notices.sort(key=lambda n: n.date.isoformat() if n.date else "", reverse=True)
    return notices
