from app.schemas.expense import CamelModel


class CompanyOut(CamelModel):
    name: str
    monthly_limit: int


class NoticeOut(CamelModel):
    content: str
    date: str


class MonthlyUsage(CamelModel):
    year: int
    month: int
    used: int
    limit: int
    remaining: int
