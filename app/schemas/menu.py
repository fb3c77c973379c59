from typing import List

from app.schemas.expense import CamelModel


class MenuStat(CamelModel):
    menu: str
    count: int
    percentage: str
    last_used: str


class MenuAnalysis(CamelModel):
    popularity: List[MenuStat]
    oldest_used: List[MenuStat]


class MenuCalendarEntry(CamelModel):
    date: str
    menu: str
    type: str
