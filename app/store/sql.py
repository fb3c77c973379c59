"""SQL row store: positional sheet rows kept in one table.

Used for local development in place of a spreadsheet. Cleared rows stay in
place with no cells, same as a cleared spreadsheet row.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.errors import UpstreamStoreError
from app.models.sheet_row import SheetRow

logger = logging.getLogger(__name__)


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    return str(value)


class SqlRowStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        # max(position) is read before the insert, so writers of one table take turns
        self._table_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def get(self, table: str) -> list[list[str]]:
        q = select(SheetRow.position, SheetRow.cells).where(SheetRow.sheet == table).order_by(SheetRow.position)
        try:
            async with self._session_factory() as db:
                res = await db.execute(q)
                stored = res.all()
        except SQLAlchemyError as e:
            logger.error("SQL get on %s failed: %s", table, e)
            raise UpstreamStoreError("Row store read failed") from e

        if not stored:
            return []

        rows: list[list[str]] = [[] for _ in range(stored[-1].position + 1)]
        for position, cells in stored:
            rows[position] = list(cells or [])

        # a spreadsheet omits trailing empty rows
        while rows and not rows[-1]:
            rows.pop()
        return rows

    async def append(self, table: str, rows: list[list]) -> None:
        if not rows:
            return

        try:
            async with self._table_locks[table], self._session_factory() as db:
                res = await db.execute(
                    select(func.max(SheetRow.position)).where(SheetRow.sheet == table)
                )
                last = res.scalar()
                start = 0 if last is None else last + 1

                for offset, row in enumerate(rows):
                    db.add(SheetRow(sheet=table, position=start + offset, cells=[_text(v) for v in row]))

                await db.commit()
        except SQLAlchemyError as e:
            logger.error("SQL append on %s failed: %s", table, e)
            raise UpstreamStoreError("Row store append failed") from e

    async def update(self, table: str, row_index: int, rows: list[list]) -> None:
        if not rows:
            return

        positions = list(range(row_index, row_index + len(rows)))
        try:
            async with self._table_locks[table], self._session_factory() as db:
                res = await db.execute(
                    select(SheetRow).where(SheetRow.sheet == table, SheetRow.position.in_(positions))
                )
                existing = {r.position: r for r in res.scalars().all()}

                for position, row in zip(positions, rows):
                    cells = [_text(v) for v in row]
                    if position in existing:
                        existing[position].cells = cells
                    else:
                        db.add(SheetRow(sheet=table, position=position, cells=cells))

                await db.commit()
        except SQLAlchemyError as e:
            logger.error("SQL update on %s failed: %s", table, e)
            raise UpstreamStoreError("Row store update failed") from e

    async def clear(self, table: str, row_indexes: Iterable[int]) -> None:
        positions = sorted(set(row_indexes))
        if not positions:
            return

        try:
            async with self._session_factory() as db:
                res = await db.execute(
                    select(SheetRow).where(SheetRow.sheet == table, SheetRow.position.in_(positions))
                )
                for r in res.scalars().all():
                    r.cells = []

                await db.commit()
        except SQLAlchemyError as e:
            logger.error("SQL clear on %s failed: %s", table, e)
            raise UpstreamStoreError("Row store clear failed") from e
