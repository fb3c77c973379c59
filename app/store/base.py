"""Row store interface.

Tables are flat lists of string cells with one header row. Row indexes are
0-based over the data rows (header excluded), and `get` keeps cleared rows
as empty lists so indexes stay aligned with the underlying sheet.
"""

from __future__ import annotations

from typing import Iterable, Protocol


class RowStore(Protocol):
    async def get(self, table: str) -> list[list[str]]:
        ...

    async def append(self, table: str, rows: list[list]) -> None:
        ...

    async def update(self, table: str, row_index: int, rows: list[list]) -> None:
        ...

    async def clear(self, table: str, row_indexes: Iterable[int]) -> None:
        ...


def col_to_a1(col_index_zero_based: int) -> str:
    """Convert 0-based column index to A1 column letters (0->A, 25->Z, 26->AA)."""

    if col_index_zero_based < 0:
        raise ValueError("col_index_zero_based must be >= 0")

    result = ""
    n = col_index_zero_based
    while True:
        n, rem = divmod(n, 26)
        result = chr(ord("A") + rem) + result
        if n == 0:
            break
        n -= 1

    return result
