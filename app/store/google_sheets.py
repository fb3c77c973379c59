"""Google Sheets row store (service-account based).

All network calls live here. The Sheets client is blocking, so each call runs
in a worker thread and a fresh service object is built per call.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Any, Iterable

from googleapiclient.errors import HttpError
from google.auth.exceptions import GoogleAuthError

from app.core.errors import UpstreamStoreError
from app.store.base import col_to_a1

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# Widest table is ExpenseMaster (9 columns); leave room for extra columns.
LAST_COLUMN = col_to_a1(25)

# Sheet rows are 1-based and row 1 is the header.
FIRST_DATA_ROW = 2


def data_range(table: str) -> str:
    return f"'{table}'!A{FIRST_DATA_ROW}:{LAST_COLUMN}"


def row_range(table: str, row_index: int) -> str:
    sheet_row = row_index + FIRST_DATA_ROW
    return f"'{table}'!A{sheet_row}:{LAST_COLUMN}{sheet_row}"


def _cells(rows: list[list]) -> list[list]:
    return [["" if v is None else v for v in row] for row in rows]


class GoogleSheetsRowStore:
    def __init__(
        self,
        *,
        spreadsheet_id: str,
        credentials_info: dict[str, Any] | None = None,
        service_account_path: str | None = None,
        timeout_seconds: int = 30,
    ) -> None:
        if not credentials_info and not service_account_path:
            raise ValueError("Google Sheets credentials are missing")

        self._spreadsheet_id = spreadsheet_id
        self._credentials_info = credentials_info
        self._service_account_path = (
            os.path.expanduser(service_account_path) if service_account_path else None
        )
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings) -> "GoogleSheetsRowStore":
        if not settings.SHEET_ID:
            raise ValueError("Missing SHEET_ID")

        credentials_info = None
        if settings.GOOGLE_SHEETS_CREDENTIALS:
            credentials_info = json.loads(settings.GOOGLE_SHEETS_CREDENTIALS)
            if not credentials_info.get("client_email") or not credentials_info.get("private_key"):
                raise ValueError("GOOGLE_SHEETS_CREDENTIALS needs client_email and private_key")

        return cls(
            spreadsheet_id=settings.SHEET_ID,
            credentials_info=credentials_info,
            service_account_path=settings.GOOGLE_SA_FILE or None,
            timeout_seconds=settings.GOOGLE_HTTP_TIMEOUT_SECONDS,
        )

    @property
    def spreadsheet_id(self) -> str:
        return self._spreadsheet_id

    def _build_sheets_service(self) -> Any:
        import httplib2
        from google.oauth2 import service_account
        from google_auth_httplib2 import AuthorizedHttp
        from googleapiclient.discovery import build

        info = self._credentials_info
        if info is None:
            if not os.path.exists(self._service_account_path):
                raise FileNotFoundError(
                    f"Service account file not found: {self._service_account_path}"
                )
            with open(self._service_account_path, "r", encoding="utf-8") as f:
                info = json.load(f)

        creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        http = AuthorizedHttp(creds, http=httplib2.Http(timeout=self._timeout_seconds))

        return build("sheets", "v4", http=http, cache_discovery=False)

    async def _call(self, op: str, table: str, fn) -> Any:
        try:
            return await asyncio.to_thread(fn)
        except (HttpError, GoogleAuthError, OSError) as e:
            logger.error("Sheets %s on %s failed: %s", op, table, e)
            raise UpstreamStoreError(f"Google Sheets {op} failed") from e

    async def get(self, table: str) -> list[list[str]]:
        def _get():
            resp = (
                self._build_sheets_service()
                .spreadsheets()
                .values()
                .get(spreadsheetId=self._spreadsheet_id, range=data_range(table))
                .execute(num_retries=2)
            )
            rows = resp.get("values", [])
            return rows if isinstance(rows, list) else []

        return await self._call("get", table, _get)

    async def append(self, table: str, rows: list[list]) -> None:
        if not rows:
            return

        def _append():
            # RAW keeps dates and amounts as typed text; USER_ENTERED would reformat them.
            # INSERT_ROWS: OVERWRITE would write a multi-row append over live rows
            # that follow a cleared gap.
            return (
                self._build_sheets_service()
                .spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._spreadsheet_id,
                    range=data_range(table),
                    valueInputOption="RAW",
                    insertDataOption="INSERT_ROWS",
                    body={"values": _cells(rows)},
                )
                .execute()
            )

        await self._call("append", table, _append)

    async def update(self, table: str, row_index: int, rows: list[list]) -> None:
        if not rows:
            return

        last_index = row_index + len(rows) - 1
        a1_range = (
            f"'{table}'!A{row_index + FIRST_DATA_ROW}:{LAST_COLUMN}{last_index + FIRST_DATA_ROW}"
        )

        def _update():
            return (
                self._build_sheets_service()
                .spreadsheets()
                .values()
                .update(
                    spreadsheetId=self._spreadsheet_id,
                    range=a1_range,
                    valueInputOption="RAW",
                    body={"values": _cells(rows)},
                )
                .execute()
            )

        await self._call("update", table, _update)

    async def clear(self, table: str, row_indexes: Iterable[int]) -> None:
        ranges = [row_range(table, i) for i in sorted(set(row_indexes))]
        if not ranges:
            return

        def _clear():
            return (
                self._build_sheets_service()
                .spreadsheets()
                .values()
                .batchClear(spreadsheetId=self._spreadsheet_id, body={"ranges": ranges})
                .execute()
            )

        await self._call("clear", table, _clear)
