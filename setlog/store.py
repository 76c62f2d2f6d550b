"""Sheet storage: the four row primitives the core needs, over Google Sheets or in memory."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Protocol

from .config import Settings, load_service_account_info
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

Matrix = list[list[Any]]


class SheetStore(Protocol):
    """Row-addressed sheet access. Rows are 1-based in A1 ranges (header is row 1);
    delete_rows takes 0-based [start_index, end_index) like the Sheets API."""

    sheet_name: str

    def read_all(self, range_: str) -> Matrix: ...

    def append(self, range_: str, rows: Matrix) -> None: ...

    def write_range(self, range_: str, rows: Matrix) -> None: ...

    def delete_rows(self, start_index: int, end_index: int) -> None: ...


def quote_sheet(sheet: str) -> str:
    if re.fullmatch(r"[A-Za-z0-9_]+", sheet):
        return sheet
    return "'" + sheet.replace("'", "''") + "'"


def a1_range(sheet: str, start_row: Optional[int] = None, end_row: Optional[int] = None) -> str:
    """
    a1_range("set_log") -> whole sheet; a1_range("set_log", 5) -> "set_log!A5" (write anchor);
    a1_range("set_log", 5, 5) -> "set_log!5:5" (full row read).
    """
    sheet_ref = quote_sheet(sheet)
    if start_row is None:
        return sheet_ref
    if end_row is None:
        return f"{sheet_ref}!A{start_row}"
    return f"{sheet_ref}!{start_row}:{end_row}"


def column_letter(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA'."""
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def column_number(letters: str) -> int:
    """Inverse of column_letter; '' (no column given) -> 0."""
    n = 0
    for ch in letters:
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return max(n - 1, 0)


def a1_cell(sheet: str, row: int, column: int) -> str:
    """a1_cell("set_log", 1, 9) -> "set_log!J1"."""
    return f"{quote_sheet(sheet)}!{column_letter(column)}{row}"


_A1_RE = re.compile(r"^(?P<sheet>'(?:[^']|'')+'|[^!]+)(?:!(?P<ref>.+))?$")
_ROWS_RE = re.compile(r"^(?P<col>[A-Z]*)(?P<start>\d+)(?::(?:[A-Z]*)(?P<end>\d+))?$")


def parse_a1(range_: str) -> tuple[str, Optional[int], Optional[int], int]:
    """Inverse of a1_range / a1_cell: (sheet, start_row, end_row, start_column)."""
    m = _A1_RE.match(range_.strip())
    if not m:
        raise ValueError(f"Unsupported range: {range_!r}")
    sheet = m.group("sheet")
    if sheet.startswith("'"):
        sheet = sheet[1:-1].replace("''", "'")
    ref = m.group("ref")
    if not ref:
        return sheet, None, None, 0
    rows = _ROWS_RE.match(ref.upper())
    if not rows:
        raise ValueError(f"Unsupported range: {range_!r}")
    start = int(rows.group("start"))
    end = int(rows.group("end")) if rows.group("end") else None
    return sheet, start, end, column_number(rows.group("col"))


class MemorySheetStore:
    """In-process sheet with the same read/trim behavior as the Sheets values API."""

    def __init__(self, sheet_name: str = "set_log", rows: Optional[Matrix] = None):
        self.sheet_name = sheet_name
        self.rows: Matrix = [list(r) for r in rows or []]

    def _check_sheet(self, sheet: str) -> None:
        if sheet != self.sheet_name:
            raise StoreUnavailable(f"Unknown sheet: {sheet}")

    @staticmethod
    def _trim(row: list[Any]) -> list[Any]:
        out = list(row)
        while out and out[-1] in ("", None):
            out.pop()
        return out

    def _last_filled(self) -> int:
        n = len(self.rows)
        while n and not self._trim(self.rows[n - 1]):
            n -= 1
        return n

    def read_all(self, range_: str) -> Matrix:
        sheet, start, end, _ = parse_a1(range_)
        self._check_sheet(sheet)
        last = self._last_filled()
        lo = (start or 1) - 1
        hi = last if end is None else min(end, last)
        return [self._trim(r) for r in self.rows[lo:hi]]

    def append(self, range_: str, rows: Matrix) -> None:
        sheet, _, _, _ = parse_a1(range_)
        self._check_sheet(sheet)
        del self.rows[self._last_filled():]
        self.rows.extend(list(r) for r in rows)

    def write_range(self, range_: str, rows: Matrix) -> None:
        sheet, start, _, left = parse_a1(range_)
        self._check_sheet(sheet)
        top = (start or 1) - 1
        while len(self.rows) < top + len(rows):
            self.rows.append([])
        for offset, values in enumerate(rows):
            target = self.rows[top + offset]
            width = left + len(values)
            if len(target) < width:
                target.extend([""] * (width - len(target)))
            for i, value in enumerate(values):
                target[left + i] = value

    def delete_rows(self, start_index: int, end_index: int) -> None:
        del self.rows[start_index:end_index]


class GoogleSheetStore:
    """Google Sheets v4 values API. Every transport or auth failure becomes StoreUnavailable."""

    def __init__(self, spreadsheets: Any, spreadsheet_id: str, sheet_name: str):
        self._ss = spreadsheets
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self._sheet_id: Optional[int] = None

    def _execute(self, request: Any) -> dict:
        import httplib2
        from google.auth.exceptions import GoogleAuthError
        from googleapiclient.errors import HttpError

        try:
            return request.execute() or {}
        except (HttpError, httplib2.HttpLib2Error, GoogleAuthError, OSError) as e:
            logger.warning("Sheets request failed: %s", e)
            raise StoreUnavailable(f"Sheets request failed: {e}") from e

    def read_all(self, range_: str) -> Matrix:
        result = self._execute(self._ss.values().get(
            spreadsheetId=self.spreadsheet_id,
            range=range_,
            valueRenderOption="UNFORMATTED_VALUE",
        ))
        return result.get("values", [])

    def append(self, range_: str, rows: Matrix) -> None:
        self._execute(self._ss.values().append(
            spreadsheetId=self.spreadsheet_id,
            range=range_,
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": rows},
        ))

    def write_range(self, range_: str, rows: Matrix) -> None:
        self._execute(self._ss.values().update(
            spreadsheetId=self.spreadsheet_id,
            range=range_,
            valueInputOption="USER_ENTERED",
            body={"values": rows},
        ))

    def _resolve_sheet_id(self) -> int:
        if self._sheet_id is None:
            meta = self._execute(self._ss.get(
                spreadsheetId=self.spreadsheet_id,
                fields="sheets.properties",
            ))
            for sheet in meta.get("sheets", []):
                props = sheet.get("properties", {})
                if props.get("title") == self.sheet_name:
                    self._sheet_id = props.get("sheetId", 0)
                    break
            else:
                raise StoreUnavailable(f"Sheet {self.sheet_name!r} not found in spreadsheet")
        return self._sheet_id

    def delete_rows(self, start_index: int, end_index: int) -> None:
        self._execute(self._ss.batchUpdate(
            spreadsheetId=self.spreadsheet_id,
            body={"requests": [{
                "deleteDimension": {
                    "range": {
                        "sheetId": self._resolve_sheet_id(),
                        "dimension": "ROWS",
                        "startIndex": start_index,
                        "endIndex": end_index,
                    }
                }
            }]},
        ))


def build_store(settings: Settings) -> SheetStore:
    """GoogleSheetStore when a spreadsheet is configured, else an empty in-memory sheet."""
    if not settings.spreadsheet_id:
        logger.warning("No spreadsheet configured; using an in-memory sheet (data is not persisted)")
        return MemorySheetStore(settings.sheet_name)

    from google.auth.exceptions import GoogleAuthError
    from google.oauth2 import service_account
    from googleapiclient.discovery import build

    info = load_service_account_info(settings.service_account_json)
    try:
        creds = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
        service = build("sheets", "v4", credentials=creds, cache_discovery=False)
    except (GoogleAuthError, ValueError, KeyError) as e:
        raise StoreUnavailable(f"Could not create Sheets client: {e}") from e
    logger.info("Using Google sheet %r in spreadsheet %s", settings.sheet_name, settings.spreadsheet_id)
    return GoogleSheetStore(service.spreadsheets(), settings.spreadsheet_id, settings.sheet_name)
