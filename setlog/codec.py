"""Row codec: sheet cell matrix <-> SetLogRow, tolerant of column drift and missing trailing cells."""

from __future__ import annotations

import logging
import math
import re
import secrets
from datetime import datetime, timezone
from typing import Any, Optional

from .models import SetLogRow

logger = logging.getLogger(__name__)

# Current schema, in sheet column order.
COLUMNS: list[str] = [
    "id",
    "timestamp",
    "session_id",
    "day_key",
    "exercise_key",
    "unit",
    "weight",
    "reps",
    "notes",
    "updated_at",
]

# Sheets created before the header row (and before id / updated_at) use this fixed order.
LEGACY_COLUMNS: list[str] = [
    "timestamp",
    "session_id",
    "day_key",
    "exercise_key",
    "unit",
    "weight",
    "reps",
    "notes",
]

DEFAULT_UNIT = "lb"
ID_LENGTH = 21


def generate_id() -> str:
    """URL-safe random id (21 chars, same alphabet and length as nanoid)."""
    return secrets.token_urlsafe(16)[:ID_LENGTH]


def now_iso() -> str:
    """Current UTC instant as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_header(cell: Any) -> str:
    """'Exercise Key ' -> 'exercise_key'."""
    return re.sub(r"\s+", "_", str(cell if cell is not None else "").strip().lower())


def detect_header(raw: list[list[Any]]) -> Optional[list[str]]:
    """Return the normalized header if the first row looks like one, else None."""
    if not raw:
        return None
    first = [normalize_header(c) for c in raw[0]]
    if "timestamp" in first and "exercise_key" in first:
        return first
    return None


def column_index(header: list[str]) -> dict[str, int]:
    """Column name -> position; first occurrence wins when a name repeats."""
    index: dict[str, int] = {}
    for i, name in enumerate(header):
        if name and name not in index:
            index[name] = i
    return index


def parse_number(value: Any) -> Optional[float]:
    """Finite, non-negative number from a cell value; None when unusable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
    if not math.isfinite(num) or num < 0:
        return None
    return num


def _cell(cells: list[Any], index: dict[str, int], name: str) -> Any:
    pos = index.get(name)
    if pos is None or pos >= len(cells):
        return None
    return cells[pos]


def _text(cells: list[Any], index: dict[str, int], name: str) -> str:
    value = _cell(cells, index, name)
    return "" if value is None else str(value)


def decode_row(cells: list[Any], index: dict[str, int]) -> Optional[SetLogRow]:
    """Decode one data row; None when weight or reps do not parse."""
    weight = parse_number(_cell(cells, index, "weight"))
    reps = parse_number(_cell(cells, index, "reps"))
    if weight is None or reps is None:
        return None
    updated_at = _text(cells, index, "updated_at").strip()
    return SetLogRow(
        id=_text(cells, index, "id").strip(),
        timestamp=_text(cells, index, "timestamp"),
        session_id=_text(cells, index, "session_id"),
        day_key=_text(cells, index, "day_key"),
        exercise_key=_text(cells, index, "exercise_key"),
        weight=weight,
        reps=reps,
        unit=_text(cells, index, "unit").strip() or DEFAULT_UNIT,
        notes=_text(cells, index, "notes"),
        updated_at=updated_at or None,
    )


def decode_rows_with_positions(raw: list[list[Any]]) -> list[tuple[int, SetLogRow]]:
    """
    Decode a full-sheet read into (physical_row, row) pairs. physical_row is the
    1-based sheet row number (the header, when present, is row 1).
    Rows with unparseable weight/reps are dropped, not reported as errors.
    """
    if not raw:
        return []
    header = detect_header(raw)
    index = column_index(header if header is not None else LEGACY_COLUMNS)
    start = 1 if header is not None else 0
    out: list[tuple[int, SetLogRow]] = []
    dropped = 0
    for i in range(start, len(raw)):
        cells = raw[i] or []
        row = decode_row(cells, index)
        if row is None:
            dropped += 1
            continue
        out.append((i + 1, row))
    if dropped:
        logger.debug("Dropped %d row(s) with unparseable weight/reps", dropped)
    return out


def decode_rows(raw: list[list[Any]]) -> list[SetLogRow]:
    """Decode a full-sheet read into rows, in sheet order."""
    return [row for _, row in decode_rows_with_positions(raw)]


def number_cell(value: float) -> float | int:
    return int(value) if float(value).is_integer() else value


def encode_row(row: SetLogRow) -> list[Any]:
    """
    Encode a row in COLUMNS order. A missing id is generated here; updated_at is
    written as an empty cell until the row has been edited.
    """
    return [
        row.id or generate_id(),
        row.timestamp,
        row.session_id,
        row.day_key,
        row.exercise_key,
        row.unit or DEFAULT_UNIT,
        number_cell(row.weight),
        number_cell(row.reps),
        row.notes or "",
        row.updated_at or "",
    ]


def encode_for_header(row: SetLogRow, header: list[str]) -> list[Any]:
    """encode_row() laid out in an existing sheet's column order; unknown columns stay empty."""
    by_name = dict(zip(COLUMNS, encode_row(row)))
    cells = [by_name.get(name, "") for name in header]
    while cells and cells[-1] == "":
        cells.pop()
    return cells
