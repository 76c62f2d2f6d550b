"""Find a row's physical position by id. The sheet has no index, so every lookup is a full scan (O(n))."""

from __future__ import annotations

from dataclasses import dataclass

from .codec import column_index, detect_header
from .errors import NotFound
from .store import SheetStore, a1_range


@dataclass(frozen=True)
class LocatedRow:
    position: int  # 1-based sheet row; always > 1 (row 1 is the header)
    header: list[str]  # normalized header of the sheet at scan time


class RowLocator:
    def __init__(self, store: SheetStore, sheet: str):
        self.store = store
        self.sheet = sheet

    def find(self, row_id: str) -> LocatedRow:
        """Scan the id column of the whole sheet. Raises NotFound."""
        wanted = (row_id or "").strip()
        if not wanted:
            raise NotFound("Row id is empty")
        raw = self.store.read_all(a1_range(self.sheet))
        header = detect_header(raw)
        if header is None or "id" not in header:
            raise NotFound(f"No row with id {wanted!r} (sheet has no id column)")
        id_col = column_index(header)["id"]
        for i in range(1, len(raw)):
            cells = raw[i] or []
            if id_col < len(cells) and str(cells[id_col]).strip() == wanted:
                # row 1 is the header, so positions start at 2
                return LocatedRow(position=i + 1, header=header)
        raise NotFound(f"No row with id {wanted!r}")

    def locate(self, row_id: str) -> int:
        """1-based physical row number of row_id (header excluded). Raises NotFound."""
        return self.find(row_id).position
