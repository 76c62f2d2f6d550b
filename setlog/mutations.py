"""In-place edit and delete of single rows, addressed through the RowLocator."""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Optional

from .codec import column_index, now_iso, number_cell
from .errors import InvalidArgument, NotFound
from .locator import RowLocator
from .store import SheetStore, a1_cell, a1_range

logger = logging.getLogger(__name__)


def _check_number(name: str, value: Optional[float]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} must be a number")
    if not math.isfinite(value) or value < 0:
        raise InvalidArgument(f"{name} must be a finite, non-negative number")


class MutationEngine:
    """
    Read-merge-write against a sheet row. There is no lock or version check: two
    writers targeting the same row race, and a delete between another call's
    locate and write shifts the rows under it. Such races surface as ordinary
    failures (usually NotFound) and are not retried.
    """

    def __init__(
        self,
        store: SheetStore,
        sheet: str,
        locator: Optional[RowLocator] = None,
        clock: Callable[[], str] = now_iso,
    ):
        self.store = store
        self.sheet = sheet
        self.locator = locator or RowLocator(store, sheet)
        self.clock = clock

    def update(
        self,
        row_id: str,
        weight: Optional[float] = None,
        reps: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> None:
        """Merge the given fields into the row and stamp updated_at. id and timestamp are never written."""
        if weight is None and reps is None and notes is None:
            raise InvalidArgument("At least one of weight, reps, notes is required")
        _check_number("weight", weight)
        _check_number("reps", reps)

        located = self.locator.find(row_id)
        header = list(located.header)
        current = self.store.read_all(a1_range(self.sheet, located.position, located.position))
        cells: list[Any] = list(current[0]) if current else []
        id_col = column_index(header)["id"]
        if id_col >= len(cells) or str(cells[id_col]).strip() != row_id.strip():
            # another writer shifted rows between the scan and this read
            raise NotFound(f"Row {row_id!r} moved before it could be updated")

        changes: dict[str, Any] = {}
        if weight is not None:
            changes["weight"] = number_cell(weight)
        if reps is not None:
            changes["reps"] = number_cell(reps)
        if notes is not None:
            changes["notes"] = notes
        for name in changes:
            if name not in header:
                raise InvalidArgument(f"Sheet has no {name} column")

        # nothing is written until every target column is known to exist
        if "updated_at" not in header:
            header.append("updated_at")
            self.store.write_range(a1_cell(self.sheet, 1, len(header) - 1), [["updated_at"]])
            logger.info("Added updated_at column to sheet %s", self.sheet)
        index = column_index(header)
        if len(cells) < len(header):
            cells.extend([""] * (len(header) - len(cells)))

        changes["updated_at"] = self.clock()
        for name, value in changes.items():
            cells[index[name]] = value

        self.store.write_range(a1_range(self.sheet, located.position), [cells])
        logger.info("Updated row %s at sheet row %d (%s)", row_id, located.position, ", ".join(sorted(changes)))

    def delete(self, row_id: str) -> None:
        """Remove the row; every later row moves up one position."""
        position = self.locator.locate(row_id)
        self.store.delete_rows(position - 1, position)
        logger.info("Deleted row %s at sheet row %d", row_id, position)
