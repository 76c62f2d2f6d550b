"""One-time backfill of the id column for sheets created before rows carried ids."""

from __future__ import annotations

import logging

from .codec import LEGACY_COLUMNS, detect_header, generate_id
from .store import SheetStore, a1_range

logger = logging.getLogger(__name__)


def backfill_ids(store: SheetStore, sheet: str) -> int:
    """
    Prepend an `id` column and give every data row a fresh id. Returns the number
    of ids written; 0 when the sheet is empty or already has an id column.
    A headerless legacy sheet also gets its header row written.
    """
    raw = store.read_all(a1_range(sheet))
    if not raw:
        logger.info("Sheet %s is empty; nothing to backfill", sheet)
        return 0
    header = detect_header(raw)
    if header is not None and "id" in header:
        logger.info("Sheet %s already has an id column; skipping", sheet)
        return 0

    if header is None:
        out = [["id"] + LEGACY_COLUMNS]
        data = raw
    else:
        out = [["id"] + list(raw[0])]
        data = raw[1:]
    for cells in data:
        # blank rows keep a blank id so they stay blank
        out.append([generate_id() if any(str(c).strip() for c in cells) else ""] + list(cells))

    # pad to a rectangle so shifted rows overwrite every old cell
    width = max(len(r) for r in out)
    out = [r + [""] * (width - len(r)) for r in out]
    store.write_range(a1_range(sheet, 1), out)
    written = sum(1 for r in out[1:] if r[0])
    logger.info("Backfilled %d id(s) in sheet %s", written, sheet)
    return written
