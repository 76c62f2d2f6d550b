#!/usr/bin/env python3
"""
Add an `id` column to the configured set_log sheet and backfill ids for existing rows.
Reads SETLOG_SPREADSHEET_ID / GOOGLE_SERVICE_ACCOUNT_JSON from the environment.
Usage: python scripts/backfill_ids.py
"""
from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from setlog.config import configure_logging, load_settings
from setlog.errors import StoreUnavailable
from setlog.migrate import backfill_ids
from setlog.store import build_store


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    if not settings.spreadsheet_id:
        print("SETLOG_SPREADSHEET_ID is not set")
        sys.exit(1)
    try:
        store = build_store(settings)
        written = backfill_ids(store, settings.sheet_name)
    except StoreUnavailable as e:
        print(f"Backfill failed: {e}")
        sys.exit(1)
    if written:
        print(f"Backfilled {written} id(s) in {settings.sheet_name}")
    else:
        print("Nothing to backfill")


if __name__ == "__main__":
    main()
