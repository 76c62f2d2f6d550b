#!/usr/bin/env python3
"""
Print recent sessions rebuilt from the set_log sheet (or a JSON dump of its values).
Usage: python scripts/show_sessions.py [sheet_values.json] [limit]
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from setlog.config import load_settings
from setlog.models import SessionHistoryInput
from setlog.service import get_session_history_impl
from setlog.store import MemorySheetStore, build_store


def main() -> None:
    settings = load_settings()
    if len(sys.argv) > 1:
        rows = json.loads(Path(sys.argv[1]).read_text(encoding="utf-8"))
        store = MemorySheetStore(settings.sheet_name, rows)
    else:
        store = build_store(settings)
    limit = int(sys.argv[2]) if len(sys.argv) > 2 else 10

    result = get_session_history_impl(SessionHistoryInput(limit=limit), store, settings)
    if result.status != "ok":
        print(f"Error: [{result.error.type}] {result.error.message}")
        sys.exit(1)
    for sess in result.sessions:
        print(f"\n{'='*60}")
        print(f"{sess.day_name}  session={sess.session_id}  started={sess.started_at}")
        print("=" * 60)
        for ex in sess.exercises:
            sets_str = ", ".join(f"{s.weight:g}{s.unit} x {s.reps:g}" for s in ex.sets)
            print(f"  {ex.exercise_name}: {sets_str}")


if __name__ == "__main__":
    main()
