"""Collapse rows that were appended twice for the same logged set."""

from __future__ import annotations

from .models import SetLogRow

Fingerprint = tuple[str, str, str, str, float, float]


def fingerprint(row: SetLogRow) -> Fingerprint:
    """Append-time identity of a set; notes, unit and id are not part of it."""
    return (row.timestamp, row.session_id, row.day_key, row.exercise_key, row.weight, row.reps)


def dedupe(rows: list[SetLogRow]) -> list[SetLogRow]:
    """Order-preserving; the first row with a given fingerprint wins."""
    seen: set[Fingerprint] = set()
    out: list[SetLogRow] = []
    for row in rows:
        key = fingerprint(row)
        if key in seen:
            continue
        seen.add(key)
        out.append(row)
    return out
