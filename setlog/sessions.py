"""Rebuild session -> exercise -> set view models from a flat, unordered row stream."""

from __future__ import annotations

from typing import Optional

from .catalog import Catalog
from .models import SessionExercise, SessionSet, SessionSummary, SetLogRow


def session_key(row: SetLogRow) -> str:
    """Rows without a session_id fall back to their own timestamp as the group key."""
    return row.session_id or row.timestamp


def to_session_set(row: SetLogRow) -> SessionSet:
    return SessionSet(
        id=row.id,
        weight=row.weight,
        reps=row.reps,
        notes=row.notes,
        unit=row.unit,
        timestamp=row.timestamp,
        updated_at=row.updated_at,
    )


def reconstruct(rows: list[SetLogRow], catalog: Catalog) -> list[SessionSummary]:
    """
    Group rows into sessions, newest first.

    - sets within an exercise: ascending by timestamp
    - exercises within a session: ascending by their first set's timestamp
    - started_at / day_key: taken from the first row seen for the session in input order
    All sorts are stable, so rows sharing a timestamp keep their input order.
    """
    groups: dict[str, list[SetLogRow]] = {}
    for row in rows:
        groups.setdefault(session_key(row), []).append(row)

    sessions: list[SessionSummary] = []
    for key, group in groups.items():
        first = group[0]
        by_exercise: dict[str, list[SetLogRow]] = {}
        for row in group:
            by_exercise.setdefault(row.exercise_key, []).append(row)

        exercises: list[SessionExercise] = []
        for exercise_key, ex_rows in by_exercise.items():
            ordered = sorted(ex_rows, key=lambda r: r.timestamp)
            exercises.append(SessionExercise(
                exercise_key=exercise_key,
                exercise_name=catalog.exercise_name(exercise_key),
                sets=[to_session_set(r) for r in ordered],
            ))
        exercises.sort(key=lambda e: e.sets[0].timestamp)

        sessions.append(SessionSummary(
            session_id=key,
            started_at=first.timestamp,
            day_key=first.day_key,
            day_name=catalog.day_name(first.day_key),
            exercises=exercises,
        ))

    sessions.sort(key=lambda s: s.started_at, reverse=True)
    return sessions


def find_session(sessions: list[SessionSummary], session_id: str) -> Optional[SessionSummary]:
    return next((s for s in sessions if s.session_id == session_id), None)


def recent_sessions(sessions: list[SessionSummary], limit: int) -> list[SessionSummary]:
    """First `limit` sessions of reconstruct() output, which is newest first with one summary per id."""
    if limit <= 0:
        return []
    return sessions[:limit]
