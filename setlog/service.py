"""Set-log operations: append sets, read history and sessions, edit and delete sets.

Every *_impl function returns an output model with status "ok" or "error"; core
exceptions (InvalidArgument, NotFound, StoreUnavailable) are converted here and
never propagate to the caller.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from .catalog import Catalog, load_catalog
from .codec import (
    COLUMNS,
    LEGACY_COLUMNS,
    column_index,
    decode_rows,
    detect_header,
    encode_for_header,
    generate_id,
    now_iso,
)
from .config import Settings
from .dedupe import dedupe
from .errors import InvalidArgument, NotFound, SetLogError
from .models import (
    DeleteSetInput,
    ErrorRecord,
    HistoryEntry,
    HistoryInput,
    HistoryOutput,
    LogSetsInput,
    LogSetsOutput,
    MutationOutput,
    ProgressInput,
    ProgressOutput,
    SessionHistoryInput,
    SessionHistoryOutput,
    SessionLookupInput,
    SessionOutput,
    SessionSummary,
    SetLogRow,
    UpdateSetInput,
)
from .mutations import MutationEngine
from .progress import top_set_per_session
from .sessions import find_session, reconstruct, recent_sessions
from .store import SheetStore, a1_cell, a1_range

logger = logging.getLogger(__name__)


def error_record(exc: SetLogError) -> ErrorRecord:
    return ErrorRecord(type=exc.error_type, message=str(exc))


def _settings(settings: Optional[Settings]) -> Settings:
    return settings or Settings()


# --- Reads ---

def read_rows(store: SheetStore, sheet: str) -> list[SetLogRow]:
    """All usable rows in sheet order (corrupt rows already dropped)."""
    return decode_rows(store.read_all(a1_range(sheet)))


def newest_first(rows: list[SetLogRow], limit: int) -> list[SetLogRow]:
    """Sort descending by timestamp (stable) and keep the newest `limit` rows."""
    ordered = sorted(rows, key=lambda r: r.timestamp, reverse=True)
    return ordered[: max(0, limit)]


def exercise_history(rows: list[SetLogRow], exercise_key: str, limit: int) -> list[SetLogRow]:
    """Rows for one exercise, newest first. Not deduplicated."""
    return newest_first([r for r in rows if r.exercise_key == exercise_key], limit)


def session_history(rows: list[SetLogRow], limit: int, catalog: Catalog) -> list[SessionSummary]:
    """Whole-sheet path: dedupe, newest `limit` rows, then rebuild sessions."""
    return reconstruct(newest_first(dedupe(rows), limit), catalog)


def _history_entry(row: SetLogRow) -> HistoryEntry:
    return HistoryEntry(
        id=row.id,
        timestamp=row.timestamp,
        session_id=row.session_id,
        weight=row.weight,
        reps=row.reps,
        notes=row.notes,
        unit=row.unit,
    )


def get_history_impl(
    payload: HistoryInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
) -> HistoryOutput:
    settings = _settings(settings)
    limit = settings.history_limit if payload.limit is None else min(payload.limit, settings.history_limit)
    try:
        rows = read_rows(store, settings.sheet_name)
    except SetLogError as e:
        return HistoryOutput(status="error", exercise_key=payload.exercise_key, error=error_record(e))
    entries = [_history_entry(r) for r in exercise_history(rows, payload.exercise_key, limit)]
    return HistoryOutput(status="ok", exercise_key=payload.exercise_key, entries=entries)


def get_session_history_impl(
    payload: SessionHistoryInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
    catalog: Optional[Catalog] = None,
) -> SessionHistoryOutput:
    settings = _settings(settings)
    catalog = catalog or load_catalog()
    try:
        rows = read_rows(store, settings.sheet_name)
    except SetLogError as e:
        return SessionHistoryOutput(status="error", error=error_record(e))
    sessions = session_history(rows, settings.session_row_limit, catalog)
    if payload.limit is not None:
        sessions = recent_sessions(sessions, payload.limit)
    return SessionHistoryOutput(status="ok", sessions=sessions)


def get_session_impl(
    payload: SessionLookupInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
    catalog: Optional[Catalog] = None,
) -> SessionOutput:
    settings = _settings(settings)
    catalog = catalog or load_catalog()
    try:
        rows = read_rows(store, settings.sheet_name)
        found = find_session(session_history(rows, settings.session_row_limit, catalog), payload.session_id)
        if found is None:
            raise NotFound(f"No session with id {payload.session_id!r}")
    except SetLogError as e:
        return SessionOutput(status="error", error=error_record(e))
    return SessionOutput(status="ok", session=found)


def exercise_progress_impl(
    payload: ProgressInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
) -> ProgressOutput:
    """Top set per session over the exercise's (capped) history, oldest first."""
    history = get_history_impl(HistoryInput(exercise_key=payload.exercise_key), store, settings)
    if history.status != "ok":
        return ProgressOutput(status="error", exercise_key=payload.exercise_key, error=history.error)
    return ProgressOutput(
        status="ok",
        exercise_key=payload.exercise_key,
        points=top_set_per_session(history.entries),
    )


# --- Writes ---

def _validate_log_sets(payload: LogSetsInput, catalog: Catalog) -> None:
    if not payload.session_id.strip():
        raise InvalidArgument("Missing session_id")
    if not catalog.is_valid_day(payload.day_key):
        raise InvalidArgument(f"Invalid day_key: {payload.day_key!r}")
    if not payload.sets:
        raise InvalidArgument("No sets to log")
    for i, s in enumerate(payload.sets):
        if not s.exercise_key.strip():
            raise InvalidArgument(f"sets[{i}]: missing exercise_key")
        for name, value in (("weight", s.weight), ("reps", s.reps)):
            if not math.isfinite(value) or value < 0:
                raise InvalidArgument(f"sets[{i}]: {name} must be a finite, non-negative number")


def _append_layout(store: SheetStore, sheet: str) -> Optional[list[str]]:
    """
    Column layout new rows are written in. Writes the header on an empty sheet and
    adds any missing current columns to an existing header. Returns None for a
    headerless legacy sheet (rows are then written in LEGACY_COLUMNS order).
    """
    first = store.read_all(a1_range(sheet, 1, 1))
    if not first or not any(str(c).strip() for c in first[0]):
        store.write_range(a1_range(sheet, 1), [list(COLUMNS)])
        logger.info("Wrote header row to empty sheet %s", sheet)
        return list(COLUMNS)
    header = detect_header(first)
    if header is None:
        logger.warning("Sheet %s has no header row; appending in legacy column order without ids", sheet)
        return None
    missing = [c for c in COLUMNS if c not in column_index(header)]
    if missing:
        store.write_range(a1_cell(sheet, 1, len(header)), [missing])
        header = header + missing
        logger.info("Added column(s) %s to sheet %s", ", ".join(missing), sheet)
    return header


def log_sets_impl(
    payload: LogSetsInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
    catalog: Optional[Catalog] = None,
    clock: Callable[[], str] = now_iso,
) -> LogSetsOutput:
    """Append one row per set. All sets in one call share a single timestamp."""
    settings = _settings(settings)
    catalog = catalog or load_catalog()
    try:
        _validate_log_sets(payload, catalog)
        timestamp = clock()
        rows = [
            SetLogRow(
                id=generate_id(),
                timestamp=timestamp,
                session_id=payload.session_id,
                day_key=payload.day_key,
                exercise_key=s.exercise_key,
                weight=s.weight,
                reps=s.reps,
                unit=payload.unit or "lb",
                notes=s.notes or "",
            )
            for s in payload.sets
        ]
        layout = _append_layout(store, settings.sheet_name)
        values = [encode_for_header(r, layout or LEGACY_COLUMNS) for r in rows]
        store.append(a1_range(settings.sheet_name), values)
    except SetLogError as e:
        logger.warning("log_sets failed: %s", e)
        return LogSetsOutput(status="error", error=error_record(e))
    logger.info("Logged %d set(s) for session %s", len(rows), payload.session_id)
    ids = [r.id for r in rows] if layout is not None else []
    return LogSetsOutput(status="ok", rows_written=len(rows), ids=ids)


def update_set_impl(
    payload: UpdateSetInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
    clock: Callable[[], str] = now_iso,
) -> MutationOutput:
    settings = _settings(settings)
    engine = MutationEngine(store, settings.sheet_name, clock=clock)
    try:
        engine.update(payload.id, weight=payload.weight, reps=payload.reps, notes=payload.notes)
    except SetLogError as e:
        logger.warning("update_set %s failed: %s", payload.id, e)
        return MutationOutput(status="error", id=payload.id, error=error_record(e))
    return MutationOutput(status="ok", id=payload.id)


def delete_set_impl(
    payload: DeleteSetInput,
    store: SheetStore,
    settings: Optional[Settings] = None,
) -> MutationOutput:
    settings = _settings(settings)
    engine = MutationEngine(store, settings.sheet_name)
    try:
        engine.delete(payload.id)
    except SetLogError as e:
        logger.warning("delete_set %s failed: %s", payload.id, e)
        return MutationOutput(status="error", id=payload.id, error=error_record(e))
    return MutationOutput(status="ok", id=payload.id)
