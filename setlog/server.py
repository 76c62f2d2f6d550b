"""MCP server: setlog.* tools over the set_log sheet, plus read-only catalog resources."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Type

from fastmcp import FastMCP
from pydantic import BaseModel, ValidationError

from .catalog import load_catalog
from .config import configure_logging, load_settings
from .errors import SetLogError
from .models import (
    DeleteSetInput,
    HistoryInput,
    LogSetsInput,
    ProgressInput,
    SessionHistoryInput,
    SessionLookupInput,
    UpdateSetInput,
)
from .service import (
    delete_set_impl,
    error_record,
    exercise_progress_impl,
    get_history_impl,
    get_session_history_impl,
    get_session_impl,
    log_sets_impl,
    update_set_impl,
)
from .store import SheetStore, build_store

logger = logging.getLogger(__name__)

_settings = load_settings()
_store: Optional[SheetStore] = None

mcp = FastMCP(name="setlog")


def _get_store() -> SheetStore:
    """Built on first tool call; build failures are returned as tool errors."""
    global _store
    if _store is None:
        _store = build_store(_settings)
    return _store


def _call(model: Type[BaseModel], payload: dict, impl: Callable[..., BaseModel], **kwargs: Any) -> dict:
    try:
        inp = model.model_validate(payload)
    except ValidationError as e:
        return {"status": "error", "error": {"type": "invalid_argument", "message": str(e)}}
    try:
        store = _get_store()
    except SetLogError as e:
        logger.error("Store unavailable: %s", e)
        return {"status": "error", "error": error_record(e).model_dump()}
    return impl(inp, store, _settings, **kwargs).model_dump()


@mcp.tool(name="setlog.log_sets")
def setlog_log_sets(payload: dict) -> dict:
    """
    Log one or more sets for a workout session. payload: { session_id, day_key, unit?, sets: [{ exercise_key, weight, reps, notes? }] }.
    All sets share one timestamp. Returns { status, rows_written, ids }.
    """
    return _call(LogSetsInput, payload, log_sets_impl)


@mcp.tool(name="setlog.get_history")
def setlog_get_history(payload: dict) -> dict:
    """
    Most recent sets for one exercise, newest first (max 50). payload: { exercise_key, limit? }.
    Not deduplicated.
    """
    return _call(HistoryInput, payload, get_history_impl)


@mcp.tool(name="setlog.get_sessions")
def setlog_get_sessions(payload: dict) -> dict:
    """
    Workout sessions rebuilt from the sheet, newest first, each with exercises and ordered sets.
    Optional payload: { limit } to return only the most recent sessions.
    """
    return _call(SessionHistoryInput, payload or {}, get_session_history_impl)


@mcp.tool(name="setlog.get_session")
def setlog_get_session(payload: dict) -> dict:
    """One session by id. payload: { session_id }. Error type not_found when absent."""
    return _call(SessionLookupInput, payload, get_session_impl)


@mcp.tool(name="setlog.update_set")
def setlog_update_set(payload: dict) -> dict:
    """
    Edit a logged set in place. payload: { id, weight?, reps?, notes? } (at least one field).
    Stamps updated_at; never changes id or timestamp.
    """
    return _call(UpdateSetInput, payload, update_set_impl)


@mcp.tool(name="setlog.delete_set")
def setlog_delete_set(payload: dict) -> dict:
    """Delete a logged set by id. payload: { id }."""
    return _call(DeleteSetInput, payload, delete_set_impl)


@mcp.tool(name="setlog.exercise_progress")
def setlog_exercise_progress(payload: dict) -> dict:
    """
    Heaviest set per session for one exercise, oldest first, with an Epley e1rm.
    payload: { exercise_key }.
    """
    return _call(ProgressInput, payload, exercise_progress_impl)


@mcp.resource("catalog://days", mime_type="application/json")
def resource_days() -> str:
    """Read-only: workout-day keys and names, plus the exercise list used for charts."""
    catalog = load_catalog()
    return json.dumps({
        "days": [{"day_key": k, "day_name": v} for k, v in catalog.day_names.items()],
        "exercises": catalog.exercise_list(),
    }, indent=2)


@mcp.resource("catalog://days/{day_key}", mime_type="application/json")
def resource_day_template(day_key: str) -> str:
    """Read-only: one workout-day template with its exercises."""
    template = load_catalog().day_template(day_key)
    if template is None:
        return json.dumps({"error": "day not found", "day_key": day_key})
    return json.dumps(template, indent=2)


def run() -> None:
    """Run the MCP server with stdio transport (default)."""
    configure_logging(_settings.log_level)
    mcp.run()
