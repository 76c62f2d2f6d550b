"""Environment-driven settings, service-account loading and logging setup."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from .errors import StoreUnavailable

DEFAULT_SHEET_NAME = "set_log"
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_SESSION_ROW_LIMIT = 500


class Settings(BaseModel):
    spreadsheet_id: Optional[str] = None  # unset -> in-memory sheet
    sheet_name: str = DEFAULT_SHEET_NAME
    service_account_json: Optional[str] = None  # inline JSON or a path relative to cwd
    history_limit: int = DEFAULT_HISTORY_LIMIT
    session_row_limit: int = DEFAULT_SESSION_ROW_LIMIT
    log_level: str = "INFO"


def _env(*names: str) -> Optional[str]:
    for name in names:
        value = os.environ.get(name, "").strip()
        if value:
            return value
    return None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default


def load_settings() -> Settings:
    """Build settings from SETLOG_* env (GOOGLE_SHEETS_SPREADSHEET_ID accepted for the sheet id)."""
    return Settings(
        spreadsheet_id=_env("SETLOG_SPREADSHEET_ID", "GOOGLE_SHEETS_SPREADSHEET_ID"),
        sheet_name=_env("SETLOG_SHEET_NAME") or DEFAULT_SHEET_NAME,
        service_account_json=_env("GOOGLE_SERVICE_ACCOUNT_JSON"),
        history_limit=_env_int("SETLOG_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
        session_row_limit=_env_int("SETLOG_SESSION_ROW_LIMIT", DEFAULT_SESSION_ROW_LIMIT),
        log_level=_env("SETLOG_LOG_LEVEL") or "INFO",
    )


def load_service_account_info(raw: Optional[str]) -> dict[str, Any]:
    """
    Parse service-account credentials from GOOGLE_SERVICE_ACCOUNT_JSON.
    Accepts inline JSON (optionally itself JSON-quoted, as some hosts store it, with
    literal newlines inside the private key) or a file path relative to cwd.
    Raises StoreUnavailable when nothing usable is found.
    """
    if not raw or not raw.strip():
        raise StoreUnavailable("GOOGLE_SERVICE_ACCOUNT_JSON is not set")
    text = raw.strip()
    try:
        if text.startswith('"'):
            text = json.loads(text)
        if text.startswith("{"):
            # strict=False: env values often carry raw newlines inside private_key
            info = json.loads(text, strict=False)
        else:
            path = Path.cwd() / text
            info = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise StoreUnavailable(f"Could not load service account credentials: {e}") from e
    if not isinstance(info, dict):
        raise StoreUnavailable("Service account credentials must be a JSON object")
    return info


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
