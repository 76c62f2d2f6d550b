"""Pydantic models for SetLog: stored row schema, session view models, tool inputs/outputs."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


# --- Stored row (one physical sheet row per logged set) ---

class SetLogRow(BaseModel):
    id: str = ""  # empty only for legacy rows written before the id column existed
    timestamp: str  # ISO-8601, set once at append time
    session_id: str = ""
    day_key: str = ""
    exercise_key: str
    weight: float
    reps: float
    unit: str = "lb"
    notes: str = ""
    updated_at: Optional[str] = None  # null until the first edit


# --- Session view models (recomputed on every read) ---

class SessionSet(BaseModel):
    id: str
    weight: float
    reps: float
    notes: str = ""
    unit: str = "lb"
    timestamp: str
    updated_at: Optional[str] = None


class SessionExercise(BaseModel):
    exercise_key: str
    exercise_name: str
    sets: list[SessionSet] = Field(default_factory=list)


class SessionSummary(BaseModel):
    session_id: str
    started_at: str
    day_key: str
    day_name: str
    exercises: list[SessionExercise] = Field(default_factory=list)


# --- Errors surfaced in tool output ---

ErrorType = Literal["invalid_argument", "not_found", "store_unavailable"]


class ErrorRecord(BaseModel):
    type: ErrorType
    message: str


# --- Tool inputs ---

class SetEntry(BaseModel):
    exercise_key: str
    weight: float
    reps: float
    notes: Optional[str] = None


class LogSetsInput(BaseModel):
    session_id: str
    day_key: str
    unit: str = "lb"
    sets: list[SetEntry] = Field(default_factory=list)


class HistoryInput(BaseModel):
    exercise_key: str
    limit: Optional[int] = None  # defaults to settings.history_limit


class SessionHistoryInput(BaseModel):
    limit: Optional[int] = None  # most recent N sessions; all when omitted


class SessionLookupInput(BaseModel):
    session_id: str


class UpdateSetInput(BaseModel):
    id: str
    weight: Optional[float] = None
    reps: Optional[float] = None
    notes: Optional[str] = None


class DeleteSetInput(BaseModel):
    id: str


class ProgressInput(BaseModel):
    exercise_key: str


# --- Tool outputs ---

Status = Literal["ok", "error"]


class LogSetsOutput(BaseModel):
    status: Status
    rows_written: int = 0
    ids: list[str] = Field(default_factory=list)
    error: Optional[ErrorRecord] = None


class HistoryEntry(BaseModel):
    id: str
    timestamp: str
    session_id: str
    weight: float
    reps: float
    notes: str = ""
    unit: str = "lb"


class HistoryOutput(BaseModel):
    status: Status
    exercise_key: str
    entries: list[HistoryEntry] = Field(default_factory=list)
    error: Optional[ErrorRecord] = None


class SessionHistoryOutput(BaseModel):
    status: Status
    sessions: list[SessionSummary] = Field(default_factory=list)
    error: Optional[ErrorRecord] = None


class SessionOutput(BaseModel):
    status: Status
    session: Optional[SessionSummary] = None
    error: Optional[ErrorRecord] = None


class MutationOutput(BaseModel):
    status: Status
    id: str
    error: Optional[ErrorRecord] = None


class ProgressPoint(BaseModel):
    session_id: str
    timestamp: str
    weight: float
    reps: float
    e1rm: float


class ProgressOutput(BaseModel):
    status: Status
    exercise_key: str
    points: list[ProgressPoint] = Field(default_factory=list)
    error: Optional[ErrorRecord] = None
