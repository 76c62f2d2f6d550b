"""Workout-day templates and the key -> display-name lookups built from them."""

from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

_DATA_DIR = Path(__file__).resolve().parent / "data"
TEMPLATES_PATH = _DATA_DIR / "templates.json"


def humanize_key(key: str) -> str:
    """'hex_bar_deadlift' -> 'Hex Bar Deadlift'."""
    return " ".join(part.capitalize() for part in (key or "").split("_") if part)


class Catalog:
    """Read-only lookups over the day templates. Names fall back to humanize_key()."""

    def __init__(self, templates: Mapping[str, Any]):
        day_names: dict[str, str] = {}
        day_exercises: dict[str, tuple[tuple[str, str], ...]] = {}
        exercise_names: dict[str, str] = {}
        for day_key, template in templates.items():
            day_names[day_key] = template.get("day_name") or humanize_key(day_key)
            entries: list[tuple[str, str]] = []
            for ex in template.get("exercises", []) or []:
                ex_key = ex["exercise_key"]
                name = ex.get("exercise_name") or humanize_key(ex_key)
                entries.append((ex_key, name))
                # an exercise shared by several days keeps its first name
                exercise_names.setdefault(ex_key, name)
            day_exercises[day_key] = tuple(entries)
        self.day_names: Mapping[str, str] = MappingProxyType(day_names)
        self.day_exercises: Mapping[str, tuple[tuple[str, str], ...]] = MappingProxyType(day_exercises)
        self.exercise_names: Mapping[str, str] = MappingProxyType(exercise_names)

    def day_name(self, day_key: str) -> str:
        return self.day_names.get(day_key) or humanize_key(day_key)

    def exercise_name(self, exercise_key: str) -> str:
        return self.exercise_names.get(exercise_key) or humanize_key(exercise_key)

    def is_valid_day(self, day_key: str) -> bool:
        return day_key in self.day_names

    def exercise_list(self) -> list[dict[str, str]]:
        """Unique exercises across all days, sorted by display name."""
        out = [{"exercise_key": k, "exercise_name": v} for k, v in self.exercise_names.items()]
        out.sort(key=lambda e: e["exercise_name"].lower())
        return out

    def day_template(self, day_key: str) -> Optional[dict[str, Any]]:
        if day_key not in self.day_names:
            return None
        return {
            "day_key": day_key,
            "day_name": self.day_names[day_key],
            "exercises": [
                {"exercise_key": k, "exercise_name": name}
                for k, name in self.day_exercises[day_key]
            ],
        }


_catalog: Optional[Catalog] = None


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load templates JSON. The default catalog is built once per process and cached."""
    global _catalog
    if path is None and _catalog is not None:
        return _catalog
    with open(path or TEMPLATES_PATH, encoding="utf-8") as f:
        catalog = Catalog(json.load(f))
    if path is None:
        _catalog = catalog
    return catalog
