"""Per-exercise progress: heaviest set per session with an estimated 1RM."""

from __future__ import annotations

from .models import HistoryEntry, ProgressPoint


def e1rm_epley(weight: float, reps: float) -> float:
    if reps <= 0:
        return 0.0
    if reps == 1:
        return weight
    return round(weight * (1 + reps / 30.0), 2)


def top_set_per_session(entries: list[HistoryEntry]) -> list[ProgressPoint]:
    """
    One point per session: the heaviest set (first one wins a tie, in input order).
    Points are returned oldest first, ready to plot.
    """
    best: dict[str, HistoryEntry] = {}
    for entry in entries:
        current = best.get(entry.session_id)
        if current is None or entry.weight > current.weight:
            best[entry.session_id] = entry
    points = [
        ProgressPoint(
            session_id=session_id,
            timestamp=top.timestamp,
            weight=top.weight,
            reps=top.reps,
            e1rm=e1rm_epley(top.weight, top.reps),
        )
        for session_id, top in best.items()
    ]
    points.sort(key=lambda p: p.timestamp)
    return points
