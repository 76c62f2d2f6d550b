"""Top set per session and the Epley estimate."""

from setlog.models import HistoryEntry
from setlog.progress import e1rm_epley, top_set_per_session


def _entry(session: str, ts: str, weight: float, reps: float) -> HistoryEntry:
    return HistoryEntry(id="", timestamp=ts, session_id=session, weight=weight, reps=reps)


def test_e1rm_epley() -> None:
    assert e1rm_epley(100, 0) == 0.0
    assert e1rm_epley(100, 1) == 100
    assert e1rm_epley(100, 10) == 133.33


def test_top_set_first_wins_ties_and_sorts_oldest_first() -> None:
    points = top_set_per_session([
        _entry("s2", "2024-01-05T10:00:00Z", 120, 3),
        _entry("s2", "2024-01-05T10:05:00Z", 120, 5),
        _entry("s1", "2024-01-01T10:00:00Z", 100, 5),
    ])
    assert [(p.session_id, p.reps) for p in points] == [("s1", 5), ("s2", 3)]
