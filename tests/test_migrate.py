"""id column backfill for sheets written before rows carried ids."""

from setlog.codec import decode_rows
from setlog.locator import RowLocator
from setlog.migrate import backfill_ids
from setlog.store import MemorySheetStore, a1_range

OLD_HEADER = ["timestamp", "session_id", "day_key", "exercise_key", "unit", "weight", "reps", "notes"]


def test_backfill_prepends_id_column_and_generates_unique_ids() -> None:
    store = MemorySheetStore("set_log", [
        OLD_HEADER,
        ["2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", 100, 5, "first"],
        ["2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", 105, 5],
    ])
    assert backfill_ids(store, "set_log") == 2
    raw = store.read_all(a1_range("set_log"))
    assert raw[0] == ["id"] + OLD_HEADER
    rows = decode_rows(raw)
    assert len({r.id for r in rows}) == 2 and all(rows[i].id for i in range(2))
    assert rows[0].notes == "first"
    assert RowLocator(store, "set_log").locate(rows[1].id) == 3


def test_backfill_is_a_noop_when_ids_exist() -> None:
    store = MemorySheetStore("set_log", [["id"] + OLD_HEADER, ["x1", "2024-01-01T10:00:00Z", "s1", "upper_a", "b", "lb", 1, 1]])
    before = store.read_all(a1_range("set_log"))
    assert backfill_ids(store, "set_log") == 0
    assert store.read_all(a1_range("set_log")) == before


def test_backfill_empty_sheet() -> None:
    assert backfill_ids(MemorySheetStore("set_log"), "set_log") == 0


def test_backfill_headerless_sheet_writes_header_and_shifts_rows() -> None:
    store = MemorySheetStore("set_log", [
        ["2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", 100, 5, "a long note here"],
        ["2024-01-02T10:00:00Z", "s2", "lower_a", "rdl", "lb", 135, 8],
    ])
    assert backfill_ids(store, "set_log") == 2
    raw = store.read_all(a1_range("set_log"))
    assert raw[0][:2] == ["id", "timestamp"]
    rows = decode_rows(raw)
    assert [(r.exercise_key, r.notes) for r in rows] == [("barbell_bench", "a long note here"), ("rdl", "")]
