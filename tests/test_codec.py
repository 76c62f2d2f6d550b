"""Row codec: header detection, legacy layout, tolerant decoding, encode/decode."""

from setlog.codec import (
    COLUMNS,
    LEGACY_COLUMNS,
    decode_rows,
    decode_rows_with_positions,
    detect_header,
    encode_for_header,
    encode_row,
    normalize_header,
    parse_number,
)
from setlog.models import SetLogRow


def _row(**overrides) -> SetLogRow:
    base = dict(
        id="abc123",
        timestamp="2024-01-01T10:00:00.000Z",
        session_id="s1",
        day_key="upper_a",
        exercise_key="barbell_bench",
        weight=100.0,
        reps=5.0,
        unit="lb",
        notes="felt good",
        updated_at=None,
    )
    base.update(overrides)
    return SetLogRow(**base)


def test_encode_then_decode_returns_same_row() -> None:
    row = _row()
    assert decode_rows([COLUMNS, encode_row(row)]) == [row]


def test_encode_then_decode_keeps_updated_at_and_fractional_weight() -> None:
    row = _row(weight=102.5, updated_at="2024-01-02T08:00:00.000Z")
    assert decode_rows([COLUMNS, encode_row(row)]) == [row]


def test_encode_writes_full_column_set_and_generates_id() -> None:
    cells = encode_row(_row(id=""))
    assert len(cells) == len(COLUMNS)
    assert cells[0]  # generated
    assert cells[COLUMNS.index("updated_at")] == ""
    assert cells[COLUMNS.index("weight")] == 100  # integral floats written as ints
    assert isinstance(cells[COLUMNS.index("weight")], int)


def test_header_detection_is_case_and_whitespace_insensitive() -> None:
    raw = [["ID", " Timestamp ", "Session ID", "Day Key", "Exercise  Key", "Unit", "Weight", "Reps", "Notes"]]
    header = detect_header(raw)
    assert header is not None
    assert header[4] == "exercise_key"
    assert normalize_header("Session ID") == "session_id"


def test_first_row_without_column_names_is_data() -> None:
    raw = [["2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", 100, 5, ""]]
    assert detect_header(raw) is None
    rows = decode_rows(raw)
    assert len(rows) == 1
    assert rows[0].exercise_key == "barbell_bench"
    assert rows[0].id == ""
    assert rows[0].updated_at is None


def test_columns_looked_up_by_name_when_order_drifts() -> None:
    header = ["exercise_key", "reps", "weight", "timestamp", "id", "session_id"]
    raw = [header, ["squat", 5, 225, "2024-01-01T10:00:00Z", "r1", "s1"]]
    rows = decode_rows(raw)
    assert len(rows) == 1
    r = rows[0]
    assert (r.id, r.exercise_key, r.weight, r.reps, r.session_id) == ("r1", "squat", 225, 5, "s1")
    assert r.day_key == ""
    assert r.unit == "lb"  # column absent
    assert r.updated_at is None  # column absent


def test_missing_trailing_cells_decode_to_defaults() -> None:
    raw = [COLUMNS, ["r1", "2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "", 100, 5]]
    rows = decode_rows(raw)
    assert rows[0].notes == ""
    assert rows[0].unit == "lb"
    assert rows[0].updated_at is None


def test_unparseable_weight_row_is_dropped_without_error() -> None:
    raw = [
        COLUMNS,
        ["r1", "2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", "abc", 5],
        ["r2", "2024-01-01T10:01:00Z", "s1", "upper_a", "barbell_bench", "lb", 100, 5],
        ["r3", "2024-01-01T10:02:00Z", "s1", "upper_a", "barbell_bench", "lb", 100],
        ["r4", "2024-01-01T10:03:00Z", "s1", "upper_a", "barbell_bench", "lb", -5, 5],
    ]
    rows = decode_rows(raw)
    assert [r.id for r in rows] == ["r2"]


def test_positions_are_one_based_sheet_rows() -> None:
    raw = [
        COLUMNS,
        ["r1", "2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", "bad", 5],
        ["r2", "2024-01-01T10:01:00Z", "s1", "upper_a", "barbell_bench", "lb", 100, 5],
    ]
    assert [(pos, r.id) for pos, r in decode_rows_with_positions(raw)] == [(3, "r2")]
    legacy = [["2024-01-01T10:00:00Z", "s1", "upper_a", "barbell_bench", "lb", 100, 5]]
    assert [pos for pos, _ in decode_rows_with_positions(legacy)] == [1]


def test_parse_number() -> None:
    assert parse_number(5) == 5.0
    assert parse_number(" 102.5 ") == 102.5
    assert parse_number(0) == 0.0
    assert parse_number("") is None
    assert parse_number(None) is None
    assert parse_number(True) is None
    assert parse_number("nan") is None
    assert parse_number("inf") is None
    assert parse_number(-1) is None


def test_encode_for_header_follows_existing_layout() -> None:
    header = ["timestamp", "exercise_key", "weight", "reps", "id", "extra"]
    cells = encode_for_header(_row(), header)
    assert cells == ["2024-01-01T10:00:00.000Z", "barbell_bench", 100, 5, "abc123"]
    legacy = encode_for_header(_row(), LEGACY_COLUMNS)
    assert legacy[0] == "2024-01-01T10:00:00.000Z"
    assert "abc123" not in legacy
