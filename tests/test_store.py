"""A1 range helpers, the in-memory sheet, and the Google Sheets adapter with a fake client."""

import pytest

from setlog.errors import StoreUnavailable
from setlog.store import (
    GoogleSheetStore,
    MemorySheetStore,
    a1_cell,
    a1_range,
    column_letter,
    parse_a1,
)


def test_a1_helpers() -> None:
    assert a1_range("set_log") == "set_log"
    assert a1_range("set_log", 5) == "set_log!A5"
    assert a1_range("set_log", 5, 5) == "set_log!5:5"
    assert a1_range("My Log", 2) == "'My Log'!A2"
    assert a1_cell("set_log", 1, 9) == "set_log!J1"
    assert [column_letter(i) for i in (0, 25, 26, 27)] == ["A", "Z", "AA", "AB"]
    assert parse_a1("set_log") == ("set_log", None, None, 0)
    assert parse_a1("set_log!5:7") == ("set_log", 5, 7, 0)
    assert parse_a1("'My Log'!AB3") == ("My Log", 3, None, 27)


def test_memory_store_trims_like_sheets_api() -> None:
    store = MemorySheetStore("set_log", [["a", "b", ""], ["c"], ["", ""]])
    assert store.read_all("set_log") == [["a", "b"], ["c"]]
    assert store.read_all("set_log!2:2") == [["c"]]


def test_memory_store_append_write_delete() -> None:
    store = MemorySheetStore("set_log", [["h1", "h2"]])
    store.append("set_log", [["r1"], ["r2"]])
    store.write_range("set_log!B2", [["x"]])
    assert store.read_all("set_log") == [["h1", "h2"], ["r1", "x"], ["r2"]]
    store.delete_rows(1, 2)
    assert store.read_all("set_log") == [["h1", "h2"], ["r2"]]


def test_memory_store_rejects_other_sheet() -> None:
    with pytest.raises(StoreUnavailable):
        MemorySheetStore("set_log").read_all("other!1:1")


class _Request:
    def __init__(self, calls: list, name: str, kwargs: dict, result: dict | None = None, error: Exception | None = None):
        self.calls, self.name, self.kwargs, self.result, self.error = calls, name, kwargs, result, error

    def execute(self) -> dict:
        self.calls.append((self.name, self.kwargs))
        if self.error:
            raise self.error
        return self.result or {}


class _FakeSpreadsheets:
    """Mimics service.spreadsheets() from googleapiclient."""

    def __init__(self, values: list | None = None, error: Exception | None = None):
        self.calls: list = []
        self._values = values or []
        self._error = error

    def values(self) -> "_FakeSpreadsheets":
        return self

    def get(self, **kwargs):
        if "range" in kwargs:
            return _Request(self.calls, "values.get", kwargs, {"values": self._values}, self._error)
        meta = {"sheets": [{"properties": {"title": "other", "sheetId": 0}}, {"properties": {"title": "set_log", "sheetId": 42}}]}
        return _Request(self.calls, "get", kwargs, meta, self._error)

    def append(self, **kwargs):
        return _Request(self.calls, "values.append", kwargs, error=self._error)

    def update(self, **kwargs):
        return _Request(self.calls, "values.update", kwargs, error=self._error)

    def batchUpdate(self, **kwargs):
        return _Request(self.calls, "batchUpdate", kwargs, error=self._error)


def test_google_store_issues_values_requests() -> None:
    fake = _FakeSpreadsheets(values=[["id", "timestamp"]])
    store = GoogleSheetStore(fake, "sheet-123", "set_log")
    assert store.read_all("set_log") == [["id", "timestamp"]]
    store.append("set_log", [["a"]])
    store.write_range("set_log!A3", [["b"]])
    names = [c[0] for c in fake.calls]
    assert names == ["values.get", "values.append", "values.update"]
    assert fake.calls[0][1]["valueRenderOption"] == "UNFORMATTED_VALUE"
    assert fake.calls[1][1]["body"] == {"values": [["a"]]}
    assert fake.calls[2][1]["range"] == "set_log!A3"


def test_google_store_delete_resolves_sheet_id() -> None:
    fake = _FakeSpreadsheets()
    store = GoogleSheetStore(fake, "sheet-123", "set_log")
    store.delete_rows(4, 5)
    store.delete_rows(2, 3)
    assert [c[0] for c in fake.calls] == ["get", "batchUpdate", "batchUpdate"]
    rng = fake.calls[1][1]["body"]["requests"][0]["deleteDimension"]["range"]
    assert rng == {"sheetId": 42, "dimension": "ROWS", "startIndex": 4, "endIndex": 5}


def test_google_store_wraps_http_errors() -> None:
    httplib2 = pytest.importorskip("httplib2")
    from googleapiclient.errors import HttpError

    error = HttpError(httplib2.Response({"status": 503}), b"unavailable")
    store = GoogleSheetStore(_FakeSpreadsheets(error=error), "sheet-123", "set_log")
    with pytest.raises(StoreUnavailable):
        store.read_all("set_log")


def test_google_store_wraps_transport_errors() -> None:
    httplib2 = pytest.importorskip("httplib2")
    from setlog.config import Settings
    from setlog.models import HistoryInput
    from setlog.service import get_history_impl

    error = httplib2.ServerNotFoundError("Unable to find the server at sheets.googleapis.com")
    store = GoogleSheetStore(_FakeSpreadsheets(error=error), "sheet-123", "set_log")
    with pytest.raises(StoreUnavailable):
        store.read_all("set_log")
    out = get_history_impl(HistoryInput(exercise_key="barbell_bench"), store, Settings())
    assert out.status == "error"
    assert out.error.type == "store_unavailable"
