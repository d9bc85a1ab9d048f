import logging

import pytest

from conftest import make_issue, make_meeting
from errors import WriteError
from models import AppData
from persistence import Persistence
from settings import DARK_MODE_KEY, DATA_KEY, QUICK_NOTES_KEY
from storage import JsonFileStore


class BrokenStore(JsonFileStore):
    def set(self, key, value):
        raise WriteError("quota exceeded")

    def remove(self, key):
        raise WriteError("read-only")


def test_load_missing_returns_default(persistence):
    assert persistence.load() == AppData()
    assert persistence.load_quick_notes() == []
    assert persistence.load_dark_mode() is False


def test_round_trip(persistence, sample_data, sample_notes):
    persistence.save(sample_data)
    persistence.save_quick_notes(sample_notes)
    assert persistence.load() == sample_data
    assert persistence.load_quick_notes() == sample_notes


def test_round_trip_empty_optional_fields(persistence):
    data = AppData(meetings=[make_meeting("m", make_issue("i", assignee="", solution="", note="")), make_meeting("empty")])
    persistence.save(data)
    assert persistence.load() == data


def test_corrupt_data_falls_back_to_default(kv, persistence, caplog):
    kv.set(DATA_KEY, "{oops")
    kv.set(QUICK_NOTES_KEY, '{"not": "a list"}')
    kv.set(DARK_MODE_KEY, "nope")
    with caplog.at_level(logging.ERROR, logger="meetingtracker"):
        assert persistence.load() == AppData()
        assert persistence.load_quick_notes() == []
        assert persistence.load_dark_mode() is False
    assert "Error loading meeting-tracker-data" in caplog.text


def test_unmappable_document_falls_back(kv, persistence):
    kv.set(DATA_KEY, '[1, 2, 3]')
    assert persistence.load() == AppData()
    kv.set(DATA_KEY, '{"meetings": "nope"}')
    assert persistence.load() == AppData()


def test_missing_fields_are_coerced(kv, persistence):
    kv.set(DATA_KEY, '{"meetings": [{"id": "m1", "title": "T"}]}')
    data = persistence.load()
    assert data.meetings[0].issues == []
    assert data.meetings[0].date == ""


def test_write_failure_is_swallowed_and_logged(tmp_path, sample_data, caplog):
    p = Persistence(BrokenStore(tmp_path))
    with caplog.at_level(logging.ERROR, logger="meetingtracker"):
        p.save(sample_data)
        p.save_quick_notes([])
        p.save_dark_mode(True)
        p.clear()
    assert caplog.text.count("quota exceeded") == 3
    assert "read-only" in caplog.text


def test_dark_mode_round_trip(persistence):
    persistence.save_dark_mode(True)
    assert persistence.load_dark_mode() is True


def test_clear_keeps_display_flag(kv, persistence, sample_data):
    persistence.save(sample_data)
    persistence.save_dark_mode(True)
    persistence.clear()
    assert kv.get(DATA_KEY) is None
    assert persistence.load_dark_mode() is True


def test_file_store_layout(tmp_path):
    kv = JsonFileStore(tmp_path / "nested")
    kv.set("meeting-tracker-data", '{"meetings": []}')
    assert (tmp_path / "nested" / "meeting-tracker-data.json").read_text(encoding="utf-8") == '{"meetings": []}'
    assert not list((tmp_path / "nested").glob("*.tmp"))
    kv.remove("meeting-tracker-data")
    kv.remove("meeting-tracker-data")
    assert kv.get("meeting-tracker-data") is None


def test_file_store_rejects_path_like_keys(kv):
    with pytest.raises(ValueError):
        kv.get("../escape")


def test_file_store_wraps_os_errors(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    kv = JsonFileStore(blocker / "sub")
    with pytest.raises(WriteError):
        kv.set("k", "v")


def test_lone_surrogates_are_saved_escaped(persistence, kv):
    data = AppData(meetings=[make_meeting("m", make_issue("i", topic="bad \ud800 topic"))])
    persistence.save(data)
    assert "\\ud800" in kv.get(DATA_KEY)
    assert persistence.load() == data


def test_file_store_wraps_encoding_errors(kv):
    with pytest.raises(WriteError):
        kv.set("k", "raw \udc80 surrogate")


@pytest.mark.parametrize("payload", [
    '{"meetings": [], "n": ' + "1" * 5000 + "}",
    "[" * 100_000 + "]" * 100_000,
])
def test_oversized_json_falls_back_to_default(kv, persistence, payload):
    kv.set(DATA_KEY, payload)
    kv.set(QUICK_NOTES_KEY, payload)
    assert persistence.load() == AppData()
    assert persistence.load_quick_notes() == []


@pytest.mark.parametrize("stored", ['"false"', "[0]", "1", "null"])
def test_dark_mode_only_true_for_json_true(kv, persistence, stored):
    kv.set(DARK_MODE_KEY, stored)
    assert persistence.load_dark_mode() is False
