import csv
import io
import json

import pytest

from conftest import make_issue, make_meeting
from errors import ParseError
from exporters import CSV_HEADER, export_csv, export_json, import_json, write_export
from models import AppData


def _rows(payload: bytes):
    return list(csv.reader(io.StringIO(payload.decode("utf-8"))))


def test_json_round_trip(sample_data):
    assert import_json(export_json(sample_data)) == sample_data


def test_json_export_shape(sample_data):
    doc = json.loads(export_json(sample_data))
    assert set(doc) == {"meetings"}
    assert set(doc["meetings"][0]) == {"id", "title", "date", "client", "issues"}
    assert set(doc["meetings"][0]["issues"][0]) == {"id", "topic", "status", "solution", "priority", "assignee", "note"}


def test_debug_export_is_reimportable(sample_data):
    doc = json.loads(export_json(sample_data, debug=True))
    assert doc["_debug"]["totalMeetings"] == 3
    assert doc["_debug"]["timestamp"].endswith("Z")
    assert "stored" not in doc["_debug"]
    assert import_json(json.dumps(doc)) == sample_data


def test_import_rejects_invalid_json():
    with pytest.raises(ParseError):
        import_json(b"not json at all")
    with pytest.raises(ParseError):
        import_json(b"\xff\xfe\x00")


def test_import_rejects_unmappable_document():
    with pytest.raises(ParseError):
        import_json('"just a string"')
    with pytest.raises(ParseError):
        import_json('{"meetings": [42]}')


def test_import_accepts_bom_and_missing_issues():
    data = import_json('\ufeff{"meetings": [{"id": "m1", "title": "T", "date": "2024-01-01", "client": "C"}]}'.encode("utf-8"))
    assert data.meetings[0].issues == []


def test_csv_header_and_rows(sample_data):
    rows = _rows(export_csv(sample_data))
    assert rows[0] == CSV_HEADER
    # two issues, two issues, one empty meeting
    assert len(rows) == 1 + 2 + 2 + 1
    assert rows[1][:4] == rows[2][:4] == ["mtg-1", "Meeting mtg-1", "2024-05-01", "Acme"]
    assert rows[1][4:8] == ["iss-1", "Topic iss-1", "pending", "medium"]


def test_csv_meeting_without_issues_emits_one_blank_row():
    rows = _rows(export_csv(AppData(meetings=[make_meeting("solo")])))
    assert len(rows) == 2
    assert rows[1] == ["solo", "Meeting solo", "2024-05-01", "Acme"] + [""] * 7


def test_csv_quotes_every_field_and_doubles_quotes():
    data = AppData(meetings=[make_meeting("m", make_issue("i", topic='Say "hi", then leave'))])
    lines = export_csv(data).decode("utf-8").splitlines()
    assert lines[0].startswith('"Meeting ID","Meeting Title"')
    assert '"Say ""hi"", then leave"' in lines[1]
    assert _rows(export_csv(data))[1][5] == 'Say "hi", then leave'


def test_write_export_creates_parents(tmp_path):
    dest = write_export(b"{}", tmp_path / "out" / "x.json")
    assert dest.read_bytes() == b"{}"
