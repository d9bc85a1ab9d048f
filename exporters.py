"""Utilities for exporting and importing the meetings aggregate."""
from __future__ import annotations

import csv
import io
import json
import time
from datetime import datetime, timezone
from pathlib import Path

from errors import ParseError
from models import AppData
from persistence import decode_json

CSV_HEADER = [
    "Meeting ID", "Meeting Title", "Date", "Client",
    "Issue ID", "Topic", "Status", "Priority", "Assignee", "Solution", "Note",
]


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def debug_export_name() -> str:
    return f"debug-data-{int(time.time() * 1000)}.json"


def export_json(data: AppData, debug: bool = False, stored: AppData | None = None) -> bytes:
    """Serialize ``data`` as an AppData document.

    With ``debug`` the document gains a ``_debug`` block with a timestamp and
    counts, plus the persisted copy when ``stored`` is given.
    """
    doc = data.to_dict()
    if debug:
        info = {
            "timestamp": utc_timestamp(),
            "totalMeetings": len(data.meetings),
            "totalIssues": sum(len(m.issues) for m in data.meetings),
        }
        if stored is not None:
            info["stored"] = stored.to_dict()
        doc["_debug"] = info
    return json.dumps(doc, indent=2).encode("utf-8")


def _csv_rows(data: AppData):
    yield CSV_HEADER
    for meeting in data.meetings:
        head = [meeting.id, meeting.title, meeting.date, meeting.client]
        if not meeting.issues:
            yield head + [""] * 7
            continue
        for issue in meeting.issues:
            yield head + [issue.id, issue.topic, issue.status, issue.priority,
                          issue.assignee, issue.solution, issue.note]


def export_csv(data: AppData) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, doublequote=True, lineterminator="\n")
    writer.writerows(_csv_rows(data))
    return buf.getvalue().encode("utf-8", errors="backslashreplace")


def import_json(raw: bytes | str) -> AppData:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Import is not UTF-8 text: {e}") from e
    return AppData.from_dict(decode_json(raw))


def write_export(payload: bytes, path: Path) -> Path:
    path = Path(path)
    _ensure_parent(path)
    path.write_bytes(payload)
    return path
