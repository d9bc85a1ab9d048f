"""Shared fixtures; also puts the project root on sys.path so the flat modules import."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import AppData, Issue, Meeting, QuickNote  # noqa: E402
from persistence import Persistence  # noqa: E402
from storage import JsonFileStore  # noqa: E402
from store import MeetingStore  # noqa: E402


@pytest.fixture
def kv(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def persistence(kv):
    return Persistence(kv)


@pytest.fixture
def store(persistence):
    return MeetingStore(persistence)


def make_issue(issue_id: str, status: str = "pending", **kw) -> Issue:
    return Issue(id=issue_id, topic=kw.pop("topic", f"Topic {issue_id}"), status=status, **kw)


def make_meeting(meeting_id: str, *issues: Issue, date: str = "2024-05-01") -> Meeting:
    return Meeting(id=meeting_id, title=f"Meeting {meeting_id}", date=date, client="Acme", issues=list(issues))


@pytest.fixture
def sample_data() -> AppData:
    return AppData(meetings=[
        make_meeting("mtg-1", make_issue("iss-1"), make_issue("iss-2"), date="2024-05-01"),
        make_meeting("mtg-2", make_issue("iss-3", "solved"), make_issue("iss-4", "archived"), date="2024-06-15"),
        make_meeting("mtg-3", date="2024-04-20"),
    ])


@pytest.fixture
def sample_notes():
    return [
        QuickNote(id="note-1", content="Call back Acme", created_at="2024-05-01T09:00:00.000Z", title="Acme"),
        QuickNote(id="note-2", content="Draft proposal", created_at="2024-05-02T10:30:00.000Z"),
    ]
