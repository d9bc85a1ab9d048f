from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional

from errors import ParseError

ISSUE_STATUSES = ("pending", "in progress", "solved", "archived")
ISSUE_PRIORITIES = ("low", "medium", "high")
DEFAULT_STATUS = "pending"
DEFAULT_PRIORITY = "medium"


def _text(raw: dict, key: str, default: str = "") -> str:
    value = raw.get(key)
    return default if value is None else str(value)


def _require_object(raw: Any, what: str) -> dict:
    if not isinstance(raw, dict):
        raise ParseError(f"{what} must be a JSON object, got {type(raw).__name__}")
    return raw


def _require_list(raw: Any, what: str) -> list:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ParseError(f"{what} must be a JSON array, got {type(raw).__name__}")
    return raw


@dataclass
class Issue:
    id: str
    topic: str
    status: str = DEFAULT_STATUS        # pending, in progress, solved, archived
    priority: str = DEFAULT_PRIORITY    # low, medium, high
    assignee: str = ""
    solution: str = ""
    note: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id, "topic": self.topic, "status": self.status, "solution": self.solution,
            "priority": self.priority, "assignee": self.assignee, "note": self.note,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Issue":
        raw = _require_object(raw, "issue")
        return cls(
            id=_text(raw, "id"), topic=_text(raw, "topic"),
            status=_text(raw, "status", DEFAULT_STATUS), priority=_text(raw, "priority", DEFAULT_PRIORITY),
            assignee=_text(raw, "assignee"), solution=_text(raw, "solution"), note=_text(raw, "note"),
        )


@dataclass
class Meeting:
    id: str
    title: str
    date: str       # ISO-8601 calendar date
    client: str
    issues: List[Issue] = field(default_factory=list)

    def find_issue(self, issue_id: str) -> Optional[Issue]:
        return next((i for i in self.issues if i.id == issue_id), None)

    def to_dict(self) -> dict:
        return {
            "id": self.id, "title": self.title, "date": self.date, "client": self.client,
            "issues": [i.to_dict() for i in self.issues],
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Meeting":
        raw = _require_object(raw, "meeting")
        return cls(
            id=_text(raw, "id"), title=_text(raw, "title"), date=_text(raw, "date"), client=_text(raw, "client"),
            issues=[Issue.from_dict(i) for i in _require_list(raw.get("issues"), "meeting.issues")],
        )


@dataclass
class QuickNote:
    id: str
    content: str
    created_at: str     # ISO-8601 timestamp, fixed at creation
    title: Optional[str] = None

    def to_dict(self) -> dict:
        out = {"id": self.id, "content": self.content, "createdAt": self.created_at}
        if self.title is not None:
            out["title"] = self.title
        return out

    @classmethod
    def from_dict(cls, raw: Any) -> "QuickNote":
        raw = _require_object(raw, "quick note")
        title = raw.get("title")
        return cls(
            id=_text(raw, "id"), content=_text(raw, "content"), created_at=_text(raw, "createdAt"),
            title=None if title is None else str(title),
        )


@dataclass
class AppData:
    meetings: List[Meeting] = field(default_factory=list)

    def find_meeting(self, meeting_id: str) -> Optional[Meeting]:
        return next((m for m in self.meetings if m.id == meeting_id), None)

    def to_dict(self) -> dict:
        return {"meetings": [m.to_dict() for m in self.meetings]}

    @classmethod
    def from_dict(cls, raw: Any) -> "AppData":
        """Map a decoded JSON document onto AppData.

        Missing fields fall back to their defaults and unknown keys are ignored;
        only structurally unusable documents raise ParseError.
        """
        raw = _require_object(raw, "data")
        return cls(meetings=[Meeting.from_dict(m) for m in _require_list(raw.get("meetings"), "meetings")])


def quick_notes_from_list(raw: Any) -> List[QuickNote]:
    return [QuickNote.from_dict(n) for n in _require_list(raw, "quick notes")]


def quick_notes_to_list(notes: List[QuickNote]) -> list:
    return [n.to_dict() for n in notes]


@dataclass(frozen=True)
class DashboardStats:
    total_meetings: int = 0
    total_issues: int = 0
    pending_issues: int = 0
    in_progress_issues: int = 0
    solved_issues: int = 0
    archived_issues: int = 0
