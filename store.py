"""Application store: the closed command set, the pure reducer and its write-through wrapper."""
from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, List, Optional, Union

from errors import ValidationError
from exporters import export_csv, export_json, import_json, utc_timestamp
from ids import generate_id
from models import (ISSUE_PRIORITIES, ISSUE_STATUSES, DEFAULT_PRIORITY, AppData, DashboardStats,
                    Issue, Meeting, QuickNote)
from persistence import Persistence
from settings import LOGGER_NAME
from stats import compute_stats

log = logging.getLogger(f"{LOGGER_NAME}.store")


@dataclass(frozen=True)
class AppState:
    data: AppData = field(default_factory=AppData)
    quick_notes: List[QuickNote] = field(default_factory=list)
    dark_mode: bool = False


# Commands
@dataclass(frozen=True)
class ReplaceAllData:
    data: AppData

@dataclass(frozen=True)
class AddMeeting:
    meeting: Meeting

@dataclass(frozen=True)
class UpdateMeeting:
    meeting: Meeting

@dataclass(frozen=True)
class DeleteMeeting:
    meeting_id: str

@dataclass(frozen=True)
class AddIssue:
    meeting_id: str
    issue: Issue

@dataclass(frozen=True)
class UpdateIssue:
    meeting_id: str
    issue: Issue

@dataclass(frozen=True)
class DeleteIssue:
    meeting_id: str
    issue_id: str

@dataclass(frozen=True)
class ToggleDisplayMode:
    pass

@dataclass(frozen=True)
class AddQuickNote:
    note: QuickNote

@dataclass(frozen=True)
class UpdateQuickNote:
    note: QuickNote

@dataclass(frozen=True)
class DeleteQuickNote:
    note_id: str

@dataclass(frozen=True)
class ReplaceAllQuickNotes:
    notes: List[QuickNote]


Command = Union[
    ReplaceAllData, AddMeeting, UpdateMeeting, DeleteMeeting, AddIssue, UpdateIssue, DeleteIssue,
    ToggleDisplayMode, AddQuickNote, UpdateQuickNote, DeleteQuickNote, ReplaceAllQuickNotes,
]

DATA_COMMANDS = (AddMeeting, UpdateMeeting, DeleteMeeting, AddIssue, UpdateIssue, DeleteIssue)
QUICK_NOTE_COMMANDS = (AddQuickNote, UpdateQuickNote, DeleteQuickNote)


def _index(items, item_id: str) -> Optional[int]:
    return next((n for n, x in enumerate(items) if x.id == item_id), None)


def _with_meetings(state: AppState, meetings: List[Meeting]) -> AppState:
    return replace(state, data=replace(state.data, meetings=meetings))


def _replace_at(items: list, idx: int, item) -> list:
    out = list(items); out[idx] = item; return out


def _apply_to_issues(state: AppState, meeting_id: str, change: Callable[[Meeting], Optional[List[Issue]]]) -> AppState:
    meetings = state.data.meetings
    idx = _index(meetings, meeting_id)
    if idx is None: return state
    issues = change(meetings[idx])
    if issues is None: return state
    return _with_meetings(state, _replace_at(meetings, idx, replace(meetings[idx], issues=issues)))


def apply(state: AppState, command: Command) -> AppState:
    """Return the state that results from ``command``; ``state`` itself is never modified.

    Commands naming a missing meeting, issue or note, and adds that would
    duplicate an id, return ``state`` unchanged (the same object).
    """
    meetings = state.data.meetings
    notes = state.quick_notes

    if isinstance(command, ReplaceAllData):
        return replace(state, data=command.data)

    if isinstance(command, AddMeeting):
        if _index(meetings, command.meeting.id) is not None: return state
        return _with_meetings(state, meetings + [command.meeting])

    if isinstance(command, UpdateMeeting):
        idx = _index(meetings, command.meeting.id)
        if idx is None: return state
        return _with_meetings(state, _replace_at(meetings, idx, command.meeting))

    if isinstance(command, DeleteMeeting):
        if _index(meetings, command.meeting_id) is None: return state
        return _with_meetings(state, [m for m in meetings if m.id != command.meeting_id])

    if isinstance(command, AddIssue):
        issue = command.issue
        return _apply_to_issues(state, command.meeting_id,
                                lambda m: None if m.find_issue(issue.id) else m.issues + [issue])

    if isinstance(command, UpdateIssue):
        issue = command.issue
        def _update(m: Meeting):
            idx = _index(m.issues, issue.id)
            return None if idx is None else _replace_at(m.issues, idx, issue)
        return _apply_to_issues(state, command.meeting_id, _update)

    if isinstance(command, DeleteIssue):
        issue_id = command.issue_id
        return _apply_to_issues(state, command.meeting_id,
                                lambda m: [i for i in m.issues if i.id != issue_id] if m.find_issue(issue_id) else None)

    if isinstance(command, ToggleDisplayMode):
        return replace(state, dark_mode=not state.dark_mode)

    if isinstance(command, AddQuickNote):
        if _index(notes, command.note.id) is not None: return state
        return replace(state, quick_notes=notes + [command.note])

    if isinstance(command, UpdateQuickNote):
        idx = _index(notes, command.note.id)
        if idx is None: return state
        note = replace(command.note, created_at=notes[idx].created_at)
        return replace(state, quick_notes=_replace_at(notes, idx, note))

    if isinstance(command, DeleteQuickNote):
        if _index(notes, command.note_id) is None: return state
        return replace(state, quick_notes=[n for n in notes if n.id != command.note_id])

    if isinstance(command, ReplaceAllQuickNotes):
        return replace(state, quick_notes=list(command.notes))

    raise TypeError(f"Unknown command: {command!r}")


Listener = Callable[[AppState], None]


class MeetingStore:
    """Holds the current state and writes every persisted change through synchronously."""

    def __init__(self, persistence: Persistence, state: AppState | None = None):
        self.persistence = persistence
        self.state = state or AppState()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    def dispatch(self, command: Command) -> AppState:
        old = self.state
        self.state = apply(old, command)
        if self.state is not old:
            self._write_through(command)
        else:
            log.debug("%s left state unchanged", type(command).__name__)
        self._notify()
        return self.state

    def _write_through(self, command: Command) -> None:
        if isinstance(command, DATA_COMMANDS):
            self.persistence.save(self.state.data)
        elif isinstance(command, QUICK_NOTE_COMMANDS):
            self.persistence.save_quick_notes(self.state.quick_notes)
        elif isinstance(command, ToggleDisplayMode):
            self.persistence.save_dark_mode(self.state.dark_mode)

    def load(self) -> AppState:
        self.state = AppState(
            data=self.persistence.load(),
            quick_notes=self.persistence.load_quick_notes(),
            dark_mode=self.persistence.load_dark_mode(),
        )
        log.info("Loaded %d meetings, %d quick notes", len(self.state.data.meetings), len(self.state.quick_notes))
        self._notify()
        return self.state

    def import_json(self, raw: bytes | str) -> AppData:
        """Replace all meetings with an imported document and persist it.

        ParseError propagates and leaves the current state untouched.
        """
        data = import_json(raw)
        self.dispatch(ReplaceAllData(data))
        self.persistence.save(data)
        log.info("Imported %d meetings", len(data.meetings))
        return data

    def export_json(self, debug: bool = False) -> bytes:
        stored = self.persistence.load() if debug else None
        return export_json(self.state.data, debug=debug, stored=stored)

    def export_csv(self) -> bytes:
        return export_csv(self.state.data)

    def clear_all(self) -> None:
        self.persistence.clear()
        self.state = replace(self.state, data=AppData(), quick_notes=[])
        log.warning("All meetings and quick notes cleared")
        self._notify()

    def stats(self) -> DashboardStats:
        return compute_stats(self.state.data)


# Entity factories: validate caller input, then mint the id exactly once
def _required(value: str, name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{name} is required")
    return value


def _iso_date(value: str) -> str:
    value = _required(value, "Date")
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError as e:
        raise ValidationError(f"Date must be YYYY-MM-DD, got {value!r}") from e


def validate_meeting(m: Meeting) -> Meeting:
    return replace(m, title=_required(m.title, "Title"), date=_iso_date(m.date), client=(m.client or "").strip())


def validate_issue(i: Issue) -> Issue:
    if i.status not in ISSUE_STATUSES:
        raise ValidationError(f"Unknown status {i.status!r}")
    if i.priority not in ISSUE_PRIORITIES:
        raise ValidationError(f"Unknown priority {i.priority!r}")
    return replace(i, topic=_required(i.topic, "Topic"), assignee=(i.assignee or "").strip())


def validate_quick_note(n: QuickNote) -> QuickNote:
    title = (n.title or "").strip() or None
    return replace(n, content=_required(n.content, "Content"), title=title)


def create_meeting(title: str, date: str, client: str = "") -> Meeting:
    return validate_meeting(Meeting(id=generate_id("mtg"), title=title, date=date, client=client, issues=[]))


def create_issue(topic: str, priority: str = DEFAULT_PRIORITY, assignee: str = "") -> Issue:
    return validate_issue(Issue(id=generate_id("iss"), topic=topic, priority=priority, assignee=assignee))


def create_quick_note(content: str, title: str | None = None) -> QuickNote:
    return validate_quick_note(QuickNote(id=generate_id("note"), content=content, created_at=utc_timestamp(), title=title))
