"""Derived, never-persisted views over the current AppData snapshot."""
from __future__ import annotations

from collections import Counter
from typing import Dict, List

from models import ISSUE_STATUSES, AppData, DashboardStats, Meeting, QuickNote
from settings import RECENT_MEETINGS_LIMIT


def compute_stats(data: AppData) -> DashboardStats:
    issues = [i for m in data.meetings for i in m.issues]
    by_status = Counter(i.status for i in issues)
    return DashboardStats(
        total_meetings=len(data.meetings),
        total_issues=len(issues),
        pending_issues=by_status["pending"],
        in_progress_issues=by_status["in progress"],
        solved_issues=by_status["solved"],
        archived_issues=by_status["archived"],
    )


def meeting_status_counts(meeting: Meeting) -> Dict[str, int]:
    by_status = Counter(i.status for i in meeting.issues)
    return {s: by_status[s] for s in ISSUE_STATUSES}


def sort_meetings_newest_first(meetings: List[Meeting]) -> List[Meeting]:
    # ISO dates sort lexically; the stored sequence is left as is
    return sorted(meetings, key=lambda m: m.date, reverse=True)


def recent_meetings(data: AppData, limit: int = RECENT_MEETINGS_LIMIT) -> List[Meeting]:
    return sort_meetings_newest_first(data.meetings)[:limit]


def sort_notes_newest_first(notes: List[QuickNote]) -> List[QuickNote]:
    return sorted(notes, key=lambda n: n.created_at, reverse=True)
