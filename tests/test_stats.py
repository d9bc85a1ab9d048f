from conftest import make_issue, make_meeting
from models import AppData, DashboardStats, QuickNote
from stats import (compute_stats, meeting_status_counts, recent_meetings, sort_meetings_newest_first,
                   sort_notes_newest_first)


def test_empty_stats_are_zero():
    assert compute_stats(AppData(meetings=[])) == DashboardStats(0, 0, 0, 0, 0, 0)


def test_stats_across_meetings():
    data = AppData(meetings=[
        make_meeting("m1", make_issue("a"), make_issue("b")),
        make_meeting("m2", make_issue("c", "solved"), make_issue("d", "archived")),
    ])
    assert compute_stats(data) == DashboardStats(
        total_meetings=2, total_issues=4, pending_issues=2, in_progress_issues=0, solved_issues=1, archived_issues=1,
    )


def test_meeting_status_counts():
    m = make_meeting("m", make_issue("a", "in progress"), make_issue("b", "in progress"), make_issue("c"))
    assert meeting_status_counts(m) == {"pending": 1, "in progress": 2, "solved": 0, "archived": 0}


def test_newest_first_does_not_touch_stored_order(sample_data):
    ordered = sort_meetings_newest_first(sample_data.meetings)
    assert [m.id for m in ordered] == ["mtg-2", "mtg-1", "mtg-3"]
    assert [m.id for m in sample_data.meetings] == ["mtg-1", "mtg-2", "mtg-3"]


def test_recent_meetings_limit(sample_data):
    assert [m.id for m in recent_meetings(sample_data, limit=2)] == ["mtg-2", "mtg-1"]


def test_notes_newest_first(sample_notes):
    later = QuickNote(id="note-3", content="x", created_at="2024-06-01T00:00:00.000Z")
    assert [n.id for n in sort_notes_newest_first(sample_notes + [later])] == ["note-3", "note-2", "note-1"]
