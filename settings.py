from __future__ import annotations
import os
from pathlib import Path

APP_TITLE = "Meeting Tracker"

LOGGER_NAME = "meetingtracker"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Local key-value store keys
DATA_KEY = "meeting-tracker-data"
QUICK_NOTES_KEY = "meeting-tracker-quick-notes"
DARK_MODE_KEY = "meeting-tracker-dark-mode"

DEFAULT_JSON_EXPORT_NAME = "meeting-tracker-data.json"
DEFAULT_CSV_EXPORT_NAME = "meeting-tracker-data.csv"

RECENT_MEETINGS_LIMIT = 5


def data_root() -> Path:
    """Directory holding the key-value files and logs; MEETING_TRACKER_DATA overrides it."""
    override = os.environ.get("MEETING_TRACKER_DATA")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".meeting-tracker"
