"""Persistence adapter between the in-memory aggregate and the key-value store.

Three independent keys are used: the AppData document, the quick-notes list and
the dark-mode flag. Reads never raise: a missing or unreadable value yields the
default. Writes never raise either: a failed write is logged and the in-memory
state stays authoritative for the rest of the session.
"""
from __future__ import annotations
import json
import logging
from typing import Any, Callable, List, TypeVar

from errors import ParseError, WriteError
from models import AppData, QuickNote, quick_notes_from_list, quick_notes_to_list
from settings import DARK_MODE_KEY, DATA_KEY, LOGGER_NAME, QUICK_NOTES_KEY
from storage import JsonFileStore

log = logging.getLogger(f"{LOGGER_NAME}.persistence")

T = TypeVar("T")


def decode_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e


def parse_app_data(text: str) -> AppData:
    return AppData.from_dict(decode_json(text))


class Persistence:
    def __init__(self, kv: JsonFileStore):
        self.kv = kv

    def _read(self, key: str, parse: Callable[[str], T], default: Callable[[], T]) -> T:
        try:
            raw = self.kv.get(key)
        except (OSError, UnicodeDecodeError) as e:
            log.error("Error reading %s: %s", key, e)
            return default()
        if raw is None:
            return default()
        try:
            return parse(raw)
        except ParseError as e:
            log.error("Error loading %s, falling back to default: %s", key, e)
            return default()

    def _write(self, key: str, payload: Any) -> None:
        try:
            self.kv.set(key, json.dumps(payload))
        except WriteError as e:
            log.error("Error saving %s: %s", key, e)

    # AppData
    def load(self) -> AppData:
        return self._read(DATA_KEY, parse_app_data, AppData)

    def save(self, data: AppData) -> None:
        self._write(DATA_KEY, data.to_dict())

    # Quick notes
    def load_quick_notes(self) -> List[QuickNote]:
        return self._read(QUICK_NOTES_KEY, lambda s: quick_notes_from_list(decode_json(s)), list)

    def save_quick_notes(self, notes: List[QuickNote]) -> None:
        self._write(QUICK_NOTES_KEY, quick_notes_to_list(notes))

    # Display mode
    def load_dark_mode(self) -> bool:
        return self._read(DARK_MODE_KEY, decode_json, lambda: False) is True

    def save_dark_mode(self, dark: bool) -> None:
        self._write(DARK_MODE_KEY, bool(dark))

    def clear(self) -> None:
        """Drop the meetings and quick-notes keys; the display preference survives."""
        for key in (DATA_KEY, QUICK_NOTES_KEY):
            try:
                self.kv.remove(key)
            except WriteError as e:
                log.error("Error clearing %s: %s", key, e)
