from __future__ import annotations
import logging
import re
from pathlib import Path

from errors import WriteError
from settings import LOGGER_NAME

log = logging.getLogger(f"{LOGGER_NAME}.storage")

_KEY_RE = re.compile(r"^[a-z0-9][a-z0-9\-_.]*$")


class JsonFileStore:
    """Local durable key-value store: one ``<key>.json`` file per key under ``root``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> str | None:
        p = self.path(key)
        if not p.exists(): return None
        return p.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        p = self.path(key); tmp = p.with_suffix(".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8"); tmp.replace(p)
        except (OSError, ValueError) as e:
            raise WriteError(f"Could not write {p}: {e}") from e
        log.debug("wrote %s (%d chars)", p.name, len(value))

    def remove(self, key: str) -> None:
        p = self.path(key)
        try:
            p.unlink(missing_ok=True)
        except OSError as e:
            raise WriteError(f"Could not remove {p}: {e}") from e
