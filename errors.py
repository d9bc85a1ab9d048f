"""Error taxonomy shared by the store, persistence and export layers."""
from __future__ import annotations


class ValidationError(ValueError):
    """A required field is empty or a value is outside its vocabulary.

    Raised before a command is built; the store itself never sees invalid input.
    """


class ParseError(ValueError):
    """Stored or imported content is not valid JSON or not AppData-shaped."""


class WriteError(OSError):
    """The key-value store could not persist a value (disk full, read-only, ...)."""
