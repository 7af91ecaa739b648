"""Exception taxonomy shared by the entry cache and views.

Filesystem failures are never raised through these types: they are turned
into synthetic error entries or inline panels at the call site.
"""

from __future__ import annotations


class FileQueryError(Exception):
    """Base class for filequery errors."""


class EntryNotFoundError(FileQueryError, LookupError):
    """An id is not registered in the entry store."""

    def __init__(self, entry_id: object) -> None:
        super().__init__(f"unknown entry id: {entry_id}")
        self.entry_id = entry_id


class InvariantViolation(FileQueryError, RuntimeError):
    """Internal bookkeeping reached a state callers must never produce."""


__all__ = [
    "FileQueryError",
    "EntryNotFoundError",
    "InvariantViolation",
]
