"""Listing columns and the sort keys derived from them."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from ..table.layout import Alignment
from .sizes import recursive_size
from .store import EntryStore
from .types import Entry


class ColumnKind(Enum):
    INDEX = "index"
    NAME = "name"
    SIZE = "size"
    TOTAL_SIZE = "total_size"
    MODIFIED = "modified"
    FILE_TYPE = "type"
    FILE_EXT = "ext"

    @property
    def header(self) -> str:
        return _HEADERS[self]

    @property
    def alignment(self) -> Alignment:
        return _ALIGNMENTS[self]

    @classmethod
    def parse(cls, text: str) -> ColumnKind:
        """Parse a column name as typed by users (``total-size``, ``TYPE``...)."""
        normalized = text.strip().lower().replace("-", "_").replace(" ", "_")
        normalized = _ALIASES.get(normalized, normalized)
        for column in cls:
            if column.value == normalized:
                return column
        raise ValueError(f"unknown column: {text!r}")


_HEADERS = {
    ColumnKind.INDEX: "index",
    ColumnKind.NAME: "name",
    ColumnKind.SIZE: "size",
    ColumnKind.TOTAL_SIZE: "total size",
    ColumnKind.MODIFIED: "modified",
    ColumnKind.FILE_TYPE: "type",
    ColumnKind.FILE_EXT: "ext",
}

_ALIGNMENTS = {
    ColumnKind.INDEX: Alignment.RIGHT,
    ColumnKind.NAME: Alignment.LEFT,
    ColumnKind.SIZE: Alignment.RIGHT,
    ColumnKind.TOTAL_SIZE: Alignment.RIGHT,
    ColumnKind.MODIFIED: Alignment.RIGHT,
    ColumnKind.FILE_TYPE: Alignment.LEFT,
    ColumnKind.FILE_EXT: Alignment.LEFT,
}

_ALIASES = {
    "totalsize": "total_size",
    "file_type": "type",
    "kind": "type",
    "extension": "ext",
    "file_ext": "ext",
    "mtime": "modified",
}

DEFAULT_COLUMNS = (
    ColumnKind.INDEX,
    ColumnKind.NAME,
    ColumnKind.FILE_TYPE,
    ColumnKind.MODIFIED,
    ColumnKind.SIZE,
)


def sort_key_for(store: EntryStore, sort_by: ColumnKind) -> Callable[[Entry], object]:
    if sort_by is ColumnKind.NAME:
        return lambda entry: entry.name
    if sort_by is ColumnKind.SIZE:
        return lambda entry: entry.size
    if sort_by is ColumnKind.TOTAL_SIZE:
        return lambda entry: recursive_size(store, entry.id)
    if sort_by is ColumnKind.MODIFIED:
        return lambda entry: entry.modified_at
    if sort_by is ColumnKind.FILE_TYPE:
        return lambda entry: entry.kind.sort_rank
    if sort_by is ColumnKind.FILE_EXT:
        return lambda entry: entry.extension or ""
    raise ValueError(f"cannot sort by {sort_by.value}")


def sort_entries(
    store: EntryStore,
    entries: list[Entry],
    sort_by: ColumnKind = ColumnKind.NAME,
    reverse: bool = False,
) -> None:
    """Stable in-place sort of ``entries`` by one listing column."""
    entries.sort(key=sort_key_for(store, sort_by))
    if reverse:
        entries.reverse()


__all__ = ["ColumnKind", "DEFAULT_COLUMNS", "sort_key_for", "sort_entries"]
