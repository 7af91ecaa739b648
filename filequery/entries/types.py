"""Domain datatypes for cached filesystem entries and synthetic rows."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from .ids import EntryId


class EntryKind(Enum):
    """Closed set of filesystem object kinds.

    Synthetic rows carry ``FILE`` as a placeholder; their special status is
    derived from the id tag, never from the kind.
    """

    FILE = "file"
    DIRECTORY = "dir"
    SYMLINK = "link"

    @property
    def label(self) -> str:
        return self.value

    @property
    def sort_rank(self) -> int:
        return _KIND_ORDER[self]


_KIND_ORDER = {EntryKind.FILE: 0, EntryKind.DIRECTORY: 1, EntryKind.SYMLINK: 2}


def extension_of(name: str) -> str | None:
    """Return the text after the last dot, ignoring leading-dot names."""
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        return None
    return ext


def lossy_name(name: str) -> str:
    """Render a name that may carry surrogate-escaped bytes as valid text."""
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return name.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")
    return name


def display_path(path: os.PathLike | str) -> str:
    """``path`` as printable text; undecodable bytes become U+FFFD."""
    return lossy_name(os.fspath(path))


@dataclass(eq=False)
class Entry:
    """One cached filesystem object or synthetic placeholder row.

    ``parent`` and ``children`` hold ids only; the store owns every entry.
    ``children is None`` means the directory has not been read yet.
    """

    id: EntryId
    name: str
    kind: EntryKind = EntryKind.FILE
    parent: EntryId | None = None
    modified_at: float = 0.0
    size: int = 0
    recursive_size: int | None = None
    extension: str | None = None
    children: list[EntryId] | None = None
    is_executable: bool = False

    @property
    def is_special(self) -> bool:
        return self.id.is_special

    @property
    def is_dir(self) -> bool:
        return not self.is_special and self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return not self.is_special and self.kind is EntryKind.FILE

    @property
    def is_symlink(self) -> bool:
        return not self.is_special and self.kind is EntryKind.SYMLINK

    @property
    def is_hidden(self) -> bool:
        return not self.is_special and self.name.startswith(".")

    @property
    def display_name(self) -> str:
        return lossy_name(self.name)


__all__ = [
    "EntryKind",
    "Entry",
    "extension_of",
    "lossy_name",
    "display_path",
]
