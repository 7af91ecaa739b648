"""Owned store of discovered entries and their resolved paths.

Every entry lives in one ``EntryStore`` for the life of the session; nothing
is evicted. Entries reference each other by id only. Paths are rebuilt on
demand by walking parent ids and are memoized in the store the first time
they are computed.
"""

from __future__ import annotations

import logging
import os
import stat
import threading
from dataclasses import dataclass
from pathlib import Path

from ..errors import EntryNotFoundError, InvariantViolation
from .ids import BASE_ID, ROOT_ID, EntryId
from .types import Entry, EntryKind, extension_of, lossy_name

logger = logging.getLogger(__name__)

ROOT_PATH = Path(os.path.abspath(os.sep))


@dataclass
class StoreStats:
    """OS call counters, read by tests to prove memoization."""

    dir_reads: int = 0
    stat_calls: int = 0


def kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.FILE


def entry_from_stat(
    entry_id: EntryId,
    name: str,
    st: os.stat_result,
    parent: EntryId | None,
) -> Entry:
    """Build an ``Entry`` from ``lstat``-style metadata."""
    kind = kind_from_mode(st.st_mode)
    size = int(st.st_size)
    return Entry(
        id=entry_id,
        name=name,
        kind=kind,
        parent=parent,
        modified_at=float(st.st_mtime),
        size=size,
        recursive_size=size if kind is EntryKind.FILE else None,
        extension=extension_of(name),
        children=None,
        is_executable=kind is EntryKind.FILE and bool(st.st_mode & 0o111),
    )


def os_error_message(exc: OSError) -> str:
    if isinstance(exc, PermissionError):
        return "Permission Denied"
    return lossy_name(exc.strerror or str(exc) or type(exc).__name__)


class EntryStore:
    """Single owner of ``id -> Entry`` and ``id -> Path`` maps.

    Reads that memoize (path resolution, parent discovery, directory
    expansion, size aggregation) take ``lock`` so each id is computed once
    even when called from more than one thread.
    """

    def __init__(self) -> None:
        self._entries: dict[EntryId, Entry] = {}
        self._paths: dict[EntryId, Path] = {}
        # Directories discovered by walking up from a path, mapped to the
        # child ids they already have so a later read reuses them.
        self._adopted: dict[EntryId, dict[str, EntryId]] = {}
        self._shared_messages: dict[str, EntryId] = {}
        self.lock = threading.RLock()
        self.stats = StoreStats()
        self.base_id: EntryId | None = None

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: EntryId) -> Entry | None:
        return self._entries.get(entry_id)

    def require(self, entry_id: EntryId) -> Entry:
        """Return an entry the caller has just created or verified."""
        entry = self._entries.get(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def cached_path(self, entry_id: EntryId) -> Path | None:
        return self._paths.get(entry_id)

    def register(self, entry: Entry, path: Path | None = None) -> EntryId:
        with self.lock:
            if entry.id in self._entries:
                raise InvariantViolation(f"duplicate entry id: {entry.id.debug_info()}")
            self._entries[entry.id] = entry
            if path is not None:
                self._paths[entry.id] = path
        return entry.id

    def register_path(
        self,
        path: Path,
        entry_id: EntryId | None = None,
        parent: EntryId | None = None,
    ) -> EntryId:
        """Register an entry discovered from a full path.

        The path is cached immediately. Unreadable metadata or a missing
        final component yields a synthetic error entry instead.
        """
        path = Path(path)
        name = path.name
        if not name and entry_id != ROOT_ID:
            return self.register_error(f"no file name: {path}")
        try:
            st = os.lstat(path)
        except OSError as exc:
            logger.debug("lstat failed for %s: %s", path, exc)
            return self.register_os_error(exc)
        finally:
            self.stats.stat_calls += 1
        entry = entry_from_stat(entry_id or EntryId.new_normal(), name, st, parent)
        return self.register(entry, path)

    def register_dir_entry(self, dir_entry: os.DirEntry, parent: EntryId) -> EntryId:
        """Register one ``os.scandir`` record as a child of ``parent``."""
        try:
            st = dir_entry.stat(follow_symlinks=False)
        except OSError as exc:
            logger.debug("stat failed for %s: %s", dir_entry.path, exc)
            return self.register_os_error(exc)
        finally:
            self.stats.stat_calls += 1
        return self.register(entry_from_stat(EntryId.new_normal(), dir_entry.name, st, parent))

    def register_error(self, message: str = "") -> EntryId:
        name = f"<<Error: {message}>>" if message else "<<Error>>"
        return self.register(Entry(id=EntryId.new_error(), name=name, recursive_size=0))

    def register_os_error(self, exc: OSError) -> EntryId:
        return self.register_error(os_error_message(exc))

    def register_message(self, text: str) -> EntryId:
        return self.register(Entry(id=EntryId.new_message(), name=text, recursive_size=0))

    def shared_message(self, text: str) -> EntryId:
        """Like ``register_message`` but one entry per distinct ``text``."""
        with self.lock:
            entry_id = self._shared_messages.get(text)
            if entry_id is None:
                entry_id = self.register_message(text)
                self._shared_messages[text] = entry_id
            return entry_id

    def truncated_marker(self, count: int) -> EntryId:
        """Return the shared "truncated ``count`` rows" entry, creating it once."""
        entry_id = EntryId.truncated_marker(count)
        with self.lock:
            if entry_id in self._entries:
                return entry_id
            suffix = "" if count < 2 else "s"
            return self.register(
                Entry(id=entry_id, name=f"... (truncated {count} row{suffix})", recursive_size=0)
            )

    def open_base(self, path: Path) -> EntryId:
        """Register the session's starting directory.

        The filesystem root gets ``ROOT_ID``; anything else gets ``BASE_ID``.
        """
        absolute = Path(os.path.abspath(path))
        with self.lock:
            if absolute == ROOT_PATH:
                entry_id = ROOT_ID if ROOT_ID in self._entries else self.register_path(absolute, ROOT_ID)
            elif BASE_ID in self._entries:
                raise InvariantViolation("base directory is already registered")
            else:
                entry_id = self.register_path(absolute, BASE_ID)
            self.base_id = entry_id
        return entry_id

    def resolve_path(self, entry_id: EntryId) -> Path | None:
        """Return the absolute path of ``entry_id``, computing it once.

        ``None`` when the id, or any ancestor, is unknown, or the id names a
        synthetic row.
        """
        cached = self._paths.get(entry_id)
        if cached is not None:
            return cached
        with self.lock:
            cached = self._paths.get(entry_id)
            if cached is not None:
                return cached
            entry = self._entries.get(entry_id)
            if entry is None or entry.is_special:
                return None

            # Collect the unresolved chain first so deep trees do not recurse.
            chain: list[Entry] = []
            current: Entry | None = entry
            base: Path | None = None
            while current is not None:
                known = self._paths.get(current.id)
                if known is not None:
                    base = known
                    break
                if current.parent is None:
                    if current.id == ROOT_ID:
                        base = ROOT_PATH
                        self._paths[ROOT_ID] = base
                    break
                chain.append(current)
                current = self._entries.get(current.parent)
                if current is not None and current.is_special:
                    current = None

            if base is None:
                return None
            for link in reversed(chain):
                base = base / link.name
                self._paths[link.id] = base
            return base

    def parent_id(self, entry_id: EntryId) -> EntryId | None:
        """Return the parent id, discovering it from the OS path when unset.

        Entries registered from a full path have no parent until the first
        call, which registers the containing directory and records it on the
        entry. ``None`` for the root, unknown ids and synthetic ids.
        """
        entry = self._entries.get(entry_id)
        if entry is None or entry.is_special:
            return None
        if entry.parent is not None:
            return entry.parent
        if entry_id == ROOT_ID:
            return None

        with self.lock:
            if entry.parent is not None:
                return entry.parent
            path = self._paths.get(entry_id)
            if path is None:
                self._invariant_violation(f"{entry_id.debug_info()} has neither a parent nor a path")
                return None
            parent_path = path.parent
            if parent_path == path:
                self._invariant_violation(f"no parent directory for non-root path {path}")
                return None

            if parent_path == ROOT_PATH and ROOT_ID in self._entries:
                parent = ROOT_ID
            elif parent_path == ROOT_PATH:
                parent = self.register_path(parent_path, ROOT_ID)
            else:
                parent = self.register_path(parent_path)
            if parent.is_special:
                return parent

            logger.debug("discovered parent %s for %s", parent_path, path)
            entry.parent = parent
            self._adopted.setdefault(parent, {})[entry.name] = entry_id
            return parent

    def adopted_child(self, parent: EntryId, name: str) -> EntryId | None:
        """Return an already-registered child of ``parent`` named ``name``."""
        return self._adopted.get(parent, {}).get(name)

    def _invariant_violation(self, message: str) -> None:
        logger.error(message)
        if __debug__:
            raise InvariantViolation(message)


__all__ = [
    "ROOT_PATH",
    "StoreStats",
    "EntryStore",
    "entry_from_stat",
    "kind_from_mode",
    "os_error_message",
]
