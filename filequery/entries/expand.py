"""Lazy directory expansion into store-registered child entries."""

from __future__ import annotations

import logging
import os

from .ids import EntryId
from .store import EntryStore
from .types import Entry

logger = logging.getLogger(__name__)


def expand(store: EntryStore, entry_id: EntryId) -> None:
    """Read ``entry_id``'s directory once and register its children.

    No-op for unknown ids, non-directories and directories that were already
    read. A failing child becomes an error child; a failing directory read
    becomes a single error child.
    """
    entry = store.get(entry_id)
    if entry is None or entry.children is not None or not entry.is_dir:
        return

    with store.lock:
        if entry.children is not None:
            return
        path = store.resolve_path(entry_id)
        if path is None:
            entry.children = [store.register_error(f"cannot resolve path of {entry_id.debug_info()}")]
            return

        children: list[EntryId] = []
        store.stats.dir_reads += 1
        try:
            with os.scandir(path) as records:
                for record in records:
                    adopted = store.adopted_child(entry_id, record.name)
                    if adopted is not None:
                        children.append(adopted)
                        continue
                    children.append(store.register_dir_entry(record, entry_id))
        except OSError as exc:
            logger.debug("read_dir failed for %s: %s", path, exc)
            children = [store.register_os_error(exc)]
        logger.debug("expanded %s: %d children", path, len(children))
        entry.children = children


def children_of(store: EntryStore, entry_id: EntryId, include_hidden: bool) -> list[Entry]:
    """Return children in directory-read order, expanding on first use.

    Hidden names (leading ``.``) are dropped unless ``include_hidden``;
    synthetic rows are never hidden.
    """
    entry = store.get(entry_id)
    if entry is None or not entry.is_dir:
        return []
    expand(store, entry_id)
    out: list[Entry] = []
    for child_id in entry.children or ():
        child = store.get(child_id)
        if child is None:
            continue
        if not include_hidden and child.is_hidden:
            continue
        out.append(child)
    return out


def children_count(store: EntryStore, entry_id: EntryId, include_hidden: bool) -> int:
    entry = store.get(entry_id)
    if entry is None or not entry.is_dir:
        return 0
    expand(store, entry_id)
    if include_hidden:
        return len(entry.children or ())
    return len(children_of(store, entry_id, include_hidden=False))


__all__ = ["expand", "children_of", "children_count"]
