"""Memoized recursive directory sizes."""

from __future__ import annotations

from .expand import expand
from .ids import EntryId
from .store import EntryStore


def recursive_size(store: EntryStore, entry_id: EntryId) -> int:
    """Return the total byte size under ``entry_id``.

    Files report their own size. Directories sum every child, hidden ones
    included, and keep the result on the entry so each id is summed once.
    Symlinks are not followed; synthetic and unknown ids count as zero.
    """
    entry = store.get(entry_id)
    if entry is None or entry.is_special:
        return 0
    if entry.recursive_size is not None:
        return entry.recursive_size

    with store.lock:
        # Post-order walk with an explicit stack; deep trees stay off the C stack.
        stack: list[tuple[EntryId, bool]] = [(entry_id, False)]
        while stack:
            current_id, children_done = stack.pop()
            current = store.get(current_id)
            if current is None or current.recursive_size is not None:
                continue
            if current.is_special or not current.is_dir:
                current.recursive_size = 0 if current.is_special or current.is_symlink else current.size
                continue
            if children_done:
                total = 0
                for child_id in current.children or ():
                    child = store.get(child_id)
                    if child is not None and child.recursive_size is not None:
                        total += child.recursive_size
                current.recursive_size = total
                continue
            expand(store, current_id)
            stack.append((current_id, True))
            for child_id in current.children or ():
                child = store.get(child_id)
                if child is not None and child.recursive_size is None:
                    stack.append((child_id, False))

    return entry.recursive_size or 0


__all__ = ["recursive_size"]
