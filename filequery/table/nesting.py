"""Row-budgeted selection of listing rows, with one level of nested content.

When a directory listing leaves spare rows, each subdirectory's own
children are inlined under it. A subdirectory's allotment counts every row
it adds, its "truncated N rows" marker included, so the listing never
grows past ``max_row``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..entries.expand import children_count, children_of
from ..entries.sorting import ColumnKind, sort_entries
from ..entries.store import EntryStore
from ..entries.types import Entry

# Rows kept free before the fairness rounds hand out more nested rows.
NESTED_SLACK = 4
MAX_NESTED_LEVEL = 1
EMPTY_DIRECTORY_MESSAGE = "Empty Directory"


@dataclass
class NestedSelection:
    """Flattened rows plus a parallel indent level per row."""

    entries: list[Entry] = field(default_factory=list)
    levels: list[int] = field(default_factory=list)

    def append(self, entry: Entry, level: int) -> None:
        self.entries.append(entry)
        self.levels.append(level)

    def __len__(self) -> int:
        return len(self.entries)

    def closes_run(self, index: int) -> bool:
        """True when row ``index`` is the last row of its nested run."""
        level = self.levels[index]
        if level == 0:
            return False
        return index == len(self.levels) - 1 or self.levels[index + 1] < level

    @property
    def top_level_count(self) -> int:
        return sum(1 for entry, level in zip(self.entries, self.levels) if level == 0 and not entry.is_special)


def allot_nested_rows(
    counts: Sequence[int],
    budget: int,
    slack: int = NESTED_SLACK,
) -> list[int]:
    """Split ``budget`` nested rows over children with ``counts`` grandchildren.

    Every child with content gets its first rows while the budget lasts:
    one row when it has a single grandchild, otherwise two, so a truncated
    run still shows one entry above its marker. Then, while at least
    ``slack`` rows remain, round-robin passes give one more row to each
    child still short of its count.
    """
    allotted = [0] * len(counts)
    remaining = max(0, budget)
    for idx, count in enumerate(counts):
        first = min(count, 2)
        if count > 0 and remaining >= first:
            allotted[idx] = first
            remaining -= first

    while remaining >= slack:
        granted = False
        for idx, count in enumerate(counts):
            step = 1 if allotted[idx] else min(count, 2)
            if remaining >= step and allotted[idx] < count:
                allotted[idx] += step
                remaining -= step
                granted = True
        if not granted:
            break
    return allotted


def select_nested(
    store: EntryStore,
    children: Sequence[Entry],
    max_row: int,
    include_hidden: bool = False,
    sort_by: ColumnKind = ColumnKind.NAME,
    reverse: bool = False,
) -> NestedSelection:
    """Inline grandchildren under ``children`` within ``max_row`` total rows.

    A child allotted ``n`` rows with more than ``n`` children shows ``n - 1``
    of them followed by a truncation marker.
    """
    counts = [children_count(store, child.id, include_hidden) if child.is_dir else 0 for child in children]
    allotted = allot_nested_rows(counts, max_row - len(children))

    selection = NestedSelection()
    for child, count, rows in zip(children, counts, allotted):
        selection.append(child, 0)
        if rows <= 0:
            continue
        grandchildren = children_of(store, child.id, include_hidden)
        sort_entries(store, grandchildren, sort_by, reverse)
        shown = rows if rows >= count else rows - 1
        for grandchild in grandchildren[:shown]:
            selection.append(grandchild, 1)
        if shown < count:
            selection.append(store.require(store.truncated_marker(count - shown)), 1)
    return selection


def select_rows(
    store: EntryStore,
    children: Sequence[Entry],
    max_row: int,
    offset: int = 0,
    include_hidden: bool = False,
    sort_by: ColumnKind = ColumnKind.NAME,
    reverse: bool = False,
) -> NestedSelection:
    """Pick the rows of one directory listing from its sorted ``children``.

    Rows before ``offset`` are skipped. Too many rows are hard-truncated with
    one marker row; enough spare rows trigger nested content; an empty
    directory yields a single message row.
    """
    max_row = max(1, max_row)
    total = len(children)
    if total == 0:
        selection = NestedSelection()
        selection.append(store.require(store.shared_message(EMPTY_DIRECTORY_MESSAGE)), 0)
        return selection

    offset = min(max(0, offset), total - 1)
    visible = list(children[offset:])

    if len(visible) > max_row:
        kept = visible[: max_row - 1]
        selection = NestedSelection(entries=kept, levels=[0] * len(kept))
        selection.append(store.require(store.truncated_marker(len(visible) - len(kept))), 0)
        return selection

    if len(visible) + NESTED_SLACK < max_row:
        return select_nested(store, visible, max_row, include_hidden, sort_by, reverse)

    return NestedSelection(entries=visible, levels=[0] * len(visible))


def indent_label(level: int, closes_run: bool, text: str) -> str:
    """Prefix ``text`` with the tree connector for its nesting level."""
    if level == 0:
        return text
    if level == 1:
        return f"╰── {text}" if closes_run else f"├── {text}"
    raise NotImplementedError(f"nested level {level} is not supported")


__all__ = [
    "NESTED_SLACK",
    "MAX_NESTED_LEVEL",
    "EMPTY_DIRECTORY_MESSAGE",
    "NestedSelection",
    "allot_nested_rows",
    "select_nested",
    "select_rows",
    "indent_label",
]
