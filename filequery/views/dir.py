"""Directory listing view.

Children are sorted, cut to the row budget (with nested content when rows
are spare), then laid out as one table: an index column with ``3`` /
``3-1`` style numbers, then the configured columns.
"""

from __future__ import annotations

import time

from ..colors import GREEN, RGB, WHITE
from ..entries.expand import children_of
from ..entries.ids import EntryId
from ..entries.sizes import recursive_size
from ..entries.sorting import ColumnKind, sort_entries
from ..entries.store import EntryStore
from ..entries.types import Entry, display_path
from ..table.layout import Alignment
from ..table.nesting import indent_label, select_rows
from ..table.paint import LineColor
from .config import DirViewConfig
from .format import (
    colorize_name,
    colorize_size,
    colorize_time,
    colorize_type,
    format_duration,
    prettify_size,
    prettify_time,
)
from .frame import paint_titled_table, render_error_panel
from .result import ViewResult

_ARROW_CHARS = frozenset("├─╰ ")


def color_arrows(default: RGB, arrow: RGB, text: str) -> list[RGB]:
    """Color the leading tree connector of ``text`` with ``arrow``."""
    colors: list[RGB] = []
    in_prefix = True
    for ch in text:
        if in_prefix and ch not in _ARROW_CHARS:
            in_prefix = False
        colors.append(arrow if in_prefix else default)
    return colors


def format_index(index: int, sub_index: int) -> str:
    if sub_index == 0:
        return f"{index}   "
    pad = " " if sub_index < 10 else ""
    return f"{index}-{sub_index}{pad}"


def _cell(
    store: EntryStore,
    column: ColumnKind,
    child: Entry,
    index_label: str,
    name: str,
    level: int,
    now: float,
) -> tuple[str, LineColor]:
    if column is ColumnKind.INDEX:
        return index_label, WHITE
    if column is ColumnKind.NAME:
        name_color = colorize_name(child.kind, child.is_executable)
        if level > 0:
            return name, color_arrows(name_color, GREEN, name)
        return name, name_color
    if column is ColumnKind.SIZE:
        return prettify_size(child.size), colorize_size(child.size)
    if column is ColumnKind.TOTAL_SIZE:
        total = recursive_size(store, child.id)
        return prettify_size(total), colorize_size(total)
    if column is ColumnKind.MODIFIED:
        return prettify_time(now, child.modified_at), colorize_time(now, child.modified_at)
    if column is ColumnKind.FILE_TYPE:
        return child.kind.label, colorize_type(child.kind)
    return child.extension or "", WHITE


def render_directory(store: EntryStore, entry_id: EntryId, config: DirViewConfig) -> ViewResult:
    """Render the listing of ``entry_id``; failures become an error panel."""
    started_at = time.perf_counter()
    entry = store.get(entry_id)
    if entry is None:
        return _error(config, "get", f"get({entry_id.debug_info()}) has failed")
    if not entry.is_dir:
        return _error(config, "render_directory", "not a directory", entry)
    path = store.resolve_path(entry_id)
    if path is None:
        return _error(config, "resolve_path", f"resolve_path({entry_id.debug_info()}) has failed", entry)

    children = children_of(store, entry_id, config.show_hidden)
    children_num = len(children)
    sort_entries(store, children, config.sort_by, config.sort_reverse)
    selection = select_rows(
        store,
        children,
        config.max_row,
        offset=config.offset,
        include_hidden=config.show_hidden,
        sort_by=config.sort_by,
        reverse=config.sort_reverse,
    )

    columns = config.columns
    rows: list[list[str]] = [[column.header for column in columns]]
    alignments: list[list[Alignment]] = [[Alignment.CENTER] * len(columns)]
    colors: list[list[LineColor]] = [[WHITE] * len(columns)]

    now = time.time()
    table_index = min(max(0, config.offset), max(0, children_num - 1))
    sub_index = 0
    for idx, child in enumerate(selection.entries):
        level = selection.levels[idx]
        closes = selection.closes_run(idx)

        if child.is_special:
            message = indent_label(level, closes, child.display_name)
            message_color: LineColor = color_arrows(WHITE, GREEN, message) if level > 0 else WHITE
            if len(columns) > 1 and columns[0] is ColumnKind.INDEX:
                rows.append(["", message])
                alignments.append([Alignment.RIGHT, Alignment.LEFT])
                colors.append([WHITE, message_color])
            else:
                rows.append([message])
                alignments.append([Alignment.LEFT])
                colors.append([message_color])
            continue

        if level == 0:
            table_index += 1
            sub_index = 0
        else:
            sub_index += 1

        if level > 0:
            name = indent_label(level, closes, child.display_name)
        elif config.show_full_path:
            child_path = store.resolve_path(child.id)
            name = display_path(child_path) if child_path is not None else child.display_name
        else:
            name = child.display_name

        label = format_index(table_index, sub_index)
        row: list[str] = []
        row_colors: list[LineColor] = []
        for column in columns:
            text, color = _cell(store, column, child, label, name, level, now)
            row.append(text)
            row_colors.append(color)
        rows.append(row)
        alignments.append([column.alignment for column in columns])
        colors.append(row_colors)

    lines = paint_titled_table(
        display_path(path),
        f"{children_num} elements",
        rows,
        alignments,
        colors,
        config.max_width,
        config.min_width,
        no_color=config.no_color,
        striped=True,
    )
    lines.append(config.to_sql_string(path))
    lines.append(f"took {format_duration(time.perf_counter() - started_at)}")
    if config.alert:
        lines.append(config.alert)
    return ViewResult(lines=lines)


def _error(config: DirViewConfig, operation: str, message: str, entry: Entry | None = None) -> ViewResult:
    lines = render_error_panel(
        operation,
        message,
        entry=entry,
        min_width=config.min_width,
        max_width=config.max_width,
        no_color=config.no_color,
    )
    return ViewResult(lines=lines, is_error=True)


__all__ = ["render_directory", "color_arrows", "format_index"]
