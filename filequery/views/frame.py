"""Shared table chrome: titled, bordered tables and inline error panels."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ..colors import BLACK, RED, RGB, WHITE, YELLOW
from ..entries.types import Entry, display_path
from ..table.layout import COLUMN_MARGIN, Alignment, compute_column_widths, table_width
from ..table.paint import LineColor, horizontal_rule, paint_row, zebra

BADGE_MIN_WIDTH = 13


def paint_titled_table(
    title: str,
    badge: str,
    rows: Sequence[Sequence[str]],
    alignments: Sequence[Sequence[Alignment]],
    colors: Sequence[Sequence[LineColor]],
    max_width: int | None,
    min_width: int | None,
    no_color: bool = False,
    badge_color: RGB = YELLOW,
    striped: bool = False,
    widths_by_length: dict[int, list[int]] | None = None,
) -> list[str]:
    """Lay out ``rows`` and frame them under a ``title | badge`` header.

    ``widths_by_length`` overrides the computed layout (the hex viewer uses
    fixed column widths).
    """
    if widths_by_length is None:
        widths_by_length = compute_column_widths(rows, max_width, min_width, COLUMN_MARGIN)
    width = table_width(widths_by_length, COLUMN_MARGIN)
    badge_width = max(BADGE_MIN_WIDTH, len(badge))
    title_width = max(1, width - badge_width - COLUMN_MARGIN * 3)

    lines = [horizontal_rule(width, top=True)]
    lines.append(
        paint_row(
            [title, badge],
            [title_width, badge_width],
            [Alignment.LEFT, Alignment.RIGHT],
            [WHITE, badge_color],
            background=BLACK,
            no_color=no_color,
        )
    )
    lines.append(horizontal_rule(width))
    for index, row in enumerate(rows):
        lines.append(
            paint_row(
                row,
                widths_by_length[len(row)],
                alignments[index],
                colors[index],
                background=zebra(index) if striped else BLACK,
                no_color=no_color,
            )
        )
    lines.append(horizontal_rule(width, bottom=True))
    return lines


def render_error_panel(
    operation: str,
    message: str,
    entry: Entry | None = None,
    path: Path | str | None = None,
    min_width: int | None = None,
    max_width: int | None = None,
    no_color: bool = False,
) -> list[str]:
    """Inline panel naming the failed ``operation`` and the raw OS ``message``."""
    if path is not None:
        title = display_path(path)
    elif entry is not None:
        title = entry.display_name
    else:
        title = "<unknown>"

    rows: list[list[str]] = [["operation", operation], ["message", message]]
    if entry is not None:
        rows.append(["entry", entry.id.debug_info()])
    alignments = [[Alignment.RIGHT, Alignment.LEFT] for _ in rows]
    colors: list[list[LineColor]] = [[WHITE, RED] if idx == 1 else [WHITE, WHITE] for idx in range(len(rows))]
    return paint_titled_table(
        title,
        "error",
        rows,
        alignments,
        colors,
        max_width,
        min_width,
        no_color=no_color,
        badge_color=RED,
    )


__all__ = ["paint_titled_table", "render_error_panel"]
