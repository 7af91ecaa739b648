"""Column-width balancing and cell fitting for bordered tables.

Row 0 fixes the column count. A later row with fewer cells lets its last
cell span every remaining column, so the engine hands back one width
vector per observed row length.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

COLUMN_MARGIN = 2
SHRINK_FLOOR = 16
ELLIPSIS = "..."


class Alignment(Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


def natural_widths(rows: Sequence[Sequence[str]]) -> list[int]:
    """Widest real (non-spanning) cell per column."""
    if not rows:
        raise ValueError("table needs at least one row")
    column_count = len(rows[0])
    if column_count == 0:
        raise ValueError("first row must have at least one cell")

    widths = [0] * column_count
    for row in rows:
        cells = len(row)
        if cells == 0 or cells > column_count:
            raise ValueError(f"row has {cells} cells, expected 1..{column_count}")
        real = cells if cells == column_count else cells - 1
        for col in range(real):
            widths[col] = max(widths[col], len(row[col]))
    return widths


def total_width(widths: Sequence[int], margin: int = COLUMN_MARGIN) -> int:
    return sum(widths) + margin * (len(widths) + 1)


def compute_column_widths(
    rows: Sequence[Sequence[str]],
    max_width: int | None = None,
    min_width: int | None = None,
    margin: int = COLUMN_MARGIN,
) -> dict[int, list[int]]:
    """Return ``{row_length: column_widths}`` for every row length in ``rows``.

    Over ``max_width``, every column wider than ``SHRINK_FLOOR`` loses one
    character per pass until the table fits or nothing can shrink; the bound
    is broken rather than squeezing columns below the floor. Under
    ``min_width``, the deficit is spread over all columns (rounded up). The
    last width of a short row absorbs all the columns it spans.
    """
    widths = natural_widths(rows)
    table = total_width(widths, margin)

    if max_width is not None:
        while table > max_width:
            shrunk = False
            for col, width in enumerate(widths):
                if width > SHRINK_FLOOR:
                    widths[col] = width - 1
                    table -= 1
                    shrunk = True
            if not shrunk:
                break

    if min_width is not None and table < min_width:
        deficit = min_width - table
        share = -(-deficit // len(widths))
        widths = [width + share for width in widths]
        table = total_width(widths, margin)

    by_length: dict[int, list[int]] = {}
    for row in rows:
        cells = len(row)
        if cells in by_length:
            continue
        head = widths[: cells - 1]
        last = table - margin * (cells + 1) - sum(head)
        by_length[cells] = head + [last]
    return by_length


def table_width(widths_by_length: dict[int, list[int]], margin: int = COLUMN_MARGIN) -> int:
    """Total width shared by every vector from ``compute_column_widths``."""
    widths = next(iter(widths_by_length.values()))
    return total_width(widths, margin)


def fit_text(text: str, width: int) -> str:
    """Shorten ``text`` to ``width`` characters around a centered ``...``."""
    length = len(text)
    if length <= width:
        return text
    if width <= len(ELLIPSIS):
        return ELLIPSIS[: max(0, width)]
    prefix_len = (width - len(ELLIPSIS)) // 2
    suffix_len = width - len(ELLIPSIS) - prefix_len
    return text[:prefix_len] + ELLIPSIS + text[length - suffix_len :]


def pad_text(text: str, width: int, alignment: Alignment) -> str:
    gap = max(0, width - len(text))
    if alignment is Alignment.LEFT:
        return text + " " * gap
    if alignment is Alignment.RIGHT:
        return " " * gap + text
    left = gap // 2
    return " " * left + text + " " * (gap - left)


def render_cell(text: str, width: int, alignment: Alignment = Alignment.LEFT) -> str:
    """Return ``text`` fitted to exactly ``width`` characters."""
    if len(text) > width:
        return fit_text(text, width)
    return pad_text(text, width, alignment)


def cell_slices(text: str, width: int) -> tuple[slice, slice | None]:
    """Return the source slices kept by :func:`fit_text`.

    Painters use these to keep per-character colors aligned with truncated
    text. The second slice is ``None`` when the text fits.
    """
    length = len(text)
    if length <= width:
        return slice(0, length), None
    if width <= len(ELLIPSIS):
        return slice(0, 0), slice(length, length)
    prefix_len = (width - len(ELLIPSIS)) // 2
    suffix_len = width - len(ELLIPSIS) - prefix_len
    return slice(0, prefix_len), slice(length - suffix_len, length)


__all__ = [
    "COLUMN_MARGIN",
    "SHRINK_FLOOR",
    "ELLIPSIS",
    "Alignment",
    "natural_widths",
    "total_width",
    "compute_column_widths",
    "table_width",
    "fit_text",
    "pad_text",
    "render_cell",
    "cell_slices",
]
