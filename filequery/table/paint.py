"""Paint fitted table rows as bordered, truecolor terminal lines."""

from __future__ import annotations

from collections.abc import Sequence

from ..colors import BLACK, DARK_GRAY, RESET, RGB, WHITE, bg, fg
from .layout import COLUMN_MARGIN, Alignment, cell_slices, fit_text, pad_text

# One color for a whole cell, or one color per character of the cell text.
LineColor = RGB | Sequence[RGB]


def per_char_colors(color: LineColor, length: int) -> list[RGB]:
    if isinstance(color, tuple) and len(color) == 3 and all(isinstance(part, int) for part in color):
        return [color] * length  # type: ignore[list-item]
    colors = list(color)  # type: ignore[arg-type]
    if len(colors) < length:
        colors.extend([colors[-1] if colors else WHITE] * (length - len(colors)))
    return colors[:length]


def _fit_with_colors(text: str, width: int, alignment: Alignment, color: LineColor) -> list[tuple[str, RGB | None]]:
    """Return ``(char, color)`` cells of exactly ``width`` characters."""
    colors = per_char_colors(color, len(text))
    head, tail = cell_slices(text, width)
    if tail is None:
        padded = pad_text(text, width, alignment)
        gap = len(padded) - len(text)
        if alignment is Alignment.LEFT:
            left = 0
        elif alignment is Alignment.RIGHT:
            left = gap
        else:
            left = gap // 2
        out: list[tuple[str, RGB | None]] = [(" ", None)] * left
        out.extend(zip(text, colors))
        out.extend([(" ", None)] * (gap - left))
        return out

    fitted = fit_text(text, width)
    head_text = text[head]
    tail_text = text[tail]
    ellipsis = fitted[len(head_text) : len(fitted) - len(tail_text)]
    out = list(zip(head_text, colors[head]))
    out.extend((ch, WHITE) for ch in ellipsis)
    out.extend(zip(tail_text, colors[tail]))
    return out


def _emit(cells: list[tuple[str, RGB | None]], no_color: bool) -> str:
    if no_color:
        return "".join(ch for ch, _ in cells)
    out: list[str] = []
    current: RGB | None = None
    for ch, color in cells:
        if color is not None and color != current:
            out.append(fg(color))
            current = color
        out.append(ch)
    return "".join(out)


def paint_row(
    contents: Sequence[str],
    widths: Sequence[int],
    alignments: Sequence[Alignment],
    colors: Sequence[LineColor],
    background: RGB = BLACK,
    margin: int = COLUMN_MARGIN,
    borders: tuple[bool, bool] = (True, True),
    no_color: bool = False,
) -> str:
    """Render one table row; every sequence argument is per column."""
    if not (len(contents) == len(widths) == len(alignments) == len(colors)):
        raise ValueError("row contents, widths, alignments and colors must have equal lengths")

    gap = [(" ", None)] * margin
    cells: list[tuple[str, RGB | None]] = []
    if contents:
        cells.extend(gap)
    for text, width, alignment, color in zip(contents, widths, alignments, colors):
        cells.extend(_fit_with_colors(text, width, alignment, color))
        cells.extend(gap)

    left = "│" if borders[0] else ""
    right = "│" if borders[1] else ""
    body = _emit(cells, no_color)
    if no_color:
        return f"{left}{body}{right}"
    return f"{RESET}{left}{bg(background)}{fg(WHITE)}{body}{RESET}{right}"


def horizontal_rule(
    width: int,
    top: bool = False,
    bottom: bool = False,
    borders: tuple[bool, bool] = (True, True),
) -> str:
    """Rule spanning ``width`` columns; rounded corners at the top/bottom."""
    if top:
        left, right = "╭", "╮"
    elif bottom:
        left, right = "╰", "╯"
    else:
        left, right = "├", "┤"
    return f"{left if borders[0] else ''}{'─' * max(0, width)}{right if borders[1] else ''}"


def zebra(index: int) -> RGB:
    """Alternating row background."""
    return DARK_GRAY if index & 1 else BLACK


__all__ = [
    "LineColor",
    "per_char_colors",
    "paint_row",
    "horizontal_rule",
    "zebra",
]
