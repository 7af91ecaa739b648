"""File contents view: highlighted, line-numbered text or a hex dump.

Only a bounded prefix is read: 256 KiB for text, 16 KiB from the current
offset for hex. Content that is not UTF-8 (or contains NUL bytes) falls back
to the hex viewer unless text mode is forced.
"""

from __future__ import annotations

import logging
import time
import unicodedata
from pathlib import Path

from ..colors import GRAY, GREEN, RED, RGB, WHITE, YELLOW
from ..entries.ids import EntryId
from ..entries.store import EntryStore, os_error_message
from ..entries.types import Entry, display_path
from ..highlight import highlight_spans
from ..table.layout import COLUMN_MARGIN, Alignment, compute_column_widths
from ..table.paint import LineColor
from .config import FileReadMode, FileViewConfig
from .format import format_duration, prettify_size
from .frame import paint_titled_table, render_error_panel
from .result import FileViewResult, ViewerKind

logger = logging.getLogger(__name__)

TEXT_READ_LIMIT = 1 << 18
HEX_READ_LIMIT = 16384
TAB_WIDTH = 4
LINE_BORDER = "│"

# (max table width, bytes per row, offset col, hex col, ascii col)
# e.g. '  00000000  7f 45 4c 46 02 01 01 00  .ELF....  ' is the 8-byte layout.
HEX_LAYOUTS = (
    (39 + 4 * COLUMN_MARGIN, 4, 8, 11, 4),
    (74 + 4 * COLUMN_MARGIN, 8, 8, 23, 8),
    (144 + 4 * COLUMN_MARGIN, 16, 8, 48, 18),
    (None, 32, 8, 98, 38),
)


def hex_layout(max_width: int) -> tuple[int, int, int, int, int]:
    """Return ``(bytes_per_row, total_width, offset_w, hex_w, ascii_w)``."""
    for limit, per_row, offset_w, hex_w, ascii_w in HEX_LAYOUTS:
        if limit is None or max_width < limit:
            return per_row, offset_w + hex_w + ascii_w + 4 * COLUMN_MARGIN, offset_w, hex_w, ascii_w
    raise AssertionError("unreachable")


def decode_text(data: bytes, partial: bool) -> str | None:
    """Decode ``data`` as UTF-8 text, or ``None`` if it looks binary.

    A multi-byte character cut off by a partial read is dropped.
    """
    if b"\x00" in data:
        return None
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        if partial and exc.end == len(data) and exc.start >= len(data) - 3:
            try:
                return data[: exc.start].decode("utf-8")
            except UnicodeDecodeError:
                return None
        return None


def normalize_text(text: str) -> str:
    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\r\n", "\n").replace("\r", " ")


def display_line(line: str, colors: list[RGB]) -> tuple[str, list[RGB]]:
    """Expand tabs and mask control characters, keeping colors aligned."""
    out_chars: list[str] = []
    out_colors: list[RGB] = []
    for ch, color in zip(line, colors):
        if ch == "\t":
            out_chars.append(" " * TAB_WIDTH)
            out_colors.extend([color] * TAB_WIDTH)
        elif unicodedata.category(ch) == "Cc":
            out_chars.append(".")
            out_colors.append(GRAY)
        else:
            out_chars.append(ch)
            out_colors.append(color)
    return "".join(out_chars), out_colors


def render_file(store: EntryStore, entry_id: EntryId, config: FileViewConfig) -> FileViewResult:
    """Render ``entry_id`` as text or hex; failures become an error panel."""
    started_at = time.perf_counter()
    entry = store.get(entry_id)
    if entry is None:
        return _error(config, "get", f"get({entry_id.debug_info()}) has failed")
    path = store.resolve_path(entry_id)
    if path is None:
        return _error(config, "resolve_path", f"resolve_path({entry_id.debug_info()}) has failed", entry)

    if config.read_mode is not FileReadMode.HEX:
        try:
            with path.open("rb") as handle:
                content = handle.read(TEXT_READ_LIMIT)
        except OSError as exc:
            logger.debug("reading %s failed: %s", path, exc)
            return _error(config, "read", os_error_message(exc), entry, path)

        partial = entry.size > len(content)
        if config.read_mode is FileReadMode.TEXT:
            text: str | None = content.decode("utf-8", errors="replace")
        else:
            text = decode_text(content, partial)
        if text is not None:
            result = _render_text(entry, path, normalize_text(text), content, config)
            result.lines.append(f"took {format_duration(time.perf_counter() - started_at)}")
            return result

    result = _render_hex(entry, path, config)
    if not result.is_error:
        result.lines.append(f"took {format_duration(time.perf_counter() - started_at)}")
    return result


def _render_text(entry: Entry, path: Path, text: str, content: bytes, config: FileViewConfig) -> FileViewResult:
    source_lines = text.split("\n")
    if len(source_lines) > 1 and source_lines[-1] == "":
        source_lines.pop()
    if config.no_color:
        spans = [[WHITE] * len(line) for line in source_lines]
    else:
        spans = highlight_spans("\n".join(source_lines), entry.extension, config.style)

    first = min(max(0, config.offset), max(0, len(source_lines) - 1))
    budget = max(1, config.max_row)
    remaining = len(source_lines) - first
    shown = remaining if remaining <= budget else budget - 1

    rows: list[list[str]] = [["line", "", "content"]]
    alignments: list[list[Alignment]] = [[Alignment.CENTER] * 3]
    colors: list[list[LineColor]] = [[WHITE] * 3]
    highlights = set(config.highlights)
    last_line: int | None = None
    for idx in range(first, first + shown):
        line_no = idx + 1
        line_text, line_colors = display_line(source_lines[idx], spans[idx])
        if line_no in highlights:
            label = f">>> {line_no}"
            label_color: LineColor = [RED] * 3 + [WHITE] * (len(label) - 3)
        else:
            label = str(line_no)
            label_color = WHITE
        rows.append([label, LINE_BORDER, line_text])
        alignments.append([Alignment.RIGHT, Alignment.LEFT, Alignment.LEFT])
        colors.append([label_color, WHITE, line_colors])
        last_line = line_no

    # Normalizing keeps every "\n", so raw lines index like source_lines.
    if shown < remaining or entry.size > len(content):
        consumed = sum(len(line) + 1 for line in content.split(b"\n")[: first + shown])
        truncated = max(0, entry.size - min(consumed, len(content)))
        rows.append([f"... (truncated {prettify_size(truncated)})"])
        alignments.append([Alignment.LEFT])
        colors.append([WHITE])

    widths = compute_column_widths(rows, config.max_width, config.min_width, COLUMN_MARGIN)
    lines = paint_titled_table(
        display_path(path),
        prettify_size(entry.size),
        rows,
        alignments,
        colors,
        config.max_width,
        config.min_width,
        no_color=config.no_color,
        widths_by_length=widths,
    )
    if config.alert:
        lines.append(config.alert)
    return FileViewResult(lines=lines, width=widths[3][2], viewer_kind=ViewerKind.TEXT, last_line=last_line)


def _hex_cells(chunk: bytes) -> tuple[str, list[RGB], str, list[RGB]]:
    hex_parts: list[str] = []
    hex_colors: list[RGB] = []
    ascii_parts: list[str] = []
    ascii_colors: list[RGB] = []
    for index, byte in enumerate(chunk):
        hex_parts.append(f"{byte:02x}")
        hex_colors.extend([GRAY, GRAY] if byte == 0 else [YELLOW, YELLOW])
        if 0x20 <= byte <= 0x7E:
            ascii_parts.append(chr(byte))
            ascii_colors.append(YELLOW)
        else:
            ascii_parts.append(".")
            ascii_colors.append(GRAY)

        if index == len(chunk) - 1:
            continue
        if index & 7 == 7:
            hex_parts.append("  ")
            hex_colors.extend([WHITE, WHITE])
            ascii_parts.append("  ")
            ascii_colors.extend([WHITE, WHITE])
        else:
            hex_parts.append(" ")
            hex_colors.append(WHITE)
    return "".join(hex_parts), hex_colors, "".join(ascii_parts), ascii_colors


def _render_hex(entry: Entry, path: Path, config: FileViewConfig) -> FileViewResult:
    offset = config.offset - (config.offset & 7)
    offset = max(32, min(entry.size, offset + 32)) - 32
    try:
        with path.open("rb") as handle:
            handle.seek(offset)
            buffer = handle.read(HEX_READ_LIMIT)
    except OSError as exc:
        logger.debug("reading %s at %d failed: %s", path, offset, exc)
        return _error(config, "read", os_error_message(exc), entry, path)

    per_row, total, offset_w, hex_w, ascii_w = hex_layout(config.max_width)
    rows: list[list[str]] = [["offset", "hex", "ascii"]]
    alignments: list[list[Alignment]] = [[Alignment.CENTER] * 3]
    colors: list[list[LineColor]] = [[WHITE] * 3]

    highlights = sorted(config.highlights)
    chunks = [buffer[start : start + per_row] for start in range(0, len(buffer), per_row)]
    budget = max(1, config.max_row)
    more_data = offset + len(buffer) < entry.size
    if len(chunks) > budget or (more_data and len(chunks) == budget):
        chunks = chunks[: budget - 1]

    for chunk in chunks:
        row_end = offset + per_row
        offset_label = f"{offset:08x}"
        offset_color: RGB = GREEN if offset & 255 == 0 else WHITE
        if any(offset <= mark < row_end for mark in highlights):
            offset_label = ">" * 8
            offset_color = RED
        hex_text, hex_colors, ascii_text, ascii_colors = _hex_cells(chunk)
        rows.append([offset_label, hex_text, ascii_text])
        alignments.append([Alignment.RIGHT, Alignment.LEFT, Alignment.LEFT])
        colors.append([offset_color, hex_colors, ascii_colors])
        offset += len(chunk)

    truncated = max(0, entry.size - offset)
    if truncated > 0:
        rows.append([f"... (truncated {prettify_size(truncated)})"])
        alignments.append([Alignment.LEFT])
        colors.append([WHITE])

    widths = {3: [offset_w, hex_w, ascii_w], 1: [total - 2 * COLUMN_MARGIN]}
    lines = paint_titled_table(
        display_path(path),
        prettify_size(entry.size),
        rows,
        alignments,
        colors,
        config.max_width,
        config.min_width,
        no_color=config.no_color,
        widths_by_length=widths,
    )
    if config.alert:
        lines.append(config.alert)
    return FileViewResult(lines=lines, width=per_row, viewer_kind=ViewerKind.HEX, last_line=None)


def _error(
    config: FileViewConfig,
    operation: str,
    message: str,
    entry: Entry | None = None,
    path: Path | None = None,
) -> FileViewResult:
    lines = render_error_panel(
        operation,
        message,
        entry=entry,
        path=path,
        min_width=config.min_width,
        max_width=config.max_width,
        no_color=config.no_color,
    )
    return FileViewResult(lines=lines, is_error=True)


__all__ = [
    "TEXT_READ_LIMIT",
    "HEX_READ_LIMIT",
    "hex_layout",
    "decode_text",
    "normalize_text",
    "display_line",
    "render_file",
]
