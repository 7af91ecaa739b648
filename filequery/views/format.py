"""Human-readable sizes, ages and durations, plus the colors that go with them."""

from __future__ import annotations

from ..colors import GREEN, RED, RGB, WHITE, YELLOW
from ..entries.types import EntryKind

_SIZE_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB")

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
# Average Gregorian month and year; ages that long are never exact anyway.
_MONTH = 2_629_746
_YEAR = 31_556_952
_CENTURY = 100 * _YEAR


def prettify_size(size: int) -> str:
    """Binary-prefixed size, floored: ``10 B``, ``2 KiB``, ``4 MiB``."""
    if size < 1024:
        return f"{size} B"
    value = size
    unit = -1
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value >>= 10
        unit += 1
    return f"{value} {_SIZE_UNITS[unit]}"


def prettify_time(now: float, modified_at: float) -> str:
    """Coarse age of ``modified_at`` relative to ``now``.

    Trailing spaces keep the word "ago" in one column when right-aligned.
    """
    secs = int(max(0.0, now - modified_at))
    if secs < 5:
        return "just now     "
    if secs <= 99:
        return f"{secs} seconds ago  "
    if secs <= _HOUR:
        return f"{secs // _MINUTE} minutes ago  "
    if secs <= _DAY:
        return f"{secs // _HOUR} hours ago    "
    if secs <= 99 * _DAY:
        return f"{secs // _DAY} days ago     "
    if secs <= 99 * _WEEK:
        return f"{secs // _WEEK} weeks ago    "
    if secs <= 99 * _MONTH:
        return f"{secs // _MONTH} months ago   "
    if secs <= 99 * _YEAR:
        return f"{secs // _YEAR} years ago    "
    return f"{secs // _CENTURY} centuries ago"


def format_duration(seconds: float) -> str:
    if seconds < 1e-3:
        return f"{seconds * 1e6:.0f} us"
    if seconds < 1.0:
        return f"{seconds * 1e3:.1f} ms"
    return f"{seconds:.2f} s"


def colorize_type(kind: EntryKind) -> RGB:
    if kind is EntryKind.DIRECTORY:
        return GREEN
    if kind is EntryKind.SYMLINK:
        return YELLOW
    return WHITE


def colorize_name(kind: EntryKind, is_executable: bool) -> RGB:
    if kind is EntryKind.FILE and is_executable:
        return RED
    return colorize_type(kind)


def colorize_size(size: int) -> RGB:
    if size < 1024:
        return GREEN
    if size < 32 << 20:
        return WHITE
    if size < 1 << 30:
        return YELLOW
    return RED


def colorize_time(now: float, modified_at: float) -> RGB:
    secs = max(0.0, now - modified_at)
    if secs < 10:
        return GREEN
    if secs < 3 * _WEEK:
        return WHITE
    if secs < 99 * _DAY:
        return YELLOW
    return RED


__all__ = [
    "prettify_size",
    "prettify_time",
    "format_duration",
    "colorize_type",
    "colorize_name",
    "colorize_size",
    "colorize_time",
]
