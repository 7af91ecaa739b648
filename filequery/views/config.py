"""Per-view rendering settings sized from the live terminal."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..entries.sorting import DEFAULT_COLUMNS, ColumnKind
from ..entries.types import display_path

MIN_TERMINAL_WIDTH = 40
FALLBACK_TERMINAL_SIZE = (96, 40)
# Border columns drawn outside the table width.
BORDER_COLUMNS = 2
# Rules, header rows, summary lines and the prompt.
CHROME_ROWS = 10


@dataclass
class ViewConfig:
    """Settings shared by every view."""

    max_row: int = 60
    min_width: int = 48
    max_width: int = 94
    offset: int = 0
    no_color: bool = False
    alert: str = ""

    def adjust_to_terminal(self, size: os.terminal_size | None = None) -> None:
        """Fit row and width bounds to the terminal (or ``size``)."""
        if size is None:
            size = shutil.get_terminal_size(FALLBACK_TERMINAL_SIZE)
        self.max_width = max(1, size.columns - BORDER_COLUMNS)
        self.min_width = min(self.max_width, max(MIN_TERMINAL_WIDTH, self.max_width // 2))
        self.max_row = max(1, size.lines - CHROME_ROWS)

    @property
    def terminal_too_small(self) -> bool:
        return self.max_width + BORDER_COLUMNS < MIN_TERMINAL_WIDTH

    def reset_alert(self) -> None:
        self.alert = ""


@dataclass
class DirViewConfig(ViewConfig):
    sort_by: ColumnKind = ColumnKind.NAME
    sort_reverse: bool = False
    show_full_path: bool = False
    show_hidden: bool = False
    columns: tuple[ColumnKind, ...] = DEFAULT_COLUMNS

    def to_sql_string(self, path: Path | str) -> str:
        """Describe the listing as a (cosmetic) SQL statement."""
        columns = ", ".join(column.value for column in self.columns)
        where = "" if self.show_hidden else " WHERE name NOT LIKE '.%'"
        direction = "DESC" if self.sort_reverse else "ASC"
        return (
            f"SELECT {columns} FROM '{display_path(path)}'{where} "
            f"ORDER BY {self.sort_by.value} {direction} LIMIT {self.max_row} OFFSET {self.offset};"
        )


class FileReadMode(Enum):
    AUTO = "auto"
    TEXT = "text"
    HEX = "hex"


@dataclass
class FileViewConfig(ViewConfig):
    # Line numbers (text) or byte offsets (hex) to mark, ascending.
    highlights: list[int] = field(default_factory=list)
    read_mode: FileReadMode = FileReadMode.AUTO
    style: str = "monokai"


@dataclass
class LinkViewConfig(ViewConfig):
    pass


__all__ = [
    "MIN_TERMINAL_WIDTH",
    "ViewConfig",
    "DirViewConfig",
    "FileReadMode",
    "FileViewConfig",
    "LinkViewConfig",
]
