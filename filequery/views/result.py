"""Return values of the view renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class ViewResult:
    """Rendered screen lines, without trailing newlines."""

    lines: list[str] = field(default_factory=list)
    is_error: bool = False

    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


class ViewerKind(Enum):
    TEXT = "text"
    HEX = "hex"


@dataclass
class FileViewResult(ViewResult):
    """Text view: ``width`` is the content column width, ``last_line`` the
    last line number read. Hex view: ``width`` is bytes per row."""

    width: int = 0
    viewer_kind: ViewerKind = ViewerKind.TEXT
    last_line: int | None = None


__all__ = ["ViewResult", "ViewerKind", "FileViewResult"]
