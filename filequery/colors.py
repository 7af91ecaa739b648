"""Truecolor palette and ANSI escape helpers."""

from __future__ import annotations

import re

RGB = tuple[int, int, int]

BLACK: RGB = (0, 0, 0)
BLUE: RGB = (32, 32, 192)
DARK_GRAY: RGB = (24, 24, 24)
GRAY: RGB = (128, 128, 128)
GREEN: RGB = (32, 192, 32)
RED: RGB = (192, 32, 32)
WHITE: RGB = (255, 255, 255)
YELLOW: RGB = (192, 192, 32)

RESET = "\033[0m"
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def fg(color: RGB) -> str:
    r, g, b = color
    return f"\033[38;2;{r};{g};{b}m"


def bg(color: RGB) -> str:
    r, g, b = color
    return f"\033[48;2;{r};{g};{b}m"


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


__all__ = [
    "RGB",
    "BLACK",
    "BLUE",
    "DARK_GRAY",
    "GRAY",
    "GREEN",
    "RED",
    "WHITE",
    "YELLOW",
    "RESET",
    "ANSI_ESCAPE_RE",
    "fg",
    "bg",
    "strip_ansi",
]
