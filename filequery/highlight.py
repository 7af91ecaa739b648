"""Syntax highlighting as per-character foreground colors.

Pygments picks a lexer from the file extension and a style by name; the
style's token colors are flattened to one RGB triple per source character
so the table painter can recolor cells after truncation.
"""

from __future__ import annotations

from functools import lru_cache

from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.style import StyleMeta
from pygments.styles import get_style_by_name
from pygments.token import Token
from pygments.util import ClassNotFound

from .colors import RGB, WHITE

DEFAULT_STYLE = "monokai"
_LEXER_OPTIONS = {"stripnl": False, "ensurenl": False, "stripall": False}


def _parse_hex(color: str | None) -> RGB | None:
    if not color:
        return None
    color = color.lstrip("#")
    if len(color) == 3:
        color = "".join(ch * 2 for ch in color)
    if len(color) != 6:
        return None
    try:
        return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16))
    except ValueError:
        return None


@lru_cache(maxsize=32)
def style_by_name(name: str) -> StyleMeta:
    """Return the pygments style ``name``, or the default style if unknown."""
    try:
        return get_style_by_name(name)
    except ClassNotFound:
        return get_style_by_name(DEFAULT_STYLE)


def lexer_for_extension(extension: str | None) -> Lexer:
    if extension:
        try:
            return get_lexer_for_filename(f"file.{extension}", **_LEXER_OPTIONS)
        except ClassNotFound:
            pass
    return TextLexer(**_LEXER_OPTIONS)


class TokenPalette:
    """Memoized ``token type -> RGB`` lookup for one style."""

    def __init__(self, style: StyleMeta) -> None:
        self._style = style
        self._cache: dict[object, RGB] = {}
        self.default = _parse_hex(style.style_for_token(Token.Text).get("color")) or WHITE

    def color_for(self, token_type: object) -> RGB:
        cached = self._cache.get(token_type)
        if cached is not None:
            return cached
        color = _parse_hex(self._style.style_for_token(token_type).get("color")) or self.default
        self._cache[token_type] = color
        return color


def highlight_spans(text: str, extension: str | None, style: str = DEFAULT_STYLE) -> list[list[RGB]]:
    """Return one color per character of each ``\\n``-separated line of ``text``.

    The result has ``text.count("\\n") + 1`` lines; newline characters get no
    color.
    """
    palette = TokenPalette(style_by_name(style))
    lexer = lexer_for_extension(extension)
    lines: list[list[RGB]] = [[]]
    for token_type, value in lexer.get_tokens(text):
        color = palette.color_for(token_type)
        for ch in value:
            if ch == "\n":
                lines.append([])
            else:
                lines[-1].append(color)

    # Lexers may normalize ``\r\n``; pad or trim to the source line lengths.
    source_lines = text.split("\n")
    while len(lines) < len(source_lines):
        lines.append([])
    lines = lines[: len(source_lines)]
    for idx, source in enumerate(source_lines):
        colors = lines[idx]
        if len(colors) < len(source):
            colors.extend([palette.default] * (len(source) - len(colors)))
        elif len(colors) > len(source):
            del colors[len(source) :]
    return lines


__all__ = [
    "DEFAULT_STYLE",
    "style_by_name",
    "lexer_for_extension",
    "TokenPalette",
    "highlight_spans",
]
