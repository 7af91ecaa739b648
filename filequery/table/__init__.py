"""Table layout primitives.

``layout`` balances column widths and fits cells; ``nesting`` picks listing
rows under a row budget; ``paint`` turns fitted rows into bordered ANSI text.
Only ``layout`` is re-exported here because ``nesting`` depends on the
entry cache, which itself imports ``layout``.
"""

from __future__ import annotations

from .layout import (
    COLUMN_MARGIN,
    Alignment,
    compute_column_widths,
    render_cell,
    table_width,
)

__all__ = [
    "COLUMN_MARGIN",
    "Alignment",
    "compute_column_widths",
    "render_cell",
    "table_width",
]
