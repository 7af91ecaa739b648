"""Symlink view: the raw link target, unresolved."""

from __future__ import annotations

import logging
import os
import time

from ..colors import BLUE, WHITE
from ..entries.ids import EntryId
from ..entries.store import EntryStore, os_error_message
from ..entries.types import display_path, lossy_name
from ..table.layout import Alignment
from .config import LinkViewConfig
from .format import format_duration, prettify_size
from .frame import paint_titled_table, render_error_panel
from .result import ViewResult

logger = logging.getLogger(__name__)


def render_link(store: EntryStore, entry_id: EntryId, config: LinkViewConfig) -> ViewResult:
    started_at = time.perf_counter()
    entry = store.get(entry_id)
    path = store.resolve_path(entry_id) if entry is not None else None
    if entry is None or path is None:
        lines = render_error_panel(
            "resolve_path",
            f"resolve_path({entry_id.debug_info()}) has failed",
            entry=entry,
            min_width=config.min_width,
            max_width=config.max_width,
            no_color=config.no_color,
        )
        return ViewResult(lines=lines, is_error=True)

    try:
        target = os.readlink(path)
    except OSError as exc:
        logger.debug("readlink %s failed: %s", path, exc)
        lines = render_error_panel(
            "readlink",
            os_error_message(exc),
            entry=entry,
            path=path,
            min_width=config.min_width,
            max_width=config.max_width,
            no_color=config.no_color,
        )
        return ViewResult(lines=lines, is_error=True)

    lines = paint_titled_table(
        display_path(path),
        prettify_size(entry.size),
        [["points to", lossy_name(target)]],
        [[Alignment.RIGHT, Alignment.LEFT]],
        [[WHITE, BLUE]],
        config.max_width,
        config.min_width,
        no_color=config.no_color,
    )
    lines.append(f"took {format_duration(time.perf_counter() - started_at)}")
    if config.alert:
        lines.append(config.alert)
    return ViewResult(lines=lines)


__all__ = ["render_link"]
