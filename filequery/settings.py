"""Persistent JSON settings.

Stores listing preferences (hidden files, sort column and direction, row
budget) and the highlight style. Missing or malformed config falls back to
defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .entries.sorting import ColumnKind
from .highlight import DEFAULT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "filequery"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = path or CONFIG_PATH
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring config %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON; write errors are logged."""
    config_path = path or CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError) as exc:
        logger.debug("could not write config %s: %s", config_path, exc)


def _coerce_positive_int(value: object) -> int | None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return None
    return value


@dataclass
class Settings:
    show_hidden: bool = False
    sort_by: ColumnKind = ColumnKind.NAME
    sort_reverse: bool = False
    max_row: int | None = None
    style: str = DEFAULT_STYLE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Settings:
        """Build settings from raw JSON, dropping invalid values."""
        settings = cls()
        value = data.get("show_hidden")
        if isinstance(value, bool):
            settings.show_hidden = value
        value = data.get("sort_reverse")
        if isinstance(value, bool):
            settings.sort_reverse = value
        value = data.get("sort_by")
        if isinstance(value, str):
            try:
                column = ColumnKind.parse(value)
            except ValueError:
                column = None
            if column is not None and column is not ColumnKind.INDEX:
                settings.sort_by = column
        settings.max_row = _coerce_positive_int(data.get("max_row"))
        value = data.get("style")
        if isinstance(value, str) and value:
            settings.style = value
        return settings

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "show_hidden": self.show_hidden,
            "sort_by": self.sort_by.value,
            "sort_reverse": self.sort_reverse,
            "style": self.style,
        }
        if self.max_row is not None:
            data["max_row"] = self.max_row
        return data


def load_settings(path: Path | None = None) -> Settings:
    return Settings.from_dict(load_config(path))


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Merge ``settings`` into the stored config, keeping unknown keys."""
    config = load_config(path)
    config.update(settings.to_dict())
    save_config(config, path)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "Settings",
    "load_settings",
    "save_settings",
]
