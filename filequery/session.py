"""Interactive session state and line-command dispatch.

A session owns the entry store, the id being shown and one config per view
kind. Directory and file views accept different command sets; symlinks use
the file commands.
"""

from __future__ import annotations

import bisect
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from .entries.expand import children_of
from .entries.ids import ROOT_ID, EntryId
from .entries.sorting import ColumnKind, sort_entries
from .entries.store import EntryStore
from .entries.types import Entry, EntryKind
from .settings import Settings
from .views.config import DirViewConfig, FileReadMode, FileViewConfig, LinkViewConfig
from .views.dir import render_directory
from .views.file import render_file
from .views.link import render_link
from .views.result import FileViewResult, ViewerKind, ViewResult

logger = logging.getLogger(__name__)

TERMINAL_TOO_SMALL = "Your terminal is too small to run FileQuery. Please resize your terminal and try again."
ROW_PATTERN = re.compile(r"^(\d+)(?:-(\d+))?$")
JUMP_PATTERN = re.compile(r"^([jk])(\1{1,2}|\d*)$")


def parse_leading_int(text: str) -> int:
    """Parse the leading decimal digits of ``text`` (``0`` when there are none)."""
    match = re.match(r"\d+", text)
    return int(match.group()) if match else 0


def parse_leading_hex(text: str) -> int:
    match = re.match(r"[0-9a-fA-F]+", text)
    return int(match.group(), 16) if match else 0


def jump_distance(suffix: str) -> int:
    """Steps for a ``j``/``k`` suffix: ``""`` 1, doubled 10, tripled 100, digits n."""
    if not suffix:
        return 1
    if suffix.isdigit():
        return int(suffix)
    return 10 if len(suffix) == 1 else 100


class Session:
    """Navigation state driven by one text command per line."""

    def __init__(
        self,
        store: EntryStore,
        current: EntryId,
        dir_config: DirViewConfig | None = None,
        file_config: FileViewConfig | None = None,
        link_config: LinkViewConfig | None = None,
        fit_terminal: bool = True,
        fixed_max_row: int | None = None,
    ) -> None:
        self.store = store
        self.current = current
        self.dir_config = dir_config or DirViewConfig()
        self.file_config = file_config or FileViewConfig()
        self.link_config = link_config or LinkViewConfig()
        self.fit_terminal = fit_terminal
        self.fixed_max_row = fixed_max_row
        self.last_file_result: FileViewResult | None = None

    @classmethod
    def open(cls, path: Path | str, settings: Settings | None = None, **kwargs) -> Session:
        """Start a session at directory ``path``."""
        settings = settings or Settings()
        store = EntryStore()
        base = store.open_base(Path(path))
        dir_config = kwargs.pop("dir_config", None) or DirViewConfig()
        dir_config.show_hidden = settings.show_hidden
        dir_config.sort_by = settings.sort_by
        dir_config.sort_reverse = settings.sort_reverse
        file_config = kwargs.pop("file_config", None) or FileViewConfig()
        file_config.style = settings.style
        return cls(
            store,
            base,
            dir_config=dir_config,
            file_config=file_config,
            fixed_max_row=settings.max_row,
            **kwargs,
        )

    @property
    def configs(self) -> tuple[DirViewConfig, FileViewConfig, LinkViewConfig]:
        return self.dir_config, self.file_config, self.link_config

    @property
    def current_entry(self) -> Entry | None:
        return self.store.get(self.current)

    @property
    def mode(self) -> EntryKind:
        entry = self.current_entry
        return entry.kind if entry is not None else EntryKind.DIRECTORY

    def settings(self) -> Settings:
        """Snapshot of the persisted preferences."""
        return Settings(
            show_hidden=self.dir_config.show_hidden,
            sort_by=self.dir_config.sort_by,
            sort_reverse=self.dir_config.sort_reverse,
            style=self.file_config.style,
        )

    # Rendering

    def render(self) -> ViewResult:
        for config in self.configs:
            if self.fit_terminal:
                config.adjust_to_terminal()
            if self.fixed_max_row is not None:
                config.max_row = self.fixed_max_row
        if self.fit_terminal:
            if self.dir_config.terminal_too_small:
                return ViewResult(lines=[TERMINAL_TOO_SMALL], is_error=True)

        entry = self.current_entry
        if entry is None or entry.kind is EntryKind.DIRECTORY:
            return render_directory(self.store, self.current, self.dir_config)
        if entry.kind is EntryKind.SYMLINK:
            return render_link(self.store, self.current, self.link_config)
        result = render_file(self.store, self.current, self.file_config)
        if not result.is_error:
            self.last_file_result = result
            if result.viewer_kind is ViewerKind.TEXT and result.last_line is not None:
                # scrolled past the end
                self.file_config.offset = min(self.file_config.offset, result.last_line - 1)
        return result

    # Commands

    def execute(self, line: str) -> bool:
        """Apply one command line; return ``False`` when the session should end."""
        command = line.strip()
        for config in self.configs:
            config.reset_alert()
        if self.mode is EntryKind.DIRECTORY:
            return self._execute_dir(command)
        self._execute_file(command)
        return True

    def _execute_dir(self, command: str) -> bool:
        config = self.dir_config
        if not command:
            return True
        if command in ("q", "quit"):
            return False
        if command == "~":
            self._move_to(self.store.base_id or self.current)
            return True
        if command.startswith(";"):
            self._execute_dir_option(command[1:])
            return True

        target = self.walk(self.current, command)
        if target is None:
            config.alert = f"{command!r} file not found"
            return True
        self._move_to(target)
        return True

    def _execute_dir_option(self, option: str) -> None:
        config = self.dir_config
        jump = JUMP_PATTERN.match(option)
        if jump is not None:
            distance = jump_distance(jump.group(2))
            if jump.group(1) == "j":
                config.offset += distance
            else:
                config.offset = max(0, config.offset - distance)
        elif option[:1].isdigit():
            config.offset = parse_leading_int(option)
        elif option == "h":
            config.show_hidden = not config.show_hidden
            config.offset = 0
        elif option == "r":
            config.sort_reverse = not config.sort_reverse
        elif option.startswith("s"):
            name = option[1:].strip()
            try:
                column = ColumnKind.parse(name)
            except ValueError:
                column = None
            if column is None or column is ColumnKind.INDEX:
                config.alert = f"cannot sort by {name!r}"
            else:
                config.sort_by = column
        else:
            config.alert = f"unknown option {option!r}"

    def _execute_file(self, command: str) -> None:
        config = self.file_config
        previous = self.last_file_result
        is_hex = previous is not None and previous.viewer_kind is ViewerKind.HEX
        jump_by = previous.width if is_hex and previous is not None else 1
        entry = self.current_entry

        jump = JUMP_PATTERN.match(command)
        if jump is not None:
            distance = jump_distance(jump.group(2)) * jump_by
            if jump.group(1) == "j":
                config.offset += distance
            else:
                config.offset = max(0, config.offset - distance)
        elif command in ("n", "N"):
            self._jump_to_highlight(forward=command == "n")
        elif command == "noh":
            config.highlights = []
        elif command == "G":
            if is_hex:
                config.offset = max(1, entry.size if entry is not None else 0) - 1
            else:
                last = previous.last_line if previous is not None else None
                config.offset = max(1, last or 1) - 1
        elif command == "gg":
            config.offset = 0
        elif command[:2].lower() == "0x" and len(command) > 2:
            config.offset = parse_leading_hex(command[2:])
        elif command[:1].isdigit():
            number = parse_leading_int(command)
            config.offset = number if is_hex else max(1, number) - 1
        elif command in (";t", ";x", ";a"):
            config.read_mode = {";t": FileReadMode.TEXT, ";x": FileReadMode.HEX, ";a": FileReadMode.AUTO}[command]
            config.offset = 0
        elif command.startswith("/"):
            self._search(command[1:])
        elif command == "q" or (command.startswith("..") and set(command) == {"."}):
            levels = 1 if command == "q" else len(command) - 1
            target = self.current
            for _ in range(levels):
                if target == ROOT_ID:
                    break
                parent = self.store.parent_id(target)
                if parent is None or parent.is_special:
                    break
                target = parent
            self._move_to(target)
            return
        elif command:
            config.alert = f"unknown command {command!r}"

    def _jump_to_highlight(self, forward: bool) -> None:
        config = self.file_config
        if not config.highlights:
            config.alert = "no search results"
            return
        positions = [line_no - 1 for line_no in config.highlights]
        if forward:
            index = bisect.bisect_right(positions, config.offset) % len(positions)
        else:
            index = (bisect.bisect_left(positions, config.offset) - 1) % len(positions)
        config.offset = positions[index]

    def _search(self, pattern: str) -> None:
        """Highlight lines matching ``pattern``; hex view is not searchable."""
        config = self.file_config
        previous = self.last_file_result
        path = self.store.resolve_path(self.current)
        if not pattern or path is None or (previous is not None and previous.viewer_kind is ViewerKind.HEX):
            config.alert = "search failed"
            config.highlights = []
            return
        try:
            regex = re.compile(pattern)
            with path.open("r", encoding="utf-8", errors="replace") as handle:
                matches = [line_no for line_no, line in enumerate(handle, start=1) if regex.search(line)]
        except (re.error, OSError) as exc:
            logger.debug("search %r in %s failed: %s", pattern, path, exc)
            config.alert = "search failed"
            config.highlights = []
            return
        config.highlights = matches
        config.alert = f"found {len(matches)} results"

    def _move_to(self, target: EntryId) -> None:
        if target == self.current:
            self.dir_config.offset = 0
            return
        self.current = target
        self.dir_config.offset = 0
        self.file_config.offset = 0
        self.file_config.highlights = []
        self.file_config.read_mode = FileReadMode.AUTO
        self.last_file_result = None

    # Path walking

    def walk(self, start: EntryId, text: str) -> EntryId | None:
        """Follow a ``/``-separated path of names, row numbers and ``..``.

        A leading ``/`` starts at the filesystem root. Row numbers (``3``,
        ``3-1``) refer to the current listing order. ``None`` when any step
        fails.
        """
        current = start
        if text.startswith("/"):
            root = self.root_id()
            if root is None:
                return None
            current = root
        for component in text.split("/"):
            if component in ("", "."):
                continue
            if set(component) == {"."}:
                for _ in range(len(component) - 1):
                    parent = self.store.parent_id(current) if current != ROOT_ID else None
                    if parent is None or parent.is_special:
                        break
                    current = parent
                continue
            step = self._step(current, component)
            if step is None:
                return None
            current = step
        return current

    def root_id(self) -> EntryId | None:
        current = self.current
        while current != ROOT_ID:
            parent = self.store.parent_id(current)
            if parent is None or parent.is_special:
                return None
            current = parent
        return current

    def _step(self, parent: EntryId, component: str) -> EntryId | None:
        entry = self.store.get(parent)
        if entry is None or not entry.is_dir:
            return None
        config = self.dir_config
        row = ROW_PATTERN.match(component)
        if row is not None:
            children = self._sorted_children(parent)
            child = _pick(children, int(row.group(1)))
            if child is None or row.group(2) is None:
                return child.id if child is not None else None
            if not child.is_dir:
                return None
            nested = _pick(self._sorted_children(child.id), int(row.group(2)))
            return nested.id if nested is not None else None

        candidates = [child for child in children_of(self.store, parent, True) if not child.is_special]
        for child in candidates:
            if child.name == component or child.display_name == component:
                return child.id
        visible = [child for child in candidates if config.show_hidden or not child.is_hidden]
        prefixed = [child for child in visible if child.display_name.startswith(component)]
        if len(prefixed) == 1:
            return prefixed[0].id
        return None

    def _sorted_children(self, entry_id: EntryId) -> list[Entry]:
        config = self.dir_config
        children = children_of(self.store, entry_id, config.show_hidden)
        sort_entries(self.store, children, config.sort_by, config.sort_reverse)
        return children


def _pick(children: Sequence[Entry], number: int) -> Entry | None:
    if number < 1 or number > len(children):
        return None
    child = children[number - 1]
    return None if child.is_special else child


__all__ = ["Session", "TERMINAL_TOO_SMALL", "parse_leading_int", "parse_leading_hex", "jump_distance"]
