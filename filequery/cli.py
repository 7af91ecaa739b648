"""Command-line front door for filequery.

Parses CLI options, loads persisted settings, opens a session on the target
directory and runs the read-command-render loop.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import TextIO

from .entries.sorting import ColumnKind
from .session import Session
from .settings import load_settings, save_settings
from .views.config import CHROME_ROWS, DirViewConfig, FileViewConfig, LinkViewConfig

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\033[H\033[2J"
PROMPT = "> "
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _sort_column(value: str) -> ColumnKind:
    try:
        column = ColumnKind.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    if column is ColumnKind.INDEX:
        raise argparse.ArgumentTypeError("cannot sort by index")
    return column


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filequery",
        description="Browse a directory tree with tables, sizes and a text/hex file viewer.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--max-row", type=_positive_int, default=None, help="Rows per table (default: fit terminal).")
    parser.add_argument("--hidden", action="store_true", default=None, help="Show hidden files.")
    parser.add_argument("--full-path", action="store_true", help="Show full paths in the name column.")
    parser.add_argument("--sort", type=_sort_column, default=None, help="Sort column (name, size, total_size, ...).")
    parser.add_argument("--reverse", action="store_true", default=None, help="Sort in descending order.")
    parser.add_argument("--style", default=None, help="Pygments style name (default: monokai).")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--once", action="store_true", help="Render the first view and exit.")
    parser.add_argument("--width", type=_positive_int, default=None, help="Output width (default: terminal width).")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages to stderr.")
    return parser


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format=LOG_FORMAT)
    else:
        logging.getLogger("filequery").addHandler(logging.NullHandler())


def build_session(args: argparse.Namespace, default_path: Path) -> Session:
    """Create the session described by parsed ``args``.

    CLI flags override persisted settings. A file path opens its directory
    and then the file itself.
    """
    settings = load_settings()
    if args.hidden is not None:
        settings.show_hidden = args.hidden
    if args.sort is not None:
        settings.sort_by = args.sort
    if args.reverse is not None:
        settings.sort_reverse = args.reverse
    if args.style is not None:
        settings.style = args.style
    if args.max_row is not None:
        settings.max_row = args.max_row

    path = Path(os.path.abspath(args.path or default_path))
    if not os.path.lexists(path):
        raise SystemExit(f"Path not found: {path}")
    target_name = None
    if not path.is_dir():
        path, target_name = path.parent, path.name

    configs = (DirViewConfig(), FileViewConfig(), LinkViewConfig())
    fit_terminal = args.width is None
    for config in configs:
        config.no_color = args.no_color
        if not fit_terminal:
            config.adjust_to_terminal(os.terminal_size((args.width, (settings.max_row or 60) + CHROME_ROWS)))
    dir_config, file_config, link_config = configs
    dir_config.show_full_path = args.full_path

    session = Session.open(
        path,
        settings,
        dir_config=dir_config,
        file_config=file_config,
        link_config=link_config,
        fit_terminal=fit_terminal,
    )
    if target_name is not None:
        target = session.walk(session.current, target_name)
        if target is not None:
            session.current = target
    return session


def run(session: Session, stdin: TextIO, stdout: TextIO, once: bool = False) -> None:
    """Render, read one command, repeat until ``q`` or end of input."""
    interactive = not once and stdout.isatty()
    while True:
        result = session.render()
        if interactive:
            stdout.write(CLEAR_SCREEN)
        stdout.write(result.text())
        if once:
            break
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            break
        if not session.execute(line.rstrip("\n")):
            break
    stdout.flush()


def main(argv: list[str] | None = None, default_path: Path | None = None) -> None:
    """Parse CLI arguments and browse a directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    session = build_session(args, default_path or Path.cwd())
    try:
        run(session, sys.stdin, sys.stdout, once=args.once)
    except KeyboardInterrupt:
        sys.stdout.write("\n")
    if not args.once:
        save_settings(session.settings())


if __name__ == "__main__":
    main()
