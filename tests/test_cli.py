"""CLI argument, default-path and render-loop behavior tests.

Verifies how ``filequery.cli.main`` chooses target paths and applies flags.
"""

from __future__ import annotations

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from filequery import cli
from filequery.colors import strip_ansi
from filequery.entries.sorting import ColumnKind
from filequery.settings import Settings


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "alpha.txt").write_text("alpha\n", encoding="utf-8")
        (self.root / ".dot").write_text("x", encoding="utf-8")
        patcher = mock.patch("filequery.cli.load_settings", return_value=Settings())
        patcher.start()
        self.addCleanup(patcher.stop)
        saver = mock.patch("filequery.cli.save_settings")
        self.save_settings = saver.start()
        self.addCleanup(saver.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _main(self, *argv: str, stdin: str = "") -> str:
        out = io.StringIO()
        with mock.patch.object(sys, "stdout", out), mock.patch.object(sys, "stdin", io.StringIO(stdin)):
            cli.main(list(argv), default_path=self.root)
        return out.getvalue()

    def test_once_renders_the_default_directory(self) -> None:
        output = self._main("--once", "--width", "100", "--no-color")
        self.assertIn("alpha.txt", output)
        self.assertNotIn(".dot", output)
        self.assertIn("1 elements", output)
        self.assertNotIn("\033[", output)
        self.save_settings.assert_not_called()

    def test_flags_override_settings(self) -> None:
        output = self._main(
            str(self.root), "--once", "--width", "100", "--hidden", "--sort", "size", "--reverse", "--max-row", "7"
        )
        plain = strip_ansi(output)
        self.assertIn(".dot", plain)
        self.assertIn("ORDER BY size DESC LIMIT 7", plain)

    def test_file_path_opens_the_file_view(self) -> None:
        output = self._main(str(self.root / "alpha.txt"), "--once", "--width", "100", "--no-color")
        self.assertIn("line", output)
        self.assertIn("alpha", output)

    def test_command_loop_runs_until_quit_and_saves_settings(self) -> None:
        output = self._main("--width", "100", "--no-color", stdin="1\nq\n;h\nq\n")
        self.assertEqual(output.count("> "), 4)
        self.save_settings.assert_called_once()
        saved = self.save_settings.call_args.args[0]
        self.assertTrue(saved.show_hidden)

    def test_end_of_input_stops_the_loop(self) -> None:
        output = self._main("--width", "100", "--no-color", stdin="")
        self.assertEqual(output.count("> "), 1)

    def test_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self._main(str(self.root / "missing"), "--once")

    def test_invalid_flags_exit(self) -> None:
        with mock.patch.object(sys, "stderr", io.StringIO()):
            with self.assertRaises(SystemExit):
                self._main("--max-row", "0")
            with self.assertRaises(SystemExit):
                self._main("--sort", "index")

    def test_sort_flag_parses_columns(self) -> None:
        args = cli.build_parser().parse_args(["--sort", "total-size"])
        self.assertIs(args.sort, ColumnKind.TOTAL_SIZE)

    def test_defaults_to_current_working_directory(self) -> None:
        previous_cwd = Path.cwd()
        try:
            os.chdir(self.root)
            out = io.StringIO()
            with mock.patch.object(sys, "stdout", out):
                cli.main(["--once", "--width", "100", "--no-color"])
        finally:
            os.chdir(previous_cwd)
        self.assertIn("alpha.txt", out.getvalue())


if __name__ == "__main__":
    unittest.main()
