"""Text and hex file viewers."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from filequery.colors import RED
from filequery.entries.store import EntryStore
from filequery.views.config import FileReadMode, FileViewConfig
from filequery.views.file import decode_text, display_line, hex_layout, normalize_text, render_file
from filequery.views.result import ViewerKind


def _config(**overrides) -> FileViewConfig:
    config = FileViewConfig(max_row=20, min_width=40, max_width=94, no_color=True)
    for key, value in overrides.items():
        setattr(config, key, value)
    return config


class FileViewTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.store = EntryStore()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _entry(self, name: str, content: bytes):
        (self.root / name).write_bytes(content)
        return self.store.require(self.store.register_path(self.root / name))

    def test_text_file_is_line_numbered(self) -> None:
        entry = self._entry("hello.py", b"print('hi')\nx = 1\n")
        result = render_file(self.store, entry.id, _config())

        self.assertEqual(result.viewer_kind, ViewerKind.TEXT)
        self.assertEqual(result.last_line, 2)
        text = result.text()
        self.assertIn("hello.py", result.lines[1])
        self.assertIn("print('hi')", text)
        row = next(line for line in result.lines if "print('hi')" in line)
        self.assertEqual(row.split("│")[1].strip(), "1")
        self.assertNotIn("truncated", text)

    def test_long_text_gets_a_truncated_footer(self) -> None:
        content = "".join(f"line {idx}\n" for idx in range(100)).encode()
        entry = self._entry("long.txt", content)
        result = render_file(self.store, entry.id, _config(max_row=10))

        self.assertEqual(result.last_line, 9)
        self.assertIn("... (truncated", result.text())

    def test_fully_shown_crlf_and_bom_files_have_no_footer(self) -> None:
        for name, content in (("crlf.txt", b"one\r\ntwo\r\nthree\r\n"), ("bom.txt", b"\xef\xbb\xbfone\ntwo\n")):
            with self.subTest(name=name):
                result = render_file(self.store, self._entry(name, content).id, _config())
                self.assertEqual(result.viewer_kind, ViewerKind.TEXT)
                self.assertNotIn("truncated", result.text())

    def test_truncated_footer_counts_raw_bytes(self) -> None:
        content = b"".join(b"line %d\r\n" % idx for idx in range(20))
        entry = self._entry("crlf-long.txt", content)
        result = render_file(self.store, entry.id, _config(max_row=5))

        self.assertEqual(result.last_line, 4)
        self.assertIn("... (truncated 138 B)", result.text())

    def test_offset_and_highlights(self) -> None:
        content = "".join(f"row{idx}\n" for idx in range(1, 31)).encode()
        entry = self._entry("rows.txt", content)
        result = render_file(self.store, entry.id, _config(offset=10, highlights=[12]))

        text = result.text()
        self.assertNotIn("row10", text)
        self.assertIn("row11", text)
        self.assertIn(">>> 12", text)
        self.assertEqual(result.last_line, 30)

    def test_colored_text_uses_truecolor_escapes(self) -> None:
        entry = self._entry("color.py", b"def f():\n    return 1\n")
        result = render_file(self.store, entry.id, _config(no_color=False))
        self.assertIn("\033[38;2;", result.text())

    def test_binary_content_goes_to_the_hex_viewer(self) -> None:
        entry = self._entry("blob.bin", b"\x7fELF\x00\x01\x02" + bytes(range(256)) * 16)
        result = render_file(self.store, entry.id, _config(max_row=5))

        self.assertEqual(result.viewer_kind, ViewerKind.HEX)
        self.assertEqual(result.width, 16)
        text = result.text()
        self.assertIn("00000000", text)
        self.assertIn("7f 45 4c 46 00 01 02", text)
        self.assertIn(".ELF...", text)
        self.assertIn("... (truncated", text)
        self.assertIsNone(result.last_line)

    def test_hex_offset_is_aligned_and_clamped(self) -> None:
        entry = self._entry("data.bin", bytes(4096))
        text = render_file(self.store, entry.id, _config(read_mode=FileReadMode.HEX, offset=21)).text()
        self.assertIn("00000010", text)
        self.assertNotIn("00000000", text)

        small = self._entry("small.bin", bytes(40))
        text = render_file(self.store, small.id, _config(read_mode=FileReadMode.HEX, offset=30)).text()
        self.assertIn("00000008", text)

    def test_hex_highlight_marks_the_row(self) -> None:
        entry = self._entry("mark.bin", bytes(64))
        text = render_file(self.store, entry.id, _config(read_mode=FileReadMode.HEX, highlights=[20])).text()
        self.assertIn(">>>>>>>>", text)
        self.assertIn("00000000", text)
        self.assertNotIn("00000010", text)

    def test_read_mode_can_force_text(self) -> None:
        entry = self._entry("mixed.bin", b"abc\xffdef\n")
        self.assertEqual(render_file(self.store, entry.id, _config()).viewer_kind, ViewerKind.HEX)
        forced = render_file(self.store, entry.id, _config(read_mode=FileReadMode.TEXT))
        self.assertEqual(forced.viewer_kind, ViewerKind.TEXT)
        self.assertIn("abc\ufffddef", forced.text())

    def test_undecodable_file_name_renders_as_valid_text(self) -> None:
        raw = os.path.join(os.fsencode(self.root), b"bad\xff.txt")
        try:
            with open(raw, "wb") as handle:
                handle.write(b"hello\n")
        except OSError:
            self.skipTest("filesystem rejects non-UTF-8 names")
        entry = self.store.require(self.store.register_path(Path(os.fsdecode(raw))))

        result = render_file(self.store, entry.id, _config())

        self.assertFalse(result.is_error)
        text = result.text()
        text.encode("utf-8")
        self.assertIn("bad\ufffd.txt", text)

    def test_missing_file_renders_an_error_panel(self) -> None:
        entry = self._entry("gone.txt", b"bye\n")
        (self.root / "gone.txt").unlink()
        result = render_file(self.store, entry.id, _config())
        self.assertTrue(result.is_error)
        self.assertIn("No such file", result.text())


class FileViewHelperTests(unittest.TestCase):
    def test_hex_layout_by_width(self) -> None:
        self.assertEqual(hex_layout(40), (4, 31, 8, 11, 4))
        self.assertEqual(hex_layout(60)[0], 8)
        self.assertEqual(hex_layout(100)[0], 16)
        self.assertEqual(hex_layout(200), (32, 152, 8, 98, 38))

    def test_decode_text(self) -> None:
        self.assertEqual(decode_text("é".encode(), partial=False), "é")
        self.assertEqual(decode_text(b"ab\xc3", partial=True), "ab")
        self.assertIsNone(decode_text(b"ab\xc3", partial=False))
        self.assertIsNone(decode_text(b"a\x00b", partial=False))

    def test_normalize_text(self) -> None:
        self.assertEqual(normalize_text("\ufeffa\r\nb\rc"), "a\nb c")

    def test_display_line_expands_tabs_and_masks_controls(self) -> None:
        text, colors = display_line("a\tb\x07", [RED] * 4)
        self.assertEqual(text, "a    b.")
        self.assertEqual(len(colors), len(text))


if __name__ == "__main__":
    unittest.main()
