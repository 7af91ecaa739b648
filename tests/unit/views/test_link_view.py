"""Symlink view rendering."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from filequery.entries.expand import children_of
from filequery.entries.store import EntryStore
from filequery.views.config import LinkViewConfig
from filequery.views.link import render_link


class LinkViewTests(unittest.TestCase):
    def test_link_target_is_shown_unresolved(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            os.symlink("does-not-exist", root / "dangling")
            store = EntryStore()
            base = store.open_base(root)
            link = children_of(store, base, True)[0]

            result = render_link(store, link.id, LinkViewConfig(min_width=40, max_width=90, no_color=True))

            self.assertFalse(result.is_error)
            text = result.text()
            self.assertIn("points to", text)
            self.assertIn("does-not-exist", text)
            self.assertTrue(result.lines[-1].startswith("took "))

    def test_readlink_failure_renders_an_error_panel(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            os.symlink("target", root / "ln")
            store = EntryStore()
            base = store.open_base(root)
            link = children_of(store, base, True)[0]
            (root / "ln").unlink()

            result = render_link(store, link.id, LinkViewConfig(min_width=40, max_width=90, no_color=True))

            self.assertTrue(result.is_error)
            self.assertIn("readlink", result.text())

    def test_undecodable_target_renders_as_valid_text(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            try:
                os.symlink(b"gone\xff", os.path.join(os.fsencode(root), b"ln"))
            except OSError:
                self.skipTest("filesystem rejects non-UTF-8 names")
            store = EntryStore()
            base = store.open_base(root)
            link = children_of(store, base, True)[0]

            text = render_link(store, link.id, LinkViewConfig(min_width=40, max_width=90, no_color=True)).text()

            text.encode("utf-8")
            self.assertIn("gone\ufffd", text)


if __name__ == "__main__":
    unittest.main()
