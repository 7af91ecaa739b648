"""Directory expansion happens once; recursive sizes are memoized."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from filequery.entries.expand import children_count, children_of, expand
from filequery.entries.sizes import recursive_size
from filequery.entries.sorting import ColumnKind, sort_entries
from filequery.entries.store import EntryStore
from filequery.views.format import prettify_size


def _write(path: Path, size: int) -> None:
    path.write_bytes(b"x" * size)


class ExpandTests(unittest.TestCase):
    def test_expand_reads_each_directory_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root / "a.txt", 1)
            _write(root / "b.txt", 2)
            store = EntryStore()
            base = store.open_base(root)

            with mock.patch("os.scandir", wraps=os.scandir) as scandir:
                expand(store, base)
                first = list(store.require(base).children or [])
                expand(store, base)
                children_of(store, base, True)
                children_count(store, base, False)

            self.assertEqual(scandir.call_count, 1)
            self.assertEqual(store.stats.dir_reads, 1)
            self.assertEqual(store.require(base).children, first)
            self.assertEqual(len(first), 2)

    def test_hidden_children_are_filtered_on_request(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root / ".hidden", 1)
            _write(root / "shown", 1)
            store = EntryStore()
            base = store.open_base(root)

            self.assertEqual([c.name for c in children_of(store, base, False)], ["shown"])
            self.assertEqual(children_count(store, base, True), 2)
            self.assertEqual(children_count(store, base, False), 1)

    def test_unreadable_directory_yields_a_single_error_child(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            store = EntryStore()
            base = store.open_base(Path(tmp))
            with mock.patch("os.scandir", side_effect=PermissionError(13, "Permission denied")):
                children = children_of(store, base, False)

            self.assertEqual(len(children), 1)
            self.assertTrue(children[0].is_special)
            self.assertEqual(children[0].name, "<<Error: Permission Denied>>")
            self.assertIsNone(children[0].children)

    def test_expand_ignores_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root / "f", 3)
            store = EntryStore()
            base = store.open_base(root)
            child = children_of(store, base, True)[0]
            expand(store, child.id)
            self.assertIsNone(child.children)
            self.assertEqual(children_count(store, child.id, True), 0)


class RecursiveSizeTests(unittest.TestCase):
    def test_sizes_sum_hidden_children_and_memoize(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub").mkdir()
            _write(root / "small", 10)
            _write(root / "sub" / ".mid", 2048)
            _write(root / "sub" / "big", 5_000_000)
            store = EntryStore()
            base = store.open_base(root)

            self.assertEqual(recursive_size(store, base), 5_002_058)
            reads = store.stats.dir_reads
            self.assertEqual(recursive_size(store, base), 5_002_058)
            self.assertEqual(store.stats.dir_reads, reads)

            sizes = {child.name: recursive_size(store, child.id) for child in children_of(store, base, True)}
            self.assertEqual(sizes, {"small": 10, "sub": 5_002_048})
            self.assertEqual(prettify_size(10), "10 B")
            self.assertEqual(prettify_size(2048), "2 KiB")
            self.assertEqual(prettify_size(5_000_000), "4 MiB")

    def test_symlinks_and_synthetic_entries_count_zero(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "target").mkdir()
            _write(root / "target" / "data", 100)
            os.symlink(root / "target", root / "link")
            store = EntryStore()
            base = store.open_base(root)

            link = next(c for c in children_of(store, base, True) if c.name == "link")
            self.assertTrue(link.is_symlink)
            self.assertEqual(recursive_size(store, link.id), 0)
            self.assertEqual(recursive_size(store, base), 100)
            self.assertEqual(recursive_size(store, store.register_error("x")), 0)
            self.assertEqual(recursive_size(store, store.truncated_marker(4)), 0)

    def test_deep_trees_do_not_hit_the_recursion_limit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            current = Path(tmp)
            for _ in range(60):
                current = current / "d"
                current.mkdir()
            _write(current / "leaf", 7)
            store = EntryStore()
            base = store.open_base(Path(tmp))
            self.assertEqual(recursive_size(store, base), 7)


class SortEntriesTests(unittest.TestCase):
    def test_sort_by_columns(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _write(root / "b.py", 30)
            _write(root / "a.txt", 20)
            (root / "c").mkdir()
            _write(root / "c" / "inner", 500)
            store = EntryStore()
            base = store.open_base(root)
            entries = children_of(store, base, True)

            sort_entries(store, entries, ColumnKind.NAME)
            self.assertEqual([e.name for e in entries], ["a.txt", "b.py", "c"])
            sort_entries(store, entries, ColumnKind.TOTAL_SIZE, reverse=True)
            self.assertEqual([e.name for e in entries], ["c", "b.py", "a.txt"])
            sort_entries(store, entries, ColumnKind.FILE_TYPE)
            self.assertEqual(entries[-1].name, "c")
            sort_entries(store, entries, ColumnKind.FILE_EXT)
            self.assertEqual([e.extension for e in entries], [None, "py", "txt"])
            with self.assertRaises(ValueError):
                sort_entries(store, entries, ColumnKind.INDEX)

    def test_column_parse_accepts_aliases(self) -> None:
        self.assertIs(ColumnKind.parse("total-size"), ColumnKind.TOTAL_SIZE)
        self.assertIs(ColumnKind.parse("TYPE"), ColumnKind.FILE_TYPE)
        self.assertIs(ColumnKind.parse("extension"), ColumnKind.FILE_EXT)
        with self.assertRaises(ValueError):
            ColumnKind.parse("colour")


if __name__ == "__main__":
    unittest.main()
