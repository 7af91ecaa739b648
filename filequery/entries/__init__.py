"""Lazy cache of filesystem entries.

This package contains the non-UI entry primitives:
- opaque entry ids with a synthetic-row subspace
- the owned entry store with memoized path resolution
- on-demand directory expansion and recursive size aggregation
- listing columns and sort keys
"""

from __future__ import annotations

from .ids import BASE_ID, ROOT_ID, EntryId, IdTag, is_special
from .types import Entry, EntryKind, display_path, extension_of, lossy_name
from .store import ROOT_PATH, EntryStore, StoreStats
from .expand import children_count, children_of, expand
from .sizes import recursive_size
from .sorting import DEFAULT_COLUMNS, ColumnKind, sort_entries

__all__ = [
    "BASE_ID",
    "ROOT_ID",
    "EntryId",
    "IdTag",
    "is_special",
    "Entry",
    "EntryKind",
    "extension_of",
    "lossy_name",
    "display_path",
    "ROOT_PATH",
    "EntryStore",
    "StoreStats",
    "expand",
    "children_of",
    "children_count",
    "recursive_size",
    "ColumnKind",
    "DEFAULT_COLUMNS",
    "sort_entries",
]
