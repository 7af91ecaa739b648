"""Opaque 128-bit entry identifiers.

The top four bits tag the id subspace. Normal ids name real filesystem
objects; the other tags name synthetic rows (errors, messages and
"truncated N rows" markers). Truncation markers are a pure function of the
elided count so the store can reuse one entry per count.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from enum import IntEnum

ID_BITS = 128
TAG_SHIFT = ID_BITS - 4
TAG_MASK = 0xF << TAG_SHIFT
PAYLOAD_MASK = (1 << TAG_SHIFT) - 1


class IdTag(IntEnum):
    NORMAL = 0x0
    ERROR = 0x1
    TRUNCATED = 0x2
    MESSAGE = 0x3


def _random_payload() -> int:
    return secrets.randbits(ID_BITS) & PAYLOAD_MASK


@dataclass(frozen=True, order=True)
class EntryId:
    """Immutable identifier; equal iff the bit patterns are equal."""

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value < (1 << ID_BITS):
            raise ValueError(f"entry id out of range: {self.value:#x}")

    @classmethod
    def new_normal(cls) -> EntryId:
        return cls(_random_payload())

    @classmethod
    def new_error(cls) -> EntryId:
        return cls(_random_payload() | (IdTag.ERROR << TAG_SHIFT))

    @classmethod
    def new_message(cls) -> EntryId:
        return cls(_random_payload() | (IdTag.MESSAGE << TAG_SHIFT))

    @classmethod
    def truncated_marker(cls, count: int) -> EntryId:
        """Return the id for a "truncated ``count`` rows" row.

        The same ``count`` always yields the same id.
        """
        if count < 0 or count > PAYLOAD_MASK:
            raise ValueError(f"truncated row count out of range: {count}")
        return cls((IdTag.TRUNCATED << TAG_SHIFT) | count)

    @property
    def tag(self) -> IdTag:
        return IdTag(self.value >> TAG_SHIFT)

    @property
    def payload(self) -> int:
        return self.value & PAYLOAD_MASK

    @property
    def is_special(self) -> bool:
        """True for synthetic (non-filesystem) ids."""
        return (self.value >> TAG_SHIFT) != 0

    def debug_info(self) -> str:
        tag = self.tag
        if tag is IdTag.NORMAL:
            return f"EntryId.normal({self.value})"
        if tag is IdTag.ERROR:
            return f"EntryId.error({self.payload})"
        if tag is IdTag.TRUNCATED:
            return f"EntryId.truncated_rows({self.payload})"
        return f"EntryId.message({self.payload})"

    def __repr__(self) -> str:
        return self.debug_info()


# Process start directory and filesystem root.
BASE_ID = EntryId(0)
ROOT_ID = EntryId(1)


def is_special(entry_id: EntryId) -> bool:
    return entry_id.is_special


__all__ = [
    "IdTag",
    "EntryId",
    "BASE_ID",
    "ROOT_ID",
    "is_special",
]
