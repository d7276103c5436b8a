#!/usr/bin/env python3

"""Ordered offset -> bytes storage for patch entries"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

import bisect
from collections.abc import Iterator

from ztpatch.errors import InvalidOffset, NullOrMissingInput, TooManyEntries

# Longest run stored in a single canonical entry
MAX_ENTRY_LENGTH = 127
# Entry count limit imposed by the 16 bit count field (signed range)
MAX_ENTRIES = 32767
# Largest offset representable in the signed 32 bit offset field
MAX_OFFSET = 0x7FFFFFFF


class PatchStore:
    """Patch entries keyed by file offset, iterated in ascending order"""

    def __init__(self):
        self._offsets: list[int] = []
        self._data: dict[int, bytes] = {}

    def __len__(self) -> int:
        return len(self._offsets)

    def __contains__(self, offset: int) -> bool:
        return offset in self._data

    def __iter__(self) -> Iterator[int]:
        return iter(self._offsets)

    def __getitem__(self, offset: int) -> bytes:
        return self._data[offset]

    def __setitem__(self, offset: int, data: bytes):
        if offset not in self._data:
            bisect.insort(self._offsets, offset)
        self._data[offset] = bytes(data)

    def __delitem__(self, offset: int):
        del self._data[offset]
        del self._offsets[bisect.bisect_left(self._offsets, offset)]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PatchStore):
            return NotImplemented
        return self._offsets == other._offsets and self._data == other._data

    def __repr__(self):
        return f"PatchStore({self.items()!r})"

    def offsets(self) -> list[int]:
        return list(self._offsets)

    def items(self) -> list[tuple[int, bytes]]:
        return [(offset, self._data[offset]) for offset in self._offsets]

    def index(self, offset: int) -> int:
        """Position of ``offset`` in the ascending key order"""
        idx = bisect.bisect_left(self._offsets, offset)
        if idx == len(self._offsets) or self._offsets[idx] != offset:
            raise KeyError(offset)
        return idx

    def copy(self) -> "PatchStore":
        other = PatchStore()
        other._offsets = list(self._offsets)
        other._data = dict(self._data)
        return other

    def clear(self):
        self._offsets.clear()
        self._data.clear()

    def end(self) -> int:
        """One past the last byte written by any entry, 0 when empty"""
        return max((offset + len(data) for offset, data in self._data.items()), default=0)

    def add(self, offset: int, data: bytes):
        """Insert a run of bytes, split into entries of at most MAX_ENTRY_LENGTH

        Piece ``k`` of the run is keyed at ``offset + MAX_ENTRY_LENGTH * k``,
        replacing any entry already stored at that offset. The store is not
        modified if the run cannot be inserted.
        """
        if offset < 0:
            raise InvalidOffset(f"Entry offset must not be negative ({offset})")
        if data is None:
            raise NullOrMissingInput("No entry data provided")
        if offset + max(len(data), 1) - 1 > MAX_OFFSET:
            raise InvalidOffset(f"Entry offset {offset} exceeds the {MAX_OFFSET:#x} limit")

        pieces = [
            (offset + i, bytes(data[i : i + MAX_ENTRY_LENGTH]))
            for i in range(0, len(data), MAX_ENTRY_LENGTH)
        ]
        added = sum(1 for key, _ in pieces if key not in self._data)
        if len(self) + added > MAX_ENTRIES:
            raise TooManyEntries(
                f"Adding {added} entries would exceed the {MAX_ENTRIES} entry limit"
            )

        for key, piece in pieces:
            self[key] = piece
