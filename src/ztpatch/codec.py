#!/usr/bin/env python3

"""Binary patch file layout

All fields little-endian:

    PatchHeader:  target name (13 bytes, NUL padded ASCII)
                  entry count (u16)
    EntryHeader:  offset (s32)
                  length (u8)
                  followed by ``length`` replacement bytes
    Trailer:      optional UTF-8 comment, runs to the end of the file
"""

import ctypes

from ztpatch.errors import InvalidOffset, TooManyEntries, ValidationError
from ztpatch.store import MAX_ENTRIES, MAX_OFFSET, PatchStore
from ztpatch.util.ctypes import bytes_to_uint8

TARGET_NAME_LEN = 13


class PatchHeader(ctypes.LittleEndianStructure):
    _fields_ = [
        ("target_name", TARGET_NAME_LEN * ctypes.c_uint8),
        ("entry_count", ctypes.c_uint16),
    ]
    _pack_ = 1


class EntryHeader(ctypes.LittleEndianStructure):
    _fields_ = [
        ("offset", ctypes.c_int32),
        ("length", ctypes.c_uint8),
    ]
    _pack_ = 1


class PatchReader:
    """Sequential field reader over a patch file image"""

    def __init__(self, data: bytes):
        self._data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self.offset

    def _struct(self, struct_cls, what: str):
        size = ctypes.sizeof(struct_cls)
        if self.remaining < size:
            raise ValidationError(
                f"Truncated {what} at byte {self.offset} ({self.remaining} < {size})"
            )
        s = struct_cls.from_buffer_copy(self._data, self.offset)
        self.offset += size
        return s

    def header(self) -> PatchHeader:
        return self._struct(PatchHeader, "patch header")

    def entry(self) -> tuple[int, bytes]:
        hdr = self._struct(EntryHeader, "entry header")
        if self.remaining < hdr.length:
            raise ValidationError(
                f"Truncated entry data for offset {hdr.offset:08x} ({self.remaining} < {hdr.length})"
            )
        data = bytes(self._data[self.offset : self.offset + hdr.length])
        self.offset += hdr.length
        return hdr.offset, data

    def trailer(self) -> bytes:
        data = bytes(self._data[self.offset :])
        self.offset = len(self._data)
        return data


class PatchWriter:
    """Sequential field writer producing a patch file image"""

    def __init__(self):
        self._chunks: list[bytes] = []

    def header(self, target_name: str, entry_count: int):
        name = target_name.encode("ascii")
        if len(name) > TARGET_NAME_LEN:
            raise ValidationError(f"Target name '{target_name}' too long")
        name = name.ljust(TARGET_NAME_LEN, b"\x00")
        self._chunks.append(bytes(PatchHeader(bytes_to_uint8(name), entry_count)))

    def entry(self, offset: int, data: bytes):
        if not 0 <= offset <= MAX_OFFSET:
            raise InvalidOffset(f"Entry offset {offset} does not fit the offset field")
        if len(data) > 0xFF:
            raise ValidationError(f"Entry at {offset:08x} too long ({len(data)} bytes)")
        self._chunks.append(bytes(EntryHeader(offset, len(data))))
        self._chunks.append(bytes(data))

    def trailer(self, data: bytes):
        self._chunks.append(data)

    def __bytes__(self) -> bytes:
        return b"".join(self._chunks)


def decode(data: bytes) -> tuple[str, PatchStore, str | None]:
    """Parse a patch file image

    Entries are stored exactly as found and may exceed MAX_ENTRY_LENGTH.
    Zero length entries write nothing and are dropped.

    Returns:
        (target name, entries, comment)
    """
    reader = PatchReader(data)
    hdr = reader.header()
    if hdr.entry_count > MAX_ENTRIES:
        raise TooManyEntries(f"Patch file declares {hdr.entry_count} entries")

    target_name = bytes(hdr.target_name).rstrip(b"\x00").decode("ascii", errors="ignore")

    store = PatchStore()
    for _ in range(hdr.entry_count):
        offset, entry = reader.entry()
        if offset < 0:
            raise InvalidOffset(f"Patch entry has negative offset ({offset})")
        if offset in store:
            raise ValidationError(f"Duplicate entry for offset {offset:08x}")
        if len(entry) == 0:
            continue
        store[offset] = entry

    comment = None
    if reader.remaining:
        comment = reader.trailer().decode("utf-8", errors="replace")

    return target_name, store, comment


def encode(target_name: str, store: PatchStore, comment: str | None) -> bytes:
    """Serialise a patch file image, ``store`` is written as provided"""
    if len(store) > MAX_ENTRIES:
        raise TooManyEntries(f"Patch has {len(store)} entries")

    writer = PatchWriter()
    writer.header(target_name, len(store))
    for offset, data in store.items():
        writer.entry(offset, data)
    if comment and comment.strip():
        writer.trailer(comment.encode("utf-8"))
    return bytes(writer)
