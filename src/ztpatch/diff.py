#!/usr/bin/env python3

"""Changed byte runs between two snapshots of the same file"""

from collections.abc import Iterator

from ztpatch.errors import LengthMismatch, NullOrMissingInput


def _runs(original: bytes, modified: bytes) -> Iterator[tuple[int, bytes]]:
    length = len(original)
    offset = 0
    while offset < length:
        if original[offset] == modified[offset]:
            offset += 1
            continue
        start = offset
        while offset < length and original[offset] != modified[offset]:
            offset += 1
        yield start, bytes(modified[start:offset])


def diff_runs(original: bytes, modified: bytes) -> Iterator[tuple[int, bytes]]:
    """Iterate ``(offset, data)`` for every maximal run of differing bytes

    ``data`` is always taken from ``modified``. Runs are not length limited.
    """
    if original is None:
        raise NullOrMissingInput("No original data provided")
    if modified is None:
        raise NullOrMissingInput("No modified data provided")
    if len(original) != len(modified):
        raise LengthMismatch(
            f"Original and modified lengths differ ({len(original)} != {len(modified)})"
        )
    return _runs(original, modified)
