#!/usr/bin/env python3

"""Canonicalisation of patch entry storage

Two independent sweeps are run in order:

    merge_runs:     Contiguous entries are joined and re-split into
                    MAX_ENTRY_LENGTH pieces. A run is never started from a
                    lone entry that is already MAX_ENTRY_LENGTH long, as
                    re-splitting would reproduce the same boundary.
    split_oversize: Entries longer than MAX_ENTRY_LENGTH that were not
                    part of a merged run are re-split. These only exist
                    after loading files that use the full 8 bit entry
                    length.
"""

from ztpatch.store import MAX_ENTRY_LENGTH, PatchStore


def _contiguous_runs(store: PatchStore) -> list[tuple[int, int]]:
    """Find runs to merge as (first offset, number of following entries)"""
    items = store.items()
    runs = []
    start = 0
    count = 0

    for idx in range(1, len(items)):
        prev_offset, prev_data = items[idx - 1]
        offset, _ = items[idx]

        starting_full = count == 0 and len(prev_data) == MAX_ENTRY_LENGTH
        if not starting_full and prev_offset + len(prev_data) == offset:
            count += 1
            continue

        if count != 0:
            runs.append((items[start][0], count))
        start = idx
        count = 0

    if count != 0:
        runs.append((items[start][0], count))
    return runs


def merge_runs(store: PatchStore):
    """Join contiguous entries and re-chunk the result"""
    for first, count in _contiguous_runs(store):
        idx = store.index(first)
        offsets = store.offsets()[idx : idx + count + 1]
        data = b"".join(store[offset] for offset in offsets)
        for offset in offsets:
            del store[offset]
        store.add(first, data)


def split_oversize(store: PatchStore):
    """Re-chunk any entry longer than MAX_ENTRY_LENGTH"""
    oversize = [
        (offset, data)
        for offset, data in reversed(store.items())
        if len(data) > MAX_ENTRY_LENGTH
    ]
    for offset, _ in oversize:
        del store[offset]
    for offset, data in oversize:
        store.add(offset, data)


def compact(store: PatchStore) -> PatchStore:
    """Canonical copy of ``store``, which is left untouched"""
    working = store.copy()
    merge_runs(working)
    split_oversize(working)
    return working
