import io
import random

import pytest

from ztpatch.description import PatchDescription, PatchItem
from ztpatch.errors import BufferTooSmall, LengthMismatch, NullOrMissingInput, PatchError, TooManyEntries
from ztpatch.patch_file import UNKNOWN_TARGET_NAME, PatchFile
from ztpatch.store import MAX_ENTRIES


def raw_patch(name: bytes, entries, trailer: bytes = b"") -> bytes:
    b = name.ljust(13, b"\x00") + len(entries).to_bytes(2, "little")
    for offset, data in entries:
        b += offset.to_bytes(4, "little", signed=True) + len(data).to_bytes(1, "little") + data
    return b + trailer


def random_pair(rng: random.Random, length: int) -> tuple[bytes, bytes]:
    original = bytes(rng.randrange(256) for _ in range(length))
    modified = bytearray(original)
    for _ in range(rng.randrange(1, 20)):
        start = rng.randrange(length)
        for i in range(start, min(length, start + rng.randrange(1, 400))):
            modified[i] = rng.randrange(256)
    return original, bytes(modified)


def test_defaults():
    patch = PatchFile()
    assert patch.target_name == UNKNOWN_TARGET_NAME
    assert patch.comment is None
    assert patch.name is None
    assert patch.entry_count == 0
    assert patch.target_minimum_length == 0


def test_create():
    patch = PatchFile.create(bytes(5), bytes([0, 1, 1, 0, 0]))
    assert patch.entries.items() == [(1, b"\x01\x01")]
    assert patch.target_minimum_length == 3

    run = bytes(range(1, 256)) + bytes(range(1, 46))
    patch = PatchFile.create(bytes(320), bytes(10) + run + bytes(10))
    assert [(o, len(d)) for o, d in patch.entries.items()] == [(10, 127), (137, 127), (264, 46)]
    assert b"".join(d for _, d in patch.entries.items()) == run

    with pytest.raises(LengthMismatch):
        PatchFile.create(b"\x00", b"\x00\x00")
    with pytest.raises(NullOrMissingInput):
        PatchFile.create(None, b"")


def test_diff_apply_round_trip():
    rng = random.Random(42)
    for length in (1, 17, 1000, 4096):
        original, modified = random_pair(rng, length)
        patch = PatchFile.create(original, modified)
        buffer = bytearray(original)
        patch.apply(buffer)
        assert bytes(buffer) == modified
        assert patch.patched(original) == modified


def test_serialise_round_trip():
    rng = random.Random(7)
    original, modified = random_pair(rng, 3000)
    patch = PatchFile.create(original, modified)
    patch.target_name = "XWING"
    patch.comment = "Round trip"

    loaded = PatchFile.from_bytes(patch.to_bytes())
    assert loaded.target_name == "XWING"
    assert loaded.comment == "Round trip"
    assert loaded.patched(original) == modified
    assert loaded.entries == patch.entries


def test_non_contiguous_preserved():
    patch = PatchFile()
    patch.add(0, b"\x01" * 5)
    patch.add(20, b"\x02" * 3)

    loaded = PatchFile.from_bytes(patch.to_bytes())
    assert loaded.entries.items() == [(0, b"\x01" * 5), (20, b"\x02" * 3)]


def test_load_long_entry():
    data = bytes(range(200))
    patch = PatchFile.from_bytes(raw_patch(b"GAME", [(16, data)]))

    assert [(o, len(d)) for o, d in patch.entries.items()] == [(16, 127), (143, 73)]
    assert patch.entries[16] + patch.entries[143] == data
    assert patch.target_minimum_length == 216


def test_load_merges_contiguous():
    patch = PatchFile.from_bytes(raw_patch(b"GAME", [(0, b"\x01" * 3), (3, b"\x02" * 3)], b"note"))
    assert patch.entries.items() == [(0, b"\x01\x01\x01\x02\x02\x02")]
    assert patch.comment == "note"


def test_target_minimum_length():
    patch = PatchFile()
    patch.add(4, b"\x01\x02")
    patch.add(0, b"\x03")
    assert patch.target_minimum_length == 6

    exact = bytearray(6)
    patch.apply(exact)
    assert exact == bytearray(b"\x03\x00\x00\x00\x01\x02")

    short = bytearray(b"\xee" * 5)
    with pytest.raises(BufferTooSmall):
        patch.apply(short)
    assert short == bytearray(b"\xee" * 5)


def test_apply_empty():
    buffer = bytearray()
    PatchFile().apply(buffer)
    assert buffer == bytearray()

    patch = PatchFile()
    patch.add(0, b"\x01")
    with pytest.raises(BufferTooSmall):
        patch.apply(bytearray())


def test_apply_buffer_types():
    patch = PatchFile()
    patch.add(1, b"\x09")

    backing = bytearray(4)
    patch.apply(memoryview(backing))
    assert backing == bytearray(b"\x00\x09\x00\x00")

    with pytest.raises(TypeError):
        patch.apply(bytes(4))
    with pytest.raises(TypeError):
        patch.apply(memoryview(bytes(4)))
    with pytest.raises(NullOrMissingInput):
        patch.apply(None)


def test_comment():
    patch = PatchFile()
    patch.add(0, b"\x01")

    patch.comment = " \t\n"
    assert patch.comment is None
    assert PatchFile.from_bytes(patch.to_bytes()).comment is None

    patch.comment = "Skip intro ✓"
    assert PatchFile.from_bytes(patch.to_bytes()).comment == "Skip intro ✓"


def test_streams():
    patch = PatchFile.create(bytes(8), b"\x00\x01" * 4)
    stream = io.BytesIO()
    patch.save_stream(stream)
    stream.seek(0)
    loaded = PatchFile.from_stream(stream)
    assert loaded.entries == patch.entries

    with pytest.raises(NullOrMissingInput):
        PatchFile.from_stream(None)
    with pytest.raises(NullOrMissingInput):
        patch.save_stream(None)
    with pytest.raises(NullOrMissingInput):
        PatchFile.from_bytes(None)


def test_files(tmp_path):
    unmodified = tmp_path / "xwingalliance.exe"
    modified = tmp_path / "modified.exe"
    unmodified.write_bytes(bytes(64))
    modified.write_bytes(bytes(32) + b"\xaa" * 32)

    patch = PatchFile.create_from_files(unmodified, modified)
    patch.target_name = unmodified.name
    patch_path = tmp_path / "skip_intro.zt"
    patch.save(patch_path)
    assert patch.name == "skip_intro"

    loaded = PatchFile.from_file(patch_path)
    assert loaded.file_name == patch_path
    assert loaded.name == "skip_intro"
    assert loaded.target_name == "XWINGAL~1"

    output = tmp_path / "output.exe"
    loaded.apply_file(unmodified, output)
    assert output.read_bytes() == modified.read_bytes()
    assert unmodified.read_bytes() == bytes(64)

    loaded.apply_file(unmodified)
    assert unmodified.read_bytes() == modified.read_bytes()

    with pytest.raises(NullOrMissingInput):
        PatchFile.from_file(None)
    with pytest.raises(NullOrMissingInput):
        patch.save(None)


def test_apply_file_too_small(tmp_path):
    target = tmp_path / "target.bin"
    target.write_bytes(b"\x11" * 4)

    patch = PatchFile()
    patch.add(8, b"\x01")
    with pytest.raises(BufferTooSmall):
        patch.apply_file(target)
    assert target.read_bytes() == b"\x11" * 4


def test_from_description():
    description = PatchDescription(
        name="Skip intro",
        items=[
            PatchItem(0x10, b"\x74\x05", b"\xeb\x05"),
            PatchItem(0x12, b"\x90", b"\x90"),
            PatchItem(0x40, b"\x00", b""),
        ],
    )
    patch = PatchFile.from_description(description)
    # Contiguous items are merged once the patch is canonicalised
    assert patch.entries.items() == [(0x10, b"\xeb\x05"), (0x12, b"\x90")]
    patch.compact()
    assert patch.entries.items() == [(0x10, b"\xeb\x05\x90")]

    with pytest.raises(PatchError):
        PatchFile.from_description(None)


def test_comment_unencodable():
    patch = PatchFile()
    patch.add(0, b"\x01")
    patch.comment = "bad \udcff byte"
    assert patch.comment == "bad \ufffd byte"

    loaded = PatchFile.from_bytes(patch.to_bytes())
    assert loaded.comment == "bad \ufffd byte"


def test_load_exceeds_entry_limit():
    entries = [(2 * i, b"\x01") for i in range(MAX_ENTRIES - 1)]
    entries.append((1_000_000, b"\x02" * 200))

    # Splitting the long entry on load would need one entry too many
    with pytest.raises(TooManyEntries):
        PatchFile.from_bytes(raw_patch(b"GAME", entries))
