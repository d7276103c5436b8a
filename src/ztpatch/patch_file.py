#!/usr/bin/env python3

"""Binary patch file (.zt) handling"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

import pathlib
import unicodedata
from typing import BinaryIO

from typing_extensions import Self

from ztpatch import codec
from ztpatch.compact import compact
from ztpatch.description import PatchDescription
from ztpatch.diff import diff_runs
from ztpatch.errors import BufferTooSmall, NullOrMissingInput
from ztpatch.store import PatchStore

UNKNOWN_TARGET_NAME = "UNKNOWNF.ILE"

# Characters rejected in file names by DOS/Windows file systems
_INVALID_NAME_CHARS = frozenset('"<>|:*?\\/' + "".join(chr(c) for c in range(32)))


def _split_extension(name: str) -> tuple[str, str]:
    base, dot, ext = name.rpartition(".")
    if not dot:
        return name, ""
    return base, ext


def _upper(c: str) -> str:
    # Single character mapping only, "ß" stays "ß" rather than becoming "SS"
    upper = c.upper()
    return upper if len(upper) == 1 else c


def sanitize_target_name(value: str | None) -> str:
    """Reduce an arbitrary file name to an upper case 8.3 style name

    Separators are stripped along with all other punctuation before the
    extension is split off, so "setup.exe" becomes "SETUPEXE".
    """
    if not value:
        return UNKNOWN_TARGET_NAME

    value = "".join(
        c
        for c in map(_upper, value)
        if c not in _INVALID_NAME_CHARS
        and not c.isspace()
        and not unicodedata.category(c).startswith("P")
    )
    value = value.encode("ascii", errors="ignore").decode("ascii")

    name, ext = _split_extension(value)
    ext = ext[:3]
    if len(name) > 9:
        name = name[:7] + "~1"

    if not name:
        return UNKNOWN_TARGET_NAME
    if not ext:
        return name
    return f"{name}.{ext}"


class PatchFile:
    """Byte replacement patch for a single target file"""

    def __init__(self):
        self.entries = PatchStore()
        self.file_name: pathlib.Path | None = None
        self._target_name = UNKNOWN_TARGET_NAME
        self._comment: str | None = None

    @property
    def name(self) -> str | None:
        """Patch name, derived from the file it was loaded from or saved to"""
        if self.file_name is None:
            return None
        return self.file_name.stem

    @property
    def target_name(self) -> str:
        return self._target_name

    @target_name.setter
    def target_name(self, value: str | None):
        self._target_name = sanitize_target_name(value)

    @property
    def comment(self) -> str | None:
        return self._comment

    @comment.setter
    def comment(self, value: str | None):
        if value is None or value.strip() == "":
            self._comment = None
        else:
            # Surrogates can not be encoded as UTF-8, they become U+FFFD
            self._comment = "".join("\ufffd" if 0xD800 <= ord(c) <= 0xDFFF else c for c in value)

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    @property
    def target_minimum_length(self) -> int:
        """Smallest target that every entry fits within"""
        return self.entries.end()

    def add(self, offset: int, data: bytes):
        """Add a replacement run, split into canonical entries"""
        self.entries.add(offset, data)

    def compact(self):
        """Merge contiguous entries and split oversized entries"""
        self.entries = compact(self.entries)

    @classmethod
    def create(cls, unmodified: bytes, modified: bytes) -> Self:
        """Patch that converts ``unmodified`` into ``modified``"""
        patch = cls()
        for offset, data in diff_runs(unmodified, modified):
            patch.add(offset, data)
        return patch

    @classmethod
    def create_from_files(cls, unmodified_file, modified_file) -> Self:
        if unmodified_file is None:
            raise NullOrMissingInput("No unmodified file provided")
        if modified_file is None:
            raise NullOrMissingInput("No modified file provided")

        with open(unmodified_file, "rb") as f_orig:
            unmodified = f_orig.read(-1)
        with open(modified_file, "rb") as f_mod:
            modified = f_mod.read(-1)
        return cls.create(unmodified, modified)

    @classmethod
    def from_description(cls, description: PatchDescription) -> Self:
        """Patch containing the replacement bytes of every description item"""
        if description is None:
            raise NullOrMissingInput("No patch description provided")

        patch = cls()
        for offset, data in description.runs():
            patch.add(offset, data)
        return patch

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        if data is None:
            raise NullOrMissingInput("No patch data provided")

        target_name, entries, comment = codec.decode(data)
        patch = cls()
        patch.target_name = target_name
        patch.comment = comment
        patch.entries = compact(entries)
        return patch

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> Self:
        if stream is None:
            raise NullOrMissingInput("No patch stream provided")
        return cls.from_bytes(stream.read(-1))

    @classmethod
    def from_file(cls, file_name) -> Self:
        if file_name is None:
            raise NullOrMissingInput("No patch file name provided")

        with open(file_name, "rb") as f:
            patch = cls.from_stream(f)
        patch.file_name = pathlib.Path(file_name)
        return patch

    def to_bytes(self) -> bytes:
        """Canonicalise the entries and serialise the patch"""
        self.compact()
        return codec.encode(self.target_name, self.entries, self.comment)

    def save_stream(self, stream: BinaryIO):
        if stream is None:
            raise NullOrMissingInput("No patch stream provided")
        stream.write(self.to_bytes())

    def save(self, file_name):
        if file_name is None:
            raise NullOrMissingInput("No patch file name provided")

        # Encode before opening so a failure leaves any existing file intact
        data = self.to_bytes()
        with open(file_name, "wb") as f:
            f.write(data)
        self.file_name = pathlib.Path(file_name)

    def apply(self, buffer: bytearray | memoryview):
        """Write every entry into ``buffer`` in place

        Raises:
            BufferTooSmall: ``buffer`` does not cover every entry, nothing
                has been written.
        """
        if buffer is None:
            raise NullOrMissingInput("No target buffer provided")
        if isinstance(buffer, memoryview):
            if buffer.readonly:
                raise TypeError("Target buffer is read-only")
        elif not isinstance(buffer, bytearray):
            raise TypeError(f"Target buffer must be mutable, not {type(buffer).__name__}")

        required = self.target_minimum_length
        if len(buffer) < required:
            raise BufferTooSmall(f"Target too small ({len(buffer)} < {required} bytes)")
        if len(buffer) == 0:
            return

        for offset, data in self.entries.items():
            buffer[offset : offset + len(data)] = data

    def patched(self, data: bytes) -> bytes:
        """Copy of ``data`` with the patch applied"""
        if data is None:
            raise NullOrMissingInput("No target data provided")
        buffer = bytearray(data)
        self.apply(buffer)
        return bytes(buffer)

    def apply_file(self, file_name, output_file=None):
        """Patch ``file_name``, in place unless ``output_file`` is provided"""
        if file_name is None:
            raise NullOrMissingInput("No target file name provided")

        with open(file_name, "rb") as f:
            buffer = bytearray(f.read(-1))
        self.apply(buffer)
        with open(output_file or file_name, "wb") as f:
            f.write(buffer)
