#!/usr/bin/env python3

"""Patch engine exceptions"""


class PatchError(Exception):
    """Generic patch exception"""


class NullOrMissingInput(PatchError, ValueError):
    """Required buffer, stream or filename was not provided"""


class LengthMismatch(PatchError):
    """Diff inputs are not the same length"""


class InvalidOffset(PatchError):
    """Patch entry offset is negative"""


class TooManyEntries(PatchError):
    """Patch entry count exceeds the file format limit"""


class BufferTooSmall(PatchError):
    """Apply target is shorter than the patch requires"""


class ValidationError(PatchError):
    """Patch file data is malformed"""
