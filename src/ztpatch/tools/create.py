#!/usr/bin/env python3

"""Create a patch file from two versions of a binary"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

from ztpatch.commands import PatchCommand
from ztpatch.patch_file import PatchFile
from ztpatch.util.argparse import ValidFile
from ztpatch.util.console import Console


class SubCommand(PatchCommand):
    NAME = "create"
    HELP = "Create a patch file from two versions of a binary"
    DESCRIPTION = "Record every byte that differs between an unmodified and a modified binary of the same length"

    def __init__(self, args):
        self._unmodified = args.unmodified
        self._modified = args.modified
        self._output = args.patch
        self._target = args.target
        self._comment = args.comment

    @classmethod
    def add_parser(cls, parser):
        parser.add_argument("unmodified", type=ValidFile, help="Original binary")
        parser.add_argument("modified", type=ValidFile, help="Binary with the changes applied")
        parser.add_argument("patch", help="Output patch file name")
        parser.add_argument("--target", "-t", help="Target file name, defaults to the unmodified file name")
        parser.add_argument("--comment", "-c", help="Free text comment stored in the patch")

    def run(self):
        patch = PatchFile.create_from_files(self._unmodified, self._modified)
        patch.target_name = self._target or self._unmodified.name
        patch.comment = self._comment
        patch.save(self._output)
        Console.log_patch("Created", patch, self._output)
