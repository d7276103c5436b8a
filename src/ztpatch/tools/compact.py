#!/usr/bin/env python3

"""Rewrite a patch file in canonical form"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

from ztpatch.commands import PatchCommand
from ztpatch.patch_file import PatchFile
from ztpatch.util.argparse import ValidFile
from ztpatch.util.console import Console


class SubCommand(PatchCommand):
    NAME = "compact"
    HELP = "Rewrite a patch file in canonical form"
    DESCRIPTION = "Merge contiguous entries and split entries longer than 127 bytes"

    def __init__(self, args):
        self._patch = args.patch
        self._output = args.output or args.patch
        self._comment = args.comment

    @classmethod
    def add_parser(cls, parser):
        parser.add_argument("patch", type=ValidFile, help="Patch file to rewrite")
        parser.add_argument("--output", "-o", help="Write the result here instead of replacing the patch")
        parser.add_argument("--comment", "-c", help="Replace the stored comment")

    def run(self):
        original_len = self._patch.stat().st_size
        patch = PatchFile.from_file(self._patch)
        if self._comment is not None:
            patch.comment = self._comment
        patch.save(self._output)
        Console.log_patch("Compacted", patch, self._output)
        Console.log_info(f"Patch size {original_len} -> {patch.file_name.stat().st_size} bytes")
