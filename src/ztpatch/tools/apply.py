#!/usr/bin/env python3

"""Apply a patch file to a binary"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

from ztpatch.commands import PatchCommand
from ztpatch.patch_file import PatchFile, sanitize_target_name
from ztpatch.util.argparse import ValidFile
from ztpatch.util.console import Console


class SubCommand(PatchCommand):
    NAME = "apply"
    HELP = "Apply a patch file to a binary"
    DESCRIPTION = "Overwrite the bytes of a binary with the contents of a patch file"

    def __init__(self, args):
        self._patch = args.patch
        self._target = args.target
        self._output = args.output

    @classmethod
    def add_parser(cls, parser):
        parser.add_argument("patch", type=ValidFile, help="Patch file to apply")
        parser.add_argument("target", type=ValidFile, help="Binary to patch")
        parser.add_argument("--output", "-o", help="Write the result here instead of modifying the target")

    def run(self):
        patch = PatchFile.from_file(self._patch)
        if patch.target_name != sanitize_target_name(self._target.name):
            Console.log_warning(f"Patch was created for {patch.target_name}, applying to {self._target.name}")
        patch.apply_file(self._target, self._output)
        Console.log_patch("Applied", patch, self._output or self._target)
