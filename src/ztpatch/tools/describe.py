#!/usr/bin/env python3

"""Create a patch file from a YAML patch description"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

from ztpatch.commands import PatchCommand
from ztpatch.description import PatchDescription
from ztpatch.patch_file import PatchFile
from ztpatch.util.argparse import ValidFile
from ztpatch.util.console import Console


class SubCommand(PatchCommand):
    NAME = "describe"
    HELP = "Create a patch file from a YAML patch description"
    DESCRIPTION = "Create a patch file containing the new values of every item in a YAML patch description"

    def __init__(self, args):
        self._description = args.description
        self._output = args.patch
        self._target = args.target
        self._check = args.check

    @classmethod
    def add_parser(cls, parser):
        parser.add_argument("description", type=ValidFile, help="YAML patch description")
        parser.add_argument("patch", help="Output patch file name")
        parser.add_argument("--target", "-t", help="Target file name stored in the patch")
        parser.add_argument(
            "--check", type=ValidFile, help="Warn about items whose old values do not match this binary"
        )

    def run(self):
        with open(self._description, "r", encoding="utf-8") as f:
            description = PatchDescription.from_yaml(f.read())

        if self._check is not None:
            with open(self._check, "rb") as f:
                original = f.read(-1)
            for item in description.items:
                found = original[item.offset : item.offset + len(item.old_values)]
                if found != item.old_values:
                    Console.log_warning(
                        f"{item.offset_string}: expected {item.old_values_string}, found {found.hex().upper()}"
                    )

        patch = PatchFile.from_description(description)
        patch.target_name = self._target
        patch.comment = "\n".join(s for s in (description.name, description.description) if s)
        patch.save(self._output)
        Console.log_patch("Created", patch, self._output)
