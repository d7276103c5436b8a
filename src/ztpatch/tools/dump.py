#!/usr/bin/env python3

"""Display the contents of a patch file"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

import tabulate

from ztpatch.commands import PatchCommand
from ztpatch.patch_file import PatchFile
from ztpatch.util.argparse import ValidFile


class SubCommand(PatchCommand):
    NAME = "dump"
    HELP = "Display the contents of a patch file"
    DESCRIPTION = "Display the header, comment and entries of a patch file"

    def __init__(self, args):
        self._patch = args.patch
        self._width = args.width

    @classmethod
    def add_parser(cls, parser):
        parser.add_argument("patch", type=ValidFile, help="Patch file to display")
        parser.add_argument("--width", type=int, default=16, help="Maximum bytes of entry data to display")

    def run(self):
        patch = PatchFile.from_file(self._patch)

        print(f"      Patch: {patch.name}")
        print(f"     Target: {patch.target_name}")
        print(f"Min. Length: {patch.target_minimum_length} bytes")
        print(f"    Entries: {patch.entry_count}")
        if patch.comment is not None:
            print(f"    Comment: {patch.comment}")
        print("")

        table = []
        for offset, data in patch.entries.items():
            shown = data[: self._width].hex()
            if len(data) > self._width:
                shown += "..."
            table.append([f"{offset:08x}", len(data), shown])
        print(tabulate.tabulate(table, headers=["Offset", "Length", "Data"], tablefmt="simple"))
