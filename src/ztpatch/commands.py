#!/usr/bin/env python3

"""ztpatch meta-tool command parent class"""

__author__ = "Jordan Yates"
__copyright__ = "Copyright 2024, Embeint Inc"

import argparse


class PatchCommand:
    """ztpatch meta-tool command parent class"""

    NAME = "N/A"
    HELP = "N/A"
    DESCRIPTION = "N/A"

    @classmethod
    def add_parser(cls, parser: argparse.ArgumentParser):
        """Add arguments for sub-command"""

    def __init__(self, args: argparse.Namespace):
        pass

    def run(self):
        """Run the subcommand"""
        raise NotImplementedError
