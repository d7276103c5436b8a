#!/usr/bin/env python3


import datetime

import colorama


class Console:
    """Common terminal logging functions"""

    @staticmethod
    def init():
        """Initialise console logging"""
        colorama.init(autoreset=True)

    @staticmethod
    def log_error(message):
        """Log error message to terminal"""
        Console.log(datetime.datetime.now(), colorama.Fore.RED, message)

    @staticmethod
    def log_warning(message):
        """Log warning message to terminal"""
        Console.log(datetime.datetime.now(), colorama.Fore.YELLOW, message)

    @staticmethod
    def log_info(message):
        """Log info message to terminal"""
        Console.log(datetime.datetime.now(), colorama.Fore.MAGENTA, message)

    @staticmethod
    def log_patch(verb: str, patch, path):
        """Log a summary of a patch file operation"""
        Console.log(
            datetime.datetime.now(),
            colorama.Fore.GREEN,
            f"{verb} {path}: {patch.entry_count} entries, target {patch.target_name} (>= {patch.target_minimum_length} bytes)",
        )

    @staticmethod
    def log(timestamp: datetime.datetime, colour, string: str):
        """Log colourised string to terminal"""
        ts = timestamp.strftime("%H:%M:%S.%f")[:-3]
        print(f"[{ts}]{colour} {string}")
