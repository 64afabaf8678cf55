"""
Argument parsing shared by the command-line tools.

Usage problems (unknown flag, missing required argument, running from the
wrong directory) exit with status 1 before anything is touched on disk.
"""

import argparse
import sys

USAGE_EXIT_CODE = 1


class UsageError(Exception):
    """Bad invocation: wrong arguments or wrong working directory."""


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that exits with status 1 on usage errors."""

    def error(self, message: str):  # type: ignore[override]
        self.print_usage(sys.stderr)
        print(f"ERROR: {message}", file=sys.stderr)
        sys.exit(USAGE_EXIT_CODE)
