"""
Command dispatch: llvm-prebuilt {build,package,join} ...
"""

import sys
from collections.abc import Sequence

from . import cmake_build, join_parts, package_and_upload

COMMANDS = {
    "build": cmake_build.main,
    "package": package_and_upload.main,
    "join": join_parts.main,
}

USAGE = """usage: llvm-prebuilt {build,package,join} [options]

  build     configure, build and install LLVM or protobuf with CMake
  package   stage, zip and upload an install tree to a GitHub release
  join      rejoin byte-split archive parts from their manifest
"""


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in ("-h", "--help"):
        print(USAGE)
        return 0 if args else 1

    command = COMMANDS.get(args[0])
    if command is None:
        print(USAGE, file=sys.stderr)
        print(f"ERROR: unknown command: {args[0]}", file=sys.stderr)
        return 1
    return command(args[1:])
