"""
Entry point for running the package as a script.

Usage:
    python -m llvm_prebuilt package --version llvm-22.0.0-debug --dry-run
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
