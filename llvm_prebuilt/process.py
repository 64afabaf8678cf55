"""
Helpers for running external tools (cmake, 7z, gh) and printing progress.
"""

import shlex
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


class ToolError(RuntimeError):
    """An external tool could not be started or exited non-zero."""

    def __init__(self, command: Sequence[str], returncode: int | None, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Tool not found: {self.command[0]}"
        else:
            message = f"Command failed with exit code {returncode}: {format_command(self.command)}"
        if stderr:
            message += f"\n{stderr.strip()}"
        super().__init__(message)


def print_section(title: str) -> None:
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


def format_size(bytes_size: int) -> str:
    """Format bytes as human-readable string."""
    mb = bytes_size / (1024 * 1024)
    return f"{mb:.2f} MB"


def run_tool(
    command: Sequence[str | Path],
    cwd: Path | None = None,
    quiet: bool = False,
    echo: bool = True,
) -> subprocess.CompletedProcess:
    """
    Run an external tool and wait for it to finish.

    Args:
        command: Program and arguments
        cwd: Working directory for the tool
        quiet: Capture the tool's output instead of streaming it
        echo: Print the command line before running it

    Returns:
        The completed process

    Raises:
        ToolError: If the program is missing or exits non-zero
    """
    argv = [str(part) for part in command]
    if echo:
        print(f"$ {format_command(argv)}")
    sys.stdout.flush()

    try:
        return subprocess.run(argv, cwd=cwd, check=True, capture_output=quiet, text=True)
    except FileNotFoundError as e:
        raise ToolError(argv, None) from e
    except subprocess.CalledProcessError as e:
        raise ToolError(argv, e.returncode, e.stderr or "") from e
