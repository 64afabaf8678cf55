"""
Publish archive parts to a GitHub release with the gh CLI.

Requires gh to be installed and authenticated (gh auth login). Missing
credentials are not checked up front; the gh calls simply fail.
"""

from collections.abc import Iterable
from pathlib import Path

from .process import ToolError, format_size, print_section, run_tool


def release_url(repo: str, tag: str) -> str:
    return f"https://github.com/{repo}/releases/tag/{tag}"


def ensure_release(repo: str, tag: str, title: str, notes: str, gh: str = "gh") -> bool:
    """
    Create the release for tag unless it already exists.

    Returns:
        True if a new release was created, False if an existing one is reused
    """
    print_section(f"CREATING GITHUB RELEASE {tag}")
    try:
        run_tool([gh, "release", "create", tag, "--repo", repo, "--title", title, "--notes", notes], quiet=True)
    except ToolError as e:
        if e.returncode is None:
            raise
        print(f"Release {tag} already exists, uploading to existing release.")
        return False

    print(f"✓ Created release {tag}")
    return True


def upload_assets(repo: str, tag: str, files: Iterable[Path], gh: str = "gh") -> list[Path]:
    """Upload each file to the release, replacing assets with the same name."""
    print_section("UPLOADING FILES")
    uploaded = []
    for path in sorted(files, key=lambda p: p.name):
        print(f"Uploading {path.name} ({format_size(path.stat().st_size)})...")
        run_tool([gh, "release", "upload", tag, str(path), "--repo", repo, "--clobber"], echo=False)
        uploaded.append(path)
    return uploaded


def publish(repo: str, tag: str, title: str, notes: str, files: Iterable[Path], gh: str = "gh") -> list[Path]:
    """Ensure the release exists and upload every file to it."""
    ensure_release(repo, tag, title, notes, gh=gh)
    return upload_assets(repo, tag, files, gh=gh)
