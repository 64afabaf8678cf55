#!/usr/bin/env python3
"""
Package an installed LLVM/MLIR/LLD (or protobuf) tree into zip files and
upload them to a GitHub release.

This script:
1. Stages the llvm-lld and mlir bundles (headers, CMake files, static
   libraries, tools) from the install tree
2. Zips each bundle, splitting into parts under the GitHub 2 GB limit
3. Creates the release if needed and uploads every part (--clobber)

All intermediate files live in a llvm-pkg-* work directory that is removed
when the script exits, whether it succeeds or not.

Usage:
    python -m llvm_prebuilt package --version llvm-22.0.0-debug
    python -m llvm_prebuilt package --version llvm-22.0.0-debug --dry-run

Prerequisites:
    - gh CLI authenticated (gh auth login)
    - 7z optional (multi-volume zips); without it zipfile is used
    - Enough disk space for the zip files (~17GB for a Debug build)
"""

import os
import sys
import tempfile
import traceback
from collections.abc import Sequence
from pathlib import Path

from .archiver import BundleArchive, PartStrategy, archive_bundles
from .bundles import BUNDLE_SETS, RELEASE_NOTES, RELEASE_TITLES, get_bundle_set
from .config import Settings, load_settings
from .process import format_size, print_section
from .release import publish, release_url
from .staging import stage_bundle
from .usage import ArgumentParser


def package_and_upload(
    version: str,
    install_dir: Path,
    repo: str,
    platform: str,
    part_size_mb: int,
    bundle_set: str = "llvm",
    dry_run: bool = False,
    work_root: Path | None = None,
    output_dir: Path | None = None,
    gh: str = "gh",
    strategy: PartStrategy | None = None,
) -> list[BundleArchive]:
    """
    Stage, archive and (unless dry_run) publish every bundle in a set.

    Returns:
        The archived bundles. Their files are gone after return unless
        output_dir was given.
    """
    bundles = get_bundle_set(bundle_set)
    work_root = work_root or Path.cwd()

    with tempfile.TemporaryDirectory(prefix=f"llvm-pkg-{os.getpid()}-", dir=work_root) as tmp:
        work_dir = Path(tmp)

        print("=" * 70)
        print("Package and Upload")
        print("=" * 70)
        print(f"Install dir: {install_dir}")
        print(f"Version tag: {version}")
        print(f"Repo:        {repo}")
        print(f"Platform:    {platform}")
        print(f"Work dir:    {work_dir}")
        print(f"Dry run:     {dry_run}")

        print_section("STAGING FILES")
        if not install_dir.is_dir():
            print(f"WARNING: install dir {install_dir} does not exist, bundles will be empty.")

        staged = []
        for bundle in bundles:
            stage_dir = work_dir / f"stage-{bundle.name}"
            stage_bundle(install_dir, bundle, stage_dir)
            staged.append((bundle.name, stage_dir))

        zip_out = output_dir or work_dir / "zips"
        archives = archive_bundles(staged, zip_out, work_dir, version, platform, part_size_mb, strategy)

        files = [path for archive in archives for path in archive.files]
        print_section("GENERATED FILES")
        for path in sorted(files, key=lambda p: p.name):
            print(f"  {path.name} ({format_size(path.stat().st_size)})")

        url = release_url(repo, version)
        if dry_run:
            print_section("DRY RUN: SKIPPING UPLOAD")
            print(f"Would upload to: {url}")
            return archives

        title = RELEASE_TITLES[bundle_set].format(version=version)
        notes = RELEASE_NOTES[bundle_set].format(platform=platform)
        publish(repo, version, title, notes, files, gh=gh)

        print_section("DONE")
        print(f"Release: {url}")
        return archives


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    settings = settings or load_settings()

    parser = ArgumentParser(
        prog="llvm-prebuilt package",
        description="Package installed LLVM/MLIR/LLD into zip files and upload to GitHub Releases",
        epilog="""
Examples:
  python -m llvm_prebuilt package --version llvm-22.0.0-debug
  python -m llvm_prebuilt package --version llvm-22.0.0-debug --dry-run
  python -m llvm_prebuilt package --bundle-set protobuf --version protobuf-31.1-release --install-dir ../local-protobuf
""",
    )
    parser.add_argument("--version", required=True, help="Release tag, e.g. llvm-22.0.0-debug")
    parser.add_argument(
        "--install-dir", type=Path, default=settings.install_dir, help=f"Install tree (default: {settings.install_dir})"
    )
    parser.add_argument("--dry-run", action="store_true", help="Build the zip files but skip the upload")
    parser.add_argument("--repo", default=settings.repo, help=f"GitHub repository (default: {settings.repo})")
    parser.add_argument(
        "--platform", default=settings.platform, help=f"Platform tag in file names (default: {settings.platform})"
    )
    parser.add_argument(
        "--part-size",
        type=int,
        default=settings.part_size_mb,
        help=f"Maximum size of each zip in MB (default: {settings.part_size_mb})",
    )
    parser.add_argument(
        "--bundle-set", choices=sorted(BUNDLE_SETS), default="llvm", help="Which bundles to package (default: llvm)"
    )
    parser.add_argument("--output-dir", type=Path, help="Keep the zip files here instead of the temporary work dir")

    args = parser.parse_args(argv)
    if args.part_size <= 0:
        parser.error("--part-size must be greater than zero")

    try:
        package_and_upload(
            version=args.version,
            install_dir=args.install_dir,
            repo=args.repo,
            platform=args.platform,
            part_size_mb=args.part_size,
            bundle_set=args.bundle_set,
            dry_run=args.dry_run,
            work_root=settings.resolved_work_root,
            output_dir=args.output_dir,
            gh=settings.gh,
        )
    except KeyboardInterrupt:
        print("\n\n" + "=" * 70)
        print("❌ OPERATION CANCELLED BY USER")
        print("=" * 70)
        return 130
    except Exception as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
