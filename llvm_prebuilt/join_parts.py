#!/usr/bin/env python3
"""
Rejoin byte-split archive parts using their manifest.

Only needed for byte-split bundles (made without 7z): the parts are raw
slices of one zip and must be concatenated in order. Multi-volume parts
made by 7z are opened directly with 7z instead.

Usage:
    python -m llvm_prebuilt join llvm-lld-llvm-22.0.0-debug-windows-x64.manifest.json
"""

import sys
from collections.abc import Sequence
from pathlib import Path

from .archiver import archive_name
from .manifest import STRATEGY_MULTI_VOLUME, STRATEGY_SINGLE, read_manifest
from .process import format_size, print_section
from .splitting import calculate_sha256, join_files
from .usage import ArgumentParser


def join_from_manifest(manifest_path: Path, output: Path | None = None, verify: bool = True) -> Path:
    """
    Concatenate the parts listed in a byte-split manifest.

    Args:
        manifest_path: Path to <bundle>-<version>-<platform>.manifest.json
        output: Joined zip path (default: <bundle>-<version>-<platform>.zip
            next to the manifest)
        verify: Check part and archive SHA256 checksums

    Returns:
        Path to the joined zip
    """
    manifest = read_manifest(manifest_path)
    parts_dir = manifest_path.parent
    strategy = manifest["strategy"]

    if strategy == STRATEGY_SINGLE:
        single = parts_dir / manifest["parts"][0]["name"]
        print(f"{single.name} is a single archive, nothing to join.")
        return single
    if strategy == STRATEGY_MULTI_VOLUME:
        raise ValueError(
            f"{manifest_path.name} describes 7z multi-volume parts; extract them with: "
            f"7z x {manifest['parts'][0]['name']}"
        )

    print_section(f"JOINING {manifest['bundle']}")
    parts = []
    for entry in manifest["parts"]:
        part = parts_dir / entry["name"]
        if not part.exists():
            raise FileNotFoundError(f"Missing part: {part}")
        if verify and calculate_sha256(part) != entry["sha256"]:
            raise ValueError(f"Checksum mismatch for {part.name}")
        print(f"  Adding {part.name} ({format_size(part.stat().st_size)})")
        parts.append(part)

    if output is None:
        output = parts_dir / archive_name(manifest["bundle"], manifest["version"], manifest["platform"])
    join_files(parts, output)

    expected = manifest.get("archive_sha256")
    if verify and expected and calculate_sha256(output) != expected:
        output.unlink()
        raise ValueError(f"Checksum mismatch for joined archive {output.name}")

    print(f"\nDone! Created {output} ({format_size(output.stat().st_size)})")
    return output


def main(argv: Sequence[str] | None = None) -> int:
    parser = ArgumentParser(prog="llvm-prebuilt join", description="Rejoin byte-split archive parts")
    parser.add_argument("manifest", type=Path, help="Bundle manifest (.manifest.json)")
    parser.add_argument("--output", type=Path, help="Joined zip path (default: next to the manifest)")
    parser.add_argument("--no-verify", action="store_true", help="Skip SHA256 checks")
    args = parser.parse_args(argv)

    try:
        join_from_manifest(args.manifest, args.output, verify=not args.no_verify)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
