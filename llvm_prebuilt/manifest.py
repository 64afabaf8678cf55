"""
Per-bundle manifest written next to the archive parts.

The part file names alone do not say how the parts were produced, so each
bundle gets <bundle>-<version>-<platform>.manifest.json:

    {
      "bundle": "llvm-lld",
      "version": "llvm-22.0.0-debug",
      "platform": "windows-x64",
      "strategy": "byte-split",
      "part_size_mb": 1800,
      "archive_sha256": "...",
      "parts": [{"name": "...-part01.zip", "size": 1887436800, "sha256": "..."}]
    }

strategy is one of:
- single: one self-contained zip
- multi-volume: zip volumes written by 7z, open them together with 7z
- byte-split: raw slices of one zip, concatenate in order before extracting
"""

import json
from pathlib import Path
from typing import Any

from .splitting import calculate_sha256

STRATEGY_SINGLE = "single"
STRATEGY_MULTI_VOLUME = "multi-volume"
STRATEGY_BYTE_SPLIT = "byte-split"

STRATEGIES = (STRATEGY_SINGLE, STRATEGY_MULTI_VOLUME, STRATEGY_BYTE_SPLIT)


def manifest_name(bundle: str, version: str, platform: str) -> str:
    return f"{bundle}-{version}-{platform}.manifest.json"


def build_manifest(
    bundle: str,
    version: str,
    platform: str,
    strategy: str,
    part_size_mb: int,
    parts: list[Path],
    archive_sha256: str | None = None,
) -> dict[str, Any]:
    """Describe a bundle's parts, hashing each one."""
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {strategy}")

    return {
        "bundle": bundle,
        "version": version,
        "platform": platform,
        "strategy": strategy,
        "part_size_mb": part_size_mb,
        "archive_sha256": archive_sha256,
        "parts": [{"name": p.name, "size": p.stat().st_size, "sha256": calculate_sha256(p)} for p in parts],
    }


def write_manifest(manifest: dict[str, Any], output_dir: Path) -> Path:
    path = output_dir / manifest_name(manifest["bundle"], manifest["version"], manifest["platform"])
    with open(path, "w") as f:
        json.dump(manifest, f, indent=2)
        f.write("\n")
    return path


def read_manifest(path: Path) -> dict[str, Any]:
    """Load and sanity-check a manifest."""
    if not path.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")

    with open(path) as f:
        manifest = json.load(f)

    for key in ("bundle", "version", "platform", "strategy", "parts"):
        if key not in manifest:
            raise ValueError(f"Manifest {path.name} is missing '{key}'")
    if manifest["strategy"] not in STRATEGIES:
        raise ValueError(f"Manifest {path.name} has unknown strategy '{manifest['strategy']}'")

    parts = manifest["parts"]
    if not isinstance(parts, list) or not parts:
        raise ValueError(f"Manifest {path.name} lists no parts")
    for index, entry in enumerate(parts, 1):
        if not isinstance(entry, dict):
            raise ValueError(f"Manifest {path.name}: part {index} is not an object")
        for key in ("name", "sha256"):
            if not isinstance(entry.get(key), str) or not entry[key]:
                raise ValueError(f"Manifest {path.name}: part {index} is missing '{key}'")

    return manifest
