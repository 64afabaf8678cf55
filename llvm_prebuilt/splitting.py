"""
Split a large archive into fixed-size byte chunks, and join them back.

GitHub release assets are limited to 2 GB. When no multi-volume capable
archiver is available the full zip is cut into raw byte slices. The slices
are not valid archives on their own; concatenate them in part order to get
the original zip back.
"""

import hashlib
from collections.abc import Callable, Iterable
from pathlib import Path

COPY_BLOCK_SIZE = 4 * 1024 * 1024


def calculate_sha256(file_path: Path) -> str:
    """Calculate SHA256 checksum of a file.

    Args:
        file_path: Path to file

    Returns:
        SHA256 checksum as hex string
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for byte_block in iter(lambda: f.read(COPY_BLOCK_SIZE), b""):
            sha256_hash.update(byte_block)
    return sha256_hash.hexdigest()


def split_file(archive_path: Path, part_size_bytes: int, part_path_for: Callable[[int], Path]) -> list[Path]:
    """Split a file into parts of at most part_size_bytes.

    Args:
        archive_path: File to split
        part_size_bytes: Maximum size of each part
        part_path_for: Maps a 1-based part number to its output path

    Returns:
        Part paths in order
    """
    if part_size_bytes <= 0:
        raise ValueError(f"Part size must be positive, got {part_size_bytes}")
    if not archive_path.exists():
        raise FileNotFoundError(f"Archive not found: {archive_path}")

    parts: list[Path] = []
    with open(archive_path, "rb") as f:
        part_num = 1
        while True:
            first = f.read(min(COPY_BLOCK_SIZE, part_size_bytes))
            if not first:
                break

            part_path = part_path_for(part_num)
            part_path.parent.mkdir(parents=True, exist_ok=True)
            with open(part_path, "wb") as part_file:
                part_file.write(first)
                remaining = part_size_bytes - len(first)
                while remaining > 0:
                    block = f.read(min(COPY_BLOCK_SIZE, remaining))
                    if not block:
                        break
                    part_file.write(block)
                    remaining -= len(block)

            parts.append(part_path)
            part_num += 1

    return parts


def join_files(parts: Iterable[Path], output_path: Path) -> Path:
    """Concatenate parts, in the given order, into output_path."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wb") as out:
        for part in parts:
            with open(part, "rb") as inp:
                for block in iter(lambda: inp.read(COPY_BLOCK_SIZE), b""):  # noqa: B023
                    out.write(block)
    return output_path
