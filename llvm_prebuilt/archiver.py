"""
Pack a staging tree into one or more size-bounded zip files.

Steps for each bundle:
1. Zip the whole staging tree at the fastest compression level
2. If the zip fits under the part size, it becomes
   <bundle>-<version>-<platform>.zip
3. Otherwise split it into <bundle>-<version>-<platform>-partNN.zip:
   - with 7z: re-run 7z in multi-volume mode (each part is a zip volume)
   - without 7z: cut the full zip into raw byte slices
4. Write a manifest saying which of the above happened

The splitting method is picked once per run by probing for 7z on PATH.
"""

import shutil
import zipfile
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .manifest import (
    STRATEGY_BYTE_SPLIT,
    STRATEGY_MULTI_VOLUME,
    STRATEGY_SINGLE,
    build_manifest,
    write_manifest,
)
from .process import format_size, print_section, run_tool
from .splitting import calculate_sha256, split_file

SEVEN_ZIP_NAMES = ("7z", "7zz", "7za")
BYTES_PER_MB = 1024 * 1024


@dataclass
class ArchivePart:
    index: int
    path: Path
    size: int


@dataclass
class BundleArchive:
    """Result of archiving one bundle."""

    bundle: str
    strategy: str
    parts: list[ArchivePart] = field(default_factory=list)
    manifest_path: Path | None = None

    @property
    def files(self) -> list[Path]:
        paths = [p.path for p in self.parts]
        if self.manifest_path is not None:
            paths.append(self.manifest_path)
        return paths


def archive_name(bundle: str, version: str, platform: str, part: int | None = None) -> str:
    """Output file name for a whole archive (part=None) or one numbered part."""
    if part is None:
        return f"{bundle}-{version}-{platform}.zip"
    return f"{bundle}-{version}-{platform}-part{part:02d}.zip"


# ============================================================================
# Part strategies
# ============================================================================


class PartStrategy:
    """Produces a full zip of a directory and, when needed, size-bounded parts."""

    name = ""
    split_kind = ""

    def create_archive(self, src_dir: Path, archive_path: Path) -> Path:
        raise NotImplementedError

    def split(
        self,
        src_dir: Path,
        full_archive: Path,
        work_dir: Path,
        part_size_mb: int,
        part_path_for: Callable[[int], Path],
    ) -> list[Path]:
        raise NotImplementedError


class SevenZipStrategy(PartStrategy):
    """Uses 7z for both the full zip and native multi-volume output."""

    name = "7z"
    split_kind = STRATEGY_MULTI_VOLUME

    def __init__(self, executable: str = "7z") -> None:
        self.executable = executable

    def _zip_command(self, archive_path: Path, volume_mb: int | None = None) -> list[str]:
        command = [self.executable, "a", "-tzip", "-mx=1"]
        if volume_mb is not None:
            command.append(f"-v{volume_mb}m")
        command += [str(archive_path.resolve()), "*", "-r"]
        return command

    def create_archive(self, src_dir: Path, archive_path: Path) -> Path:
        run_tool(self._zip_command(archive_path), cwd=src_dir, quiet=True)
        return archive_path

    def split(
        self,
        src_dir: Path,
        full_archive: Path,
        work_dir: Path,
        part_size_mb: int,
        part_path_for: Callable[[int], Path],
    ) -> list[Path]:
        full_archive.unlink(missing_ok=True)

        split_base = work_dir / full_archive.name.replace("-full.zip", "-split.zip")
        run_tool(self._zip_command(split_base, volume_mb=part_size_mb), cwd=src_dir, quiet=True)

        # 7z names volumes .001, .002, ...; keep its order
        volumes = [v for v in split_base.parent.glob(f"{split_base.name}.*") if v.suffix[1:].isdigit()]
        volumes.sort(key=lambda v: int(v.suffix[1:]))
        if not volumes:
            raise RuntimeError(f"7z produced no volumes for {split_base.name}")

        parts = []
        for part_num, volume in enumerate(volumes, 1):
            target = part_path_for(part_num)
            shutil.move(str(volume), target)
            parts.append(target)
        return parts


class ZipfileStrategy(PartStrategy):
    """Fallback: zipfile for the full archive, raw byte slices for parts."""

    name = "zipfile"
    split_kind = STRATEGY_BYTE_SPLIT

    def __init__(self, compresslevel: int = 1) -> None:
        self.compresslevel = compresslevel

    def create_archive(self, src_dir: Path, archive_path: Path) -> Path:
        with zipfile.ZipFile(
            archive_path,
            "w",
            compression=zipfile.ZIP_DEFLATED,
            compresslevel=self.compresslevel,
            allowZip64=True,
            # Reproducible or Nix-style installs carry pre-1980 mtimes
            strict_timestamps=False,
        ) as zf:
            for path in sorted(src_dir.rglob("*")):
                # Empty directories get an entry of their own
                if path.is_file() or not any(path.iterdir()):
                    zf.write(path, path.relative_to(src_dir).as_posix())
        return archive_path

    def split(
        self,
        src_dir: Path,
        full_archive: Path,
        work_dir: Path,
        part_size_mb: int,
        part_path_for: Callable[[int], Path],
    ) -> list[Path]:
        parts = split_file(full_archive, part_size_mb * BYTES_PER_MB, part_path_for)
        full_archive.unlink()
        return parts


def select_strategy() -> PartStrategy:
    """Use 7z when it is on PATH, otherwise fall back to zipfile + byte splitting."""
    for name in SEVEN_ZIP_NAMES:
        executable = shutil.which(name)
        if executable:
            return SevenZipStrategy(executable)
    return ZipfileStrategy()


# ============================================================================
# Bundle archiving
# ============================================================================


def archive_bundle(
    name: str,
    src_dir: Path,
    out_dir: Path,
    work_dir: Path,
    version: str,
    platform: str,
    part_size_mb: int,
    strategy: PartStrategy,
) -> BundleArchive | None:
    """
    Zip a staging tree into parts no larger than part_size_mb.

    Args:
        name: Bundle name, the first component of output file names
        src_dir: Staging tree to archive
        out_dir: Where the final zip files and manifest go
        work_dir: Scratch space for the full archive
        version: Release version tag
        platform: Platform tag, e.g. windows-x64
        part_size_mb: Maximum size of any output file, in MB
        strategy: How to zip and split

    Returns:
        The produced parts, or None if src_dir does not exist
    """
    print(f"--- Packaging {name} from {src_dir} ---")
    if not src_dir.is_dir():
        print(f"WARNING: {src_dir} does not exist, skipping.")
        return None

    out_dir.mkdir(parents=True, exist_ok=True)
    work_dir.mkdir(parents=True, exist_ok=True)

    full_archive = work_dir / f"{name}-full.zip"
    strategy.create_archive(src_dir, full_archive)

    size = full_archive.stat().st_size
    limit = part_size_mb * BYTES_PER_MB
    print(f"  Full zip: {format_size(size)}")

    if size <= limit:
        output = out_dir / archive_name(name, version, platform)
        shutil.move(str(full_archive), output)
        paths = [output]
        kind = STRATEGY_SINGLE
        archive_sha256 = calculate_sha256(output)
        print(f"  Output: {output}")
    else:
        print(f"  Splitting into {part_size_mb}MB parts ({strategy.name})...")
        kind = strategy.split_kind
        archive_sha256 = calculate_sha256(full_archive) if kind == STRATEGY_BYTE_SPLIT else None
        paths = strategy.split(
            src_dir,
            full_archive,
            work_dir,
            part_size_mb,
            lambda part: out_dir / archive_name(name, version, platform, part),
        )

    result = BundleArchive(bundle=name, strategy=kind)
    for index, path in enumerate(paths, 1):
        part = ArchivePart(index=index, path=path, size=path.stat().st_size)
        result.parts.append(part)
        if kind != STRATEGY_SINGLE:
            print(f"  Part {index}: {path} ({format_size(part.size)})")

    manifest = build_manifest(name, version, platform, kind, part_size_mb, paths, archive_sha256)
    result.manifest_path = write_manifest(manifest, out_dir)

    return result


def archive_bundles(
    staged: list[tuple[str, Path]],
    out_dir: Path,
    work_dir: Path,
    version: str,
    platform: str,
    part_size_mb: int,
    strategy: PartStrategy | None = None,
) -> list[BundleArchive]:
    """Archive each (name, staging tree) pair in order, skipping missing trees."""
    print_section("CREATING ZIP FILES")
    if strategy is None:
        strategy = select_strategy()
    print(f"Archiver: {strategy.name}")

    results = []
    for name, src_dir in staged:
        result = archive_bundle(name, src_dir, out_dir, work_dir, version, platform, part_size_mb, strategy)
        if result is not None:
            results.append(result)
    return results
