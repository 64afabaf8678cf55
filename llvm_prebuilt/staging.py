"""
Stage curated subsets of an LLVM install tree for archiving.

For each bundle this copies:
1. Whole directories (headers, CMake package files), keeping their layout
2. Static libraries matching glob patterns, flat into lib/
3. Named executables (with or without .exe), flat into bin/

Missing inputs are reported and skipped so a partial install tree still
produces whatever bundles it can.
"""

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from .bundles import BundleDefinition

EXECUTABLE_SUFFIXES = ("", ".exe")


@dataclass
class StageReport:
    """What ended up in a staging tree."""

    bundle: str
    stage_dir: Path
    directories: list[str] = field(default_factory=list)
    libraries: list[str] = field(default_factory=list)
    executables: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def copy_directories(install_dir: Path, stage_dir: Path, directories: tuple[str, ...], report: StageReport) -> None:
    for rel in directories:
        src = install_dir / rel
        if not src.is_dir():
            print(f"  WARNING: {src} does not exist, skipping.")
            report.skipped.append(rel)
            continue

        dst = stage_dir / rel
        dst.mkdir(parents=True, exist_ok=True)
        shutil.copytree(src, dst, dirs_exist_ok=True)
        report.directories.append(rel)
        print(f"  ✓ {rel}/")


def copy_libraries(install_dir: Path, stage_dir: Path, patterns: tuple[str, ...], report: StageReport) -> None:
    lib_src = install_dir / "lib"
    lib_dst = stage_dir / "lib"
    lib_dst.mkdir(parents=True, exist_ok=True)

    if not patterns:
        return
    if not lib_src.is_dir():
        print(f"  WARNING: {lib_src} does not exist, skipping libraries.")
        report.skipped.append("lib")
        return

    for pattern in patterns:
        matches = sorted(p for p in lib_src.glob(pattern) if p.is_file())
        for lib in matches:
            shutil.copy2(lib, lib_dst / lib.name)
            report.libraries.append(lib.name)
        print(f"  ✓ lib/{pattern}: {len(matches)} files")


def find_executable(bin_dir: Path, name: str) -> Path | None:
    """Return the first of bin/<name>, bin/<name>.exe that exists."""
    for suffix in EXECUTABLE_SUFFIXES:
        candidate = bin_dir / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def copy_executables(install_dir: Path, stage_dir: Path, names: tuple[str, ...], report: StageReport) -> None:
    bin_src = install_dir / "bin"
    bin_dst = stage_dir / "bin"
    bin_dst.mkdir(parents=True, exist_ok=True)

    missing = []
    for name in names:
        exe = find_executable(bin_src, name)
        if exe is None:
            missing.append(name)
            continue
        shutil.copy2(exe, bin_dst / exe.name)
        report.executables.append(exe.name)

    print(f"  ✓ bin/: {len(report.executables)} of {len(names)} executables")
    if missing:
        print(f"  Not found in {bin_src}: {', '.join(missing)}")


def stage_bundle(install_dir: Path, bundle: BundleDefinition, stage_dir: Path) -> StageReport:
    """
    Populate a staging tree for one bundle.

    Args:
        install_dir: Root of the install tree (read only)
        bundle: Which directories, libraries and executables to take
        stage_dir: Staging tree to create and fill

    Returns:
        Report of copied and skipped inputs
    """
    install_dir = Path(install_dir)
    stage_dir = Path(stage_dir)

    print(f"Staging {bundle.title}...")
    stage_dir.mkdir(parents=True, exist_ok=True)
    report = StageReport(bundle=bundle.name, stage_dir=stage_dir)

    copy_directories(install_dir, stage_dir, bundle.directories, report)
    copy_libraries(install_dir, stage_dir, bundle.library_patterns, report)
    copy_executables(install_dir, stage_dir, bundle.executables, report)

    return report
