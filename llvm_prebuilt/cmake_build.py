#!/usr/bin/env python3
"""
Build LLVM/MLIR/LLD (or protobuf) from source and install it locally.

Run from the source root. Paths are derived from it:
    llvm (source under <root>/source/llvm-project):
        Build:   $PWD/../../build/llvm-project
        Install: $PWD/../../local
    protobuf:
        Build:   $PWD/../build/protobuf-<build-type>
        Install: $PWD/../local-protobuf

Usage:
    cd /c/Develop/m/source/llvm-project
    python -m llvm_prebuilt build --project llvm --build-type Debug

    cd .workspace/protobuf
    python -m llvm_prebuilt build --project protobuf --build-type Release

Prerequisites:
    - MSVC Developer Command Prompt (vcvars64.bat) on Windows
    - CMake >= 3.20
    - Ninja (protobuf)
"""

import shutil
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import Settings, load_settings
from .process import ToolError, format_command, print_section, run_tool
from .usage import ArgumentParser, UsageError

BUILD_TYPES = ("Release", "Debug")

# Static MSVC runtime: /MT for Release, /MTd for Debug
MSVC_RUNTIME = {
    "Release": "MultiThreaded",
    "Debug": "MultiThreadedDebug",
}


@dataclass(frozen=True)
class CMakeRecipe:
    """How to configure one CMake project."""

    name: str
    # Directory passed to cmake -S, relative to the source root
    cmake_source: str
    # File that must exist under the source root
    marker: str
    install_dir_name: str
    default_build_type: str
    options: tuple[str, ...]
    # How many levels above the source root the build/ and install dirs live
    workspace_depth: int = 1
    build_dir_has_type: bool = True
    generator: str | None = None
    parallel: bool = False
    clean_build_dir: bool = False
    clean_install_dir: bool = False
    next_step: str = ""


LLVM_RECIPE = CMakeRecipe(
    name="llvm",
    cmake_source="llvm",
    marker="llvm/CMakeLists.txt",
    install_dir_name="local",
    default_build_type="Debug",
    workspace_depth=2,
    build_dir_has_type=False,
    options=(
        "-DLLVM_ENABLE_PROJECTS=mlir;lld;clang",
        "-DBUILD_SHARED_LIBS=OFF",
        "-DLLVM_TARGETS_TO_BUILD=host",
        "-DLLVM_ENABLE_ASSERTIONS=ON",
        "-DLLVM_ENABLE_RTTI=OFF",
        "-DLLVM_INSTALL_UTILS=ON",
        "-DLLVM_INCLUDE_TESTS=ON",
        "-DLLVM_ENABLE_ZLIB=OFF",
    ),
    next_step="python -m llvm_prebuilt package --version llvm-<version>-{build_type_lower} --install-dir {install}",
)

PROTOBUF_RECIPE = CMakeRecipe(
    name="protobuf",
    cmake_source=".",
    marker="CMakeLists.txt",
    install_dir_name="local-protobuf",
    default_build_type="Release",
    generator="Ninja",
    parallel=True,
    options=(
        "-DBUILD_SHARED_LIBS=OFF",
        "-Dprotobuf_BUILD_TESTS=OFF",
        "-Dprotobuf_BUILD_EXAMPLES=OFF",
        "-Dprotobuf_ABSL_PROVIDER=module",
        "-DCMAKE_CXX_STANDARD=17",
    ),
    clean_build_dir=True,
    clean_install_dir=True,
    next_step=(
        "python -m llvm_prebuilt package --bundle-set protobuf"
        " --version protobuf-<version>-{build_type_lower} --install-dir {install}"
    ),
)

RECIPES = {recipe.name: recipe for recipe in (LLVM_RECIPE, PROTOBUF_RECIPE)}


@dataclass(frozen=True)
class BuildPaths:
    source: Path
    build: Path
    install: Path


def derive_paths(
    recipe: CMakeRecipe,
    source_dir: Path,
    build_type: str,
    install_dir: Path | None = None,
    build_dir: Path | None = None,
) -> BuildPaths:
    """Work out build and install locations next to the source tree."""
    source = source_dir.resolve()
    workspace = source.parents[recipe.workspace_depth - 1]
    build_name = f"{source.name}-{build_type.lower()}" if recipe.build_dir_has_type else source.name
    build = build_dir or workspace / "build" / build_name
    install = install_dir or workspace / recipe.install_dir_name
    return BuildPaths(source=source, build=build, install=install)


def check_source_tree(recipe: CMakeRecipe, source: Path) -> None:
    marker = source / recipe.marker
    if not marker.is_file():
        raise UsageError(
            f"Run this from the {recipe.name} source root directory.\n"
            f"       Expected to find: {recipe.marker} under {source}"
        )


def configure_command(
    recipe: CMakeRecipe, paths: BuildPaths, build_type: str, generator: str | None, cmake: str = "cmake"
) -> list[str]:
    command = [cmake, "-S", str(paths.source / recipe.cmake_source), "-B", str(paths.build)]
    if generator:
        command += ["-G", generator]
    command += [
        f"-DCMAKE_INSTALL_PREFIX={paths.install}",
        f"-DCMAKE_BUILD_TYPE={build_type}",
        *recipe.options,
        f"-DCMAKE_MSVC_RUNTIME_LIBRARY={MSVC_RUNTIME[build_type]}",
    ]
    return command


def build_command(paths: BuildPaths, build_type: str, cmake: str = "cmake", parallel: bool = False) -> list[str]:
    command = [cmake, "--build", str(paths.build), "--config", build_type]
    if parallel:
        command.append("--parallel")
    return command


def install_command(paths: BuildPaths, build_type: str, cmake: str = "cmake") -> list[str]:
    return [cmake, "--install", str(paths.build), "--config", build_type]


def run_build(
    recipe: CMakeRecipe,
    paths: BuildPaths,
    build_type: str,
    generator: str | None = None,
    cmake: str = "cmake",
    dry_run: bool = False,
) -> None:
    """Configure, build and install. generator=None uses the recipe's own."""
    generator = generator or recipe.generator
    steps = [
        ("CONFIGURING", configure_command(recipe, paths, build_type, generator, cmake)),
        ("BUILDING", build_command(paths, build_type, cmake, recipe.parallel)),
        (f"INSTALLING TO {paths.install}", install_command(paths, build_type, cmake)),
    ]

    for title, command in steps:
        print_section(title)
        if dry_run:
            print(f"Would run: {format_command(command)}")
            continue

        if title == "CONFIGURING" and recipe.clean_build_dir and paths.build.exists():
            print(f"Removing old build directory: {paths.build}")
            shutil.rmtree(paths.build)
        if title.startswith("INSTALLING") and recipe.clean_install_dir and paths.install.exists():
            print(f"Removing old install directory: {paths.install}")
            shutil.rmtree(paths.install)

        run_tool(command)


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    parser = ArgumentParser(
        prog="llvm-prebuilt build",
        description="Build and install LLVM/MLIR/LLD or protobuf with CMake",
    )
    parser.add_argument("--project", choices=sorted(RECIPES), default="llvm", help="What to build (default: llvm)")
    parser.add_argument("--build-type", choices=BUILD_TYPES, help="CMake build type (default: per project)")
    parser.add_argument("--install-dir", type=Path, help="Install prefix (default: ../../local or ../local-protobuf)")
    parser.add_argument("--build-dir", type=Path, help="Build directory (default: ../../build/<name> or ../build/<name>-<type>)")
    parser.add_argument("--source-dir", type=Path, default=None, help="Source root (default: current directory)")
    parser.add_argument("--generator", help="CMake generator (default: Ninja for protobuf, CMake's own for llvm)")
    parser.add_argument("--dry-run", action="store_true", help="Print the CMake commands without running them")

    args = parser.parse_args(argv)
    settings = settings or load_settings()

    recipe = RECIPES[args.project]
    build_type = args.build_type or recipe.default_build_type
    source_dir = args.source_dir or Path.cwd()
    paths = derive_paths(recipe, source_dir, build_type, args.install_dir, args.build_dir)

    print("=" * 70)
    print(f"{recipe.name} Build Script")
    print("=" * 70)
    print(f"Source:     {paths.source}")
    print(f"Build:      {paths.build}")
    print(f"Install:    {paths.install}")
    print(f"Build type: {build_type}")

    try:
        check_source_tree(recipe, paths.source)
        run_build(recipe, paths, build_type, args.generator, settings.cmake, dry_run=args.dry_run)
    except UsageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n❌ Build cancelled by user")
        return 130
    except ToolError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 1

    print_section("DONE")
    if args.dry_run:
        print("Dry run: nothing was built.")
        return 0
    print(f"{recipe.name} installed to {paths.install}")
    if recipe.next_step:
        print("Next:")
        print("  " + recipe.next_step.format(build_type_lower=build_type.lower(), install=paths.install))
    return 0


if __name__ == "__main__":
    sys.exit(main())
