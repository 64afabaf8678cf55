"""
Build, package and publish prebuilt LLVM/MLIR/LLD toolchains.

This package provides tools for:
- Building a static LLVM/MLIR/LLD (or protobuf) install tree with CMake
- Staging curated bundles (headers, CMake files, static libraries, tools)
- Zipping bundles into parts under the GitHub release asset limit
- Uploading the parts to a GitHub release

Main modules:
- cmake_build: CMake configure/build/install driver
- package_and_upload: Complete staging, packaging and upload pipeline
- staging: Copy bundle inputs out of an install tree
- archiver: Size-bounded zip creation (7z multi-volume or byte split)
- release: GitHub release publishing through the gh CLI
- join_parts: Rejoin byte-split parts
"""

from .cli import main

__all__ = ["main"]
