"""
Shared pytest fixtures.

Nothing here needs cmake, 7z or gh: install trees are small fake
directory layouts and external tools are replaced with recorders.
"""

import os
from pathlib import Path

import pytest

from llvm_prebuilt.archiver import ZipfileStrategy
from llvm_prebuilt.config import Settings


def write_file(path: Path, data: bytes | str = b"x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        data = data.encode()
    path.write_bytes(data)
    return path


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep LLVM_PREBUILT_* variables and .env files out of the tests."""
    for key in list(os.environ):
        if key.startswith("LLVM_PREBUILT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def install_tree(tmp_path) -> Path:
    """A cut-down Windows LLVM install tree with both bundles' inputs."""
    root = tmp_path / "local"
    write_file(root / "include/llvm/IR/Module.h", "// Module.h\n")
    write_file(root / "include/llvm/Support/raw_ostream.h", "// raw_ostream.h\n")
    write_file(root / "include/llvm-c/Core.h", "// Core.h\n")
    write_file(root / "include/lld/Common/Driver.h", "// Driver.h\n")
    write_file(root / "include/mlir/IR/Builders.h", "// Builders.h\n")
    write_file(root / "lib/cmake/llvm/LLVMConfig.cmake", "set(LLVM_VERSION 22.0.0)\n")
    write_file(root / "lib/cmake/lld/LLDConfig.cmake", "# lld\n")
    write_file(root / "lib/cmake/mlir/MLIRConfig.cmake", "# mlir\n")
    write_file(root / "lib/LLVMCore.lib", b"\x01" * 64)
    write_file(root / "lib/LLVMSupport.lib", b"\x02" * 64)
    write_file(root / "lib/lldCOFF.lib", b"\x03" * 64)
    write_file(root / "lib/MLIRIR.lib", b"\x04" * 64)
    write_file(root / "lib/clang/22/include/stddef.h", "// not staged\n")
    write_file(root / "lib/libunrelated.a", b"\x05")
    write_file(root / "bin/FileCheck.exe", b"MZ")
    write_file(root / "bin/llvm-tblgen.exe", b"MZ")
    write_file(root / "bin/clang.exe", b"MZ")
    write_file(root / "bin/clang", b"\x7fELF")
    write_file(root / "bin/llvm-lit", "#!/usr/bin/env python\n")
    write_file(root / "bin/mlir-opt.exe", b"MZ")
    write_file(root / "bin/opt.exe", b"MZ")
    return root


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        install_dir=tmp_path / "local",
        repo="example/llvm-prebuilt",
        platform="windows-x64",
        part_size_mb=1800,
        work_root=tmp_path,
    )


class FixedSizeStrategy(ZipfileStrategy):
    """Writes a 'full archive' of an exact byte size, byte-splits like the fallback."""

    name = "fixed-size"

    def __init__(self, size: int) -> None:
        super().__init__()
        self.size = size

    def create_archive(self, src_dir: Path, archive_path: Path) -> Path:
        with open(archive_path, "wb") as f:
            f.write(bytes(range(256)) * (self.size // 256) + bytes(range(self.size % 256)))
        return archive_path


@pytest.fixture
def fixed_size_strategy():
    return FixedSizeStrategy
