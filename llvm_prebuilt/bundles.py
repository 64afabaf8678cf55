"""
Bundle definitions: which parts of an install tree go into each archive.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class BundleDefinition:
    """A named set of install tree inputs that is staged and archived together."""

    name: str
    title: str
    # Relative directories copied recursively, keeping their layout
    directories: tuple[str, ...] = ()
    # Globs matched in <install>/lib and copied flat into lib/
    library_patterns: tuple[str, ...] = ()
    # Executable base names looked up in <install>/bin and copied into bin/
    executables: tuple[str, ...] = ()


LLVM_LLD = BundleDefinition(
    name="llvm-lld",
    title="LLVM + LLD",
    directories=(
        "lib/cmake/llvm",
        "lib/cmake/lld",
        "include/llvm",
        "include/llvm-c",
        "include/lld",
    ),
    library_patterns=("LLVM*.lib", "lld*.lib"),
    # Utilities needed when building against LLVM (FileCheck, llvm-tblgen, lit, etc.)
    executables=(
        "FileCheck",
        "llvm-tblgen",
        "llvm-lit",
        "llvm-as",
        "llvm-dis",
        "llvm-link",
        "llvm-ar",
        "llvm-nm",
        "llvm-objdump",
        "llvm-config",
        "count",
        "not",
        "split-file",
        "lld-link",
        "ld.lld",
        "clang",
        "clang++",
    ),
)

MLIR = BundleDefinition(
    name="mlir",
    title="MLIR",
    directories=(
        "lib/cmake/mlir",
        "include/mlir",
        "include/mlir-c",
    ),
    library_patterns=("MLIR*.lib",),
    executables=("mlir-tblgen", "mlir-opt", "mlir-lsp-server"),
)

PROTOBUF = BundleDefinition(
    name="protobuf",
    title="protobuf",
    directories=(
        "include/google",
        "include/absl",
        "lib/cmake/protobuf",
        "lib/cmake/absl",
        "lib/cmake/utf8_range",
    ),
    library_patterns=("libprotobuf*.lib", "libprotoc*.lib", "absl_*.lib", "utf8_*.lib"),
    executables=("protoc",),
)

BUNDLE_SETS: dict[str, tuple[BundleDefinition, ...]] = {
    "llvm": (LLVM_LLD, MLIR),
    "protobuf": (PROTOBUF,),
}

RELEASE_TITLES = {
    "llvm": "LLVM/MLIR/LLD {version}",
    "protobuf": "protobuf {version}",
}

RELEASE_NOTES = {
    "llvm": "Prebuilt LLVM+MLIR+LLD for {platform}. See README for build config.",
    "protobuf": "Prebuilt protobuf for {platform}. See README for build config.",
}


def get_bundle_set(name: str) -> tuple[BundleDefinition, ...]:
    """Look up a bundle set by name."""
    if name not in BUNDLE_SETS:
        raise ValueError(f"Unknown bundle set: {name} (available: {', '.join(BUNDLE_SETS)})")
    return BUNDLE_SETS[name]
