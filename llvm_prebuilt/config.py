"""
Settings for the build and packaging tools.

Defaults can be overridden with LLVM_PREBUILT_* environment variables or a
.env file in the working directory, e.g. LLVM_PREBUILT_INSTALL_DIR=/opt/llvm.
Command-line flags take precedence over both.
"""

import platform as host_platform
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_INSTALL_DIR = Path("/c/Develop/m/local")
DEFAULT_REPO = "wcy123/llvm-mlir-prebuilt"
DEFAULT_PART_SIZE_MB = 1800  # Keep each zip under the 2 GB GitHub asset limit


def get_current_platform() -> str:
    """
    Detect the current platform and return its archive name suffix.

    Returns:
        Platform tag such as "windows-x64" or "linux-arm64"
    """
    system = host_platform.system().lower()
    machine = host_platform.machine().lower()

    arch = "arm64" if machine in ("arm64", "aarch64") else "x64"

    if system == "windows" or system.startswith(("cygwin", "msys", "mingw")):
        return f"windows-{arch}"
    elif system == "darwin":
        return f"darwin-{arch}"
    return f"{system}-{arch}"


class Settings(BaseSettings):
    """Tool settings"""

    model_config = SettingsConfigDict(env_prefix="LLVM_PREBUILT_", env_file=".env", extra="ignore")

    # Packaging
    install_dir: Path = DEFAULT_INSTALL_DIR
    part_size_mb: int = DEFAULT_PART_SIZE_MB
    platform: str = get_current_platform()
    work_root: Path | None = None

    # Release
    repo: str = DEFAULT_REPO

    # External tools
    gh: str = "gh"
    cmake: str = "cmake"

    @field_validator("part_size_mb")
    @classmethod
    def _positive_part_size(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("part_size_mb must be greater than zero")
        return value

    @property
    def resolved_work_root(self) -> Path:
        """Directory that holds the scoped work dir (cwd unless configured)"""
        return self.work_root if self.work_root is not None else Path.cwd()


def load_settings() -> Settings:
    """Read settings from the environment."""
    return Settings()
