"""File-naming conventions for CUDA components, per platform."""

from __future__ import annotations

import sys
from pathlib import Path

from cudaconf.support.versions import Version


def is_windows(platform: str) -> bool:
    return platform.startswith("win")


def is_apple(platform: str) -> bool:
    return platform == "darwin"


def binary_name(name: str, platform: str = sys.platform) -> str:
    return f"{name}.exe" if is_windows(platform) else name


def library_names(
    name: str, versions: list[Version] | None = None, platform: str = sys.platform
) -> list[str]:
    """Candidate file names of a shared library, unversioned name last."""
    names: list[str] = []
    for ver in versions or []:
        if is_windows(platform):
            names.append(f"{name}64_{ver.major}{ver.minor}.dll")
            names.append(f"{name}64_{ver.major}.dll")
        elif is_apple(platform):
            names.append(f"lib{name}.{ver.major}.{ver.minor}.dylib")
            names.append(f"lib{name}.{ver.major}.dylib")
        else:
            names.append(f"lib{name}.so.{ver.major}.{ver.minor}")
            names.append(f"lib{name}.so.{ver.major}")
    if is_windows(platform):
        names.append(f"{name}.dll")
    elif is_apple(platform):
        names.append(f"lib{name}.dylib")
    else:
        names.append(f"lib{name}.so")
    return names


def static_library_name(name: str, platform: str = sys.platform) -> str:
    return f"{name}.lib" if is_windows(platform) else f"lib{name}.a"


class ArtifactLayout:
    """Fixed locations of components inside a toolkit artifact directory."""

    def __init__(self, root: Path, release: Version, platform: str = sys.platform) -> None:
        self.root = Path(root)
        self.release = release.release
        self.platform = platform

    def binary(self, name: str) -> Path:
        return self.root / "bin" / binary_name(name, self.platform)

    def library(self, name: str) -> Path:
        if is_windows(self.platform):
            return self.root / "bin" / f"{name}.dll"
        if is_apple(self.platform):
            return self.root / "lib" / f"lib{name}.dylib"
        return self.root / "lib" / f"lib{name}.so"

    def static_library(self, name: str) -> Path:
        return self.root / "lib" / static_library_name(name, self.platform)

    def file(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    @property
    def cupti(self) -> Path:
        # Windows libraries are tagged with the CUDA release
        if is_windows(self.platform):
            return self.library(f"cupti64_{self.release.major}{self.release.minor}")
        return self.library("cupti")

    @property
    def nvtx(self) -> Path:
        return self.library("nvToolsExt64_1" if is_windows(self.platform) else "nvToolsExt")

    @property
    def libcudadevrt(self) -> Path:
        return self.static_library("cudadevrt")

    @property
    def libdevice(self) -> Path:
        return self.file("share", "libdevice", "libdevice.10.bc")

