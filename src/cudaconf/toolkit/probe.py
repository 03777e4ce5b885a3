from __future__ import annotations

import glob
import os
import re
import shutil
import subprocess
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from cudaconf.errors import MissingRequiredBinary
from cudaconf.support.versions import Version
from cudaconf.utils import get_logger

from .naming import binary_name, is_windows, library_names, static_library_name

logger = get_logger(__name__)

ROOT_ENV_VARS = ("CUDA_HOME", "CUDA_PATH", "CUDA_ROOT", "CUDA_TOOLKIT_ROOT_DIR")

_RELEASE_RE = re.compile(r"release (\d+)\.(\d+), V(\d+)\.(\d+)\.(\d+)")


class Prober(Protocol):
    """Locates toolkit components on disk and queries binary versions."""

    def find_binary(self, name: str, roots: Sequence[str]) -> str | None: ...

    def find_library(
        self, name: str, roots: Sequence[str], versions: Sequence[Version] = ()
    ) -> str | None: ...

    def find_libdevice(self, roots: Sequence[str]) -> str | None: ...

    def find_libcudadevrt(self, roots: Sequence[str]) -> str | None: ...

    def exists(self, path: str | Path) -> bool: ...

    def query_version(self, binary: str) -> Version: ...


def parse_toolkit_version(output: str) -> Version:
    """Parse ``nvdisasm --version`` style output into a full toolkit version."""
    m = _RELEASE_RE.search(output)
    if m is None:
        raise ValueError(f"Could not parse a CUDA release from: {output.strip()!r}")
    major, minor, _, _, patch = (int(g) for g in m.groups())
    return Version(major, minor, patch)


def default_roots(
    environ: Mapping[str, str] | None = None, platform: str = sys.platform
) -> list[str]:
    """
    Candidate toolkit roots in priority order: environment overrides, the
    parent of a CUDA binary on PATH, then platform-conventional locations.
    Only existing directories are returned, without duplicates.
    """
    env = os.environ if environ is None else environ
    candidates: list[str] = [env[var] for var in ROOT_ENV_VARS if env.get(var)]

    for tool in ("nvdisasm", "nvcc"):
        found = shutil.which(binary_name(tool, platform), path=env.get("PATH"))
        if found:
            candidates.append(str(Path(found).resolve().parent.parent))

    if is_windows(platform):
        base = os.path.join(
            env.get("ProgramFiles", r"C:\Program Files"), "NVIDIA GPU Computing Toolkit", "CUDA"
        )
        candidates.extend(_newest_first(glob.glob(os.path.join(base, "v*"))))
    else:
        candidates.extend(["/usr/local/cuda", "/opt/cuda"])
        candidates.extend(_newest_first(glob.glob("/usr/local/cuda-*")))
        candidates.append("/usr")

    roots: list[str] = []
    for c in candidates:
        if c not in roots and os.path.isdir(c):
            roots.append(c)
    return roots


def _newest_first(paths: list[str]) -> list[str]:
    def key(p: str) -> Version:
        tail = re.split(r"[-v]", os.path.basename(p))[-1]
        try:
            return Version.parse(tail)
        except ValueError:
            return Version(0)

    return sorted(paths, key=key, reverse=True)


class FileSystemProber:
    """Prober backed by the real filesystem and subprocess invocations."""

    def __init__(self, platform: str = sys.platform) -> None:
        self.platform = platform

    def exists(self, path: str | Path) -> bool:
        return os.path.isfile(path)

    def find_binary(self, name: str, roots: Sequence[str]) -> str | None:
        filename = binary_name(name, self.platform)
        for root in roots:
            candidate = os.path.join(root, "bin", filename)
            if self.exists(candidate):
                return candidate
        return None

    def find_library(
        self, name: str, roots: Sequence[str], versions: Sequence[Version] = ()
    ) -> str | None:
        names = library_names(name, list(versions), self.platform)
        subdirs = ("bin",) if is_windows(self.platform) else ("lib64", "lib", "lib/x86_64-linux-gnu")
        for root in roots:
            for sub in subdirs:
                for filename in names:
                    candidate = os.path.join(root, sub, filename)
                    if self.exists(candidate):
                        return candidate
        return None

    def find_libdevice(self, roots: Sequence[str]) -> str | None:
        for root in roots:
            for sub in (("nvvm", "libdevice"), ("share", "libdevice"), ("lib", "nvidia-cuda-toolkit", "libdevice")):
                candidate = os.path.join(root, *sub, "libdevice.10.bc")
                if self.exists(candidate):
                    return candidate
        return None

    def find_libcudadevrt(self, roots: Sequence[str]) -> str | None:
        filename = static_library_name("cudadevrt", self.platform)
        subdirs = ("lib/x64", "lib") if is_windows(self.platform) else ("lib64", "lib", "lib/x86_64-linux-gnu")
        for root in roots:
            for sub in subdirs:
                candidate = os.path.join(root, sub, filename)
                if self.exists(candidate):
                    return candidate
        return None

    def query_version(self, binary: str) -> Version:
        try:
            proc = subprocess.run(
                [binary, "--version"], capture_output=True, text=True, check=True
            )
        except (OSError, subprocess.CalledProcessError) as ex:
            raise MissingRequiredBinary(f"Could not run {binary}: {ex}") from ex
        try:
            return parse_toolkit_version(proc.stdout or proc.stderr)
        except ValueError as ex:
            raise MissingRequiredBinary(f"{binary} did not report a CUDA release") from ex
