from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from cudaconf.support import BackendInfo, Version
from cudaconf.toolkit import FileSystemProber


class StubVersionProber(FileSystemProber):
    """Real filesystem lookups, but versions come from a table instead of a subprocess."""

    def __init__(self, version: str = "10.1.243", platform: str = "linux") -> None:
        super().__init__(platform=platform)
        self.version = Version.parse(version)
        self.queried: list[str] = []

    def query_version(self, binary: str) -> Version:
        self.queried.append(binary)
        return self.version


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("")
    return path


def make_local_toolkit(
    root: Path,
    *,
    nvdisasm: bool = True,
    cupti: bool = True,
    nvtx: bool = True,
    cudadevrt: bool = True,
    libdevice: bool = True,
    ptxas: bool = False,
) -> Path:
    """Lay out a Linux-style local CUDA installation under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    if nvdisasm:
        touch(root / "bin" / "nvdisasm")
    if ptxas:
        touch(root / "bin" / "ptxas")
    if cupti:
        touch(root / "extras" / "CUPTI" / "lib64" / "libcupti.so")
    if nvtx:
        touch(root / "lib64" / "libnvToolsExt.so.1")
    if cudadevrt:
        touch(root / "lib64" / "libcudadevrt.a")
    if libdevice:
        touch(root / "nvvm" / "libdevice" / "libdevice.10.bc")
    return root


def make_artifact(
    root: Path,
    *,
    cupti: bool = True,
    nvtx: bool = True,
    cudadevrt: bool = True,
    libdevice: bool = True,
) -> Path:
    """Lay out an unpacked Linux toolkit artifact under ``root``."""
    touch(root / "bin" / "nvdisasm")
    touch(root / "bin" / "cuobjdump")
    if cupti:
        touch(root / "lib" / "libcupti.so")
    if nvtx:
        touch(root / "lib" / "libnvToolsExt.so")
    if cudadevrt:
        touch(root / "lib" / "libcudadevrt.a")
    if libdevice:
        touch(root / "share" / "libdevice" / "libdevice.10.bc")
    return root


def backend(version: str = "8.0", host: str | None = None, nvptx: bool = True) -> BackendInfo:
    return BackendInfo(
        version=Version.parse(version),
        targets=frozenset({"nvptx", "x86"} if nvptx else {"x86"}),
        host_version=Version.parse(host) if host else None,
    )


@pytest.fixture
def prober() -> StubVersionProber:
    return StubVersionProber()


@pytest.fixture
def stub_prober() -> Callable[..., StubVersionProber]:
    return StubVersionProber


@pytest.fixture
def local_toolkit() -> Callable[..., Path]:
    return make_local_toolkit


@pytest.fixture
def artifact_tree() -> Callable[..., Path]:
    return make_artifact


@pytest.fixture
def backend_info() -> Callable[..., BackendInfo]:
    return backend
