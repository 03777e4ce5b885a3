"""Probes for the host's compiler backend and CUDA driver."""

from __future__ import annotations

import contextlib
from collections.abc import Callable

import llvmlite.binding as llvm
import pynvml

from cudaconf.errors import MissingDependency
from cudaconf.support.matrix import NVPTX_TARGET, BackendInfo
from cudaconf.support.versions import Version

BackendProbe = Callable[[], BackendInfo]
DriverProbe = Callable[[], Version]

NVPTX_TRIPLE = "nvptx64-nvidia-cuda"


def llvm_backend() -> BackendInfo:
    """The LLVM that llvmlite links against, and whether it carries NVPTX."""
    version = Version(*llvm.llvm_version_info)
    llvm.initialize_all_targets()
    targets = frozenset({NVPTX_TARGET}) if _has_target(NVPTX_TRIPLE) else frozenset()
    return BackendInfo(version=version, targets=targets)


def _has_target(triple: str) -> bool:
    try:
        llvm.Target.from_triple(triple)
    except RuntimeError:
        return False
    return True


def cuda_driver() -> Version:
    """CUDA release supported by the installed driver, as major.minor."""
    try:
        pynvml.nvmlInit()
    except pynvml.NVMLError as ex:
        raise MissingDependency(f"Could not initialize the CUDA driver: {ex}") from ex
    try:
        raw = pynvml.nvmlSystemGetCudaDriverVersion()
    except pynvml.NVMLError as ex:
        raise MissingDependency(f"Could not query the CUDA driver version: {ex}") from ex
    finally:
        with contextlib.suppress(pynvml.NVMLError):
            pynvml.nvmlShutdown()
    return Version(raw // 1000, (raw % 1000) // 10)
