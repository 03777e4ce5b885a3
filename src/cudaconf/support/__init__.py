"""Version model, capability databases and support-matrix resolution."""

from .compat import MINIMUM_TOOLKIT, check_backend_host, resolve, toolkit_warnings
from .matrix import NVPTX_TARGET, BackendInfo, SupportMatrix, backend_support, cuda_support
from .tables import devices_for_cuda, devices_for_llvm, isas_for_cuda, isas_for_llvm
from .versions import Version, VersionSet, v, verlist

__all__ = [
    "Version",
    "VersionSet",
    "v",
    "verlist",
    "SupportMatrix",
    "BackendInfo",
    "NVPTX_TARGET",
    "backend_support",
    "cuda_support",
    "check_backend_host",
    "toolkit_warnings",
    "resolve",
    "MINIMUM_TOOLKIT",
    "devices_for_cuda",
    "devices_for_llvm",
    "isas_for_cuda",
    "isas_for_llvm",
]
