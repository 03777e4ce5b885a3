from __future__ import annotations

from dataclasses import dataclass, field

from cudaconf.errors import IncompatibleToolkit, UnsupportedBackend
from cudaconf.utils import get_logger

from .tables import devices_for_cuda, devices_for_llvm, isas_for_cuda, isas_for_llvm
from .versions import Version, VersionSet, verlist

logger = get_logger(__name__)

NVPTX_TARGET = "nvptx"


@dataclass(frozen=True)
class SupportMatrix:
    targets: VersionSet
    isas: VersionSet

    def __str__(self) -> str:
        return f"devices {verlist(self.targets)}; PTX {verlist(self.isas)}"


@dataclass(frozen=True)
class BackendInfo:
    """What the compiler backend reports about itself."""

    version: Version
    targets: frozenset[str] = field(default_factory=frozenset)
    host_version: Version | None = None


def backend_support(backend: BackendInfo) -> SupportMatrix:
    logger.debug("Using LLVM %s", backend.version)
    if NVPTX_TARGET not in backend.targets:
        raise UnsupportedBackend(
            f"Your LLVM {backend.version} does not support the NVPTX back-end. "
            "Both the official binaries and an unmodified build should contain it."
        )
    matrix = SupportMatrix(
        targets=devices_for_llvm(backend.version),
        isas=isas_for_llvm(backend.version),
    )
    logger.debug("LLVM support: %s", matrix)
    return matrix


def cuda_support(driver_version: Version, toolkit_version: Version) -> SupportMatrix:
    logger.debug("Using CUDA driver %s and toolkit %s", driver_version, toolkit_version)

    # the toolkit reports major.minor.patch, the driver only major.minor
    toolkit_release = toolkit_version.release
    driver_release = driver_version.release
    if toolkit_release > driver_release:
        raise IncompatibleToolkit(
            f"CUDA {toolkit_release} is not supported by your driver "
            f"(which supports up to {driver_release})"
        )

    driver = SupportMatrix(devices_for_cuda(driver_release), isas_for_cuda(driver_release))
    toolkit = SupportMatrix(devices_for_cuda(toolkit_release), isas_for_cuda(toolkit_release))
    logger.debug("CUDA driver %s support: %s", driver_release, driver)
    logger.debug("CUDA toolkit %s support: %s", toolkit_release, toolkit)

    return SupportMatrix(
        targets=driver.targets & toolkit.targets,
        isas=driver.isas & toolkit.isas,
    )
