from __future__ import annotations

from cudaconf.errors import NoCompatibleInstructionSet, NoCompatibleTarget, VersionMismatch
from cudaconf.utils import get_logger

from .matrix import BackendInfo, SupportMatrix
from .versions import Version, v

logger = get_logger(__name__)

MINIMUM_TOOLKIT = v("9.0")
DEBUG_INFO_LLVM = v("8.0")


def check_backend_host(backend: BackendInfo) -> None:
    """The backend must be the same LLVM the host compiler links against."""
    if backend.host_version is not None and backend.host_version != backend.version:
        raise VersionMismatch(
            f"LLVM {backend.version} incompatible with host LLVM {backend.host_version}"
        )
    if backend.version >= DEBUG_INFO_LLVM:
        logger.debug(
            "Incompatibility detected between CUDA and LLVM %s+; "
            "disabling debug info emission for CUDA kernels",
            DEBUG_INFO_LLVM,
        )


def toolkit_warnings(toolkit_release: Version, driver_release: Version) -> list[str]:
    toolkit_release = toolkit_release.release
    driver_release = driver_release.release
    if toolkit_release < MINIMUM_TOOLKIT:
        return [
            f"Only CUDA {MINIMUM_TOOLKIT} or higher is supported "
            f"(your toolkit provides CUDA {toolkit_release})"
        ]
    if toolkit_release > driver_release:
        return [
            f"You are using CUDA toolkit {toolkit_release} with a driver that only "
            f"supports up to {driver_release}. It is recommended to upgrade your "
            "driver, or switch to automatic installation of CUDA."
        ]
    return []


def resolve(
    backend: SupportMatrix,
    cuda: SupportMatrix,
    *,
    toolkit_release: Version | None = None,
    driver_release: Version | None = None,
) -> SupportMatrix:
    if toolkit_release is not None and driver_release is not None:
        for message in toolkit_warnings(toolkit_release, driver_release):
            logger.warning(message)

    targets = backend.targets & cuda.targets
    if not targets:
        raise NoCompatibleTarget("Your toolchain does not support any device capability")

    isas = backend.isas & cuda.isas
    if not isas:
        raise NoCompatibleInstructionSet("Your toolchain does not support any PTX ISA")

    result = SupportMatrix(targets=targets, isas=isas)
    logger.debug("Toolchain supports %s", result)
    return result
