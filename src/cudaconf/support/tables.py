"""
Capability databases for the LLVM NVPTX backend and the CUDA toolchain.

Each entry maps a device capability (or PTX ISA version) to the half-open
range ``[introduced, removed)`` of LLVM or CUDA releases that support it.
``None`` as upper bound means "still supported".
"""

from __future__ import annotations

from collections.abc import Mapping

from .versions import Version, VersionSet, v

Range = tuple[Version, Version | None]

LOWEST = v("0.0")

CUDA_CAP_DB: dict[Version, Range] = {
    v("1.0"): (LOWEST, v("7.0")),
    v("1.1"): (LOWEST, v("7.0")),
    v("1.2"): (LOWEST, v("7.0")),
    v("1.3"): (LOWEST, v("7.0")),
    v("2.0"): (LOWEST, v("9.0")),
    v("2.1"): (LOWEST, v("9.0")),
    v("3.0"): (v("4.2"), v("11.0")),
    v("3.2"): (v("6.0"), v("11.0")),
    v("3.5"): (v("5.0"), v("12.0")),
    v("3.7"): (v("6.5"), v("12.0")),
    v("5.0"): (v("6.0"), None),
    v("5.2"): (v("7.0"), None),
    v("5.3"): (v("7.5"), None),
    v("6.0"): (v("8.0"), None),
    v("6.1"): (v("8.0"), None),
    v("6.2"): (v("8.0"), None),
    v("7.0"): (v("9.0"), None),
    v("7.2"): (v("9.2"), None),
    v("7.5"): (v("10.0"), None),
    v("8.0"): (v("11.0"), None),
    v("8.6"): (v("11.1"), None),
    v("8.7"): (v("11.4"), None),
    v("8.9"): (v("11.8"), None),
    v("9.0"): (v("11.8"), None),
}

CUDA_PTX_DB: dict[Version, Range] = {
    v("1.0"): (v("1.0"), None),
    v("1.1"): (v("1.1"), None),
    v("1.2"): (v("2.0"), None),
    v("1.3"): (v("2.1"), None),
    v("1.4"): (v("2.2"), None),
    v("1.5"): (v("2.2"), None),
    v("2.0"): (v("3.0"), None),
    v("2.1"): (v("3.1"), None),
    v("2.2"): (v("3.2"), None),
    v("2.3"): (v("4.2"), None),
    v("3.0"): (v("4.1"), None),
    v("3.1"): (v("5.0"), None),
    v("3.2"): (v("5.5"), None),
    v("4.0"): (v("6.0"), None),
    v("4.1"): (v("6.5"), None),
    v("4.2"): (v("7.0"), None),
    v("4.3"): (v("7.5"), None),
    v("5.0"): (v("8.0"), None),
    v("6.0"): (v("9.0"), None),
    v("6.1"): (v("9.1"), None),
    v("6.2"): (v("9.2"), None),
    v("6.3"): (v("10.0"), None),
    v("6.4"): (v("10.1"), None),
    v("6.5"): (v("10.2"), None),
    v("7.0"): (v("11.0"), None),
    v("7.1"): (v("11.1"), None),
    v("7.2"): (v("11.2"), None),
    v("7.3"): (v("11.3"), None),
    v("7.4"): (v("11.4"), None),
    v("7.5"): (v("11.5"), None),
    v("7.6"): (v("11.6"), None),
    v("7.7"): (v("11.7"), None),
    v("7.8"): (v("11.8"), None),
    v("8.0"): (v("12.0"), None),
    v("8.1"): (v("12.1"), None),
    v("8.2"): (v("12.2"), None),
    v("8.3"): (v("12.3"), None),
    v("8.4"): (v("12.4"), None),
}

LLVM_CAP_DB: dict[Version, Range] = {
    v("2.0"): (v("3.2"), None),
    v("2.1"): (v("3.2"), None),
    v("3.0"): (v("3.2"), None),
    v("3.2"): (v("3.7"), None),
    v("3.5"): (v("3.2"), None),
    v("3.7"): (v("3.7"), None),
    v("5.0"): (v("3.5"), None),
    v("5.2"): (v("3.7"), None),
    v("5.3"): (v("3.7"), None),
    v("6.0"): (v("3.9"), None),
    v("6.1"): (v("3.9"), None),
    v("6.2"): (v("3.9"), None),
    v("7.0"): (v("6.0"), None),
    v("7.2"): (v("7.0"), None),
    v("7.5"): (v("8.0"), None),
    v("8.0"): (v("11.0"), None),
    v("8.6"): (v("13.0"), None),
    v("8.7"): (v("16.0"), None),
    v("8.9"): (v("16.0"), None),
    v("9.0"): (v("16.0"), None),
}

LLVM_PTX_DB: dict[Version, Range] = {
    v("3.0"): (v("3.2"), None),
    v("3.1"): (v("3.5"), None),
    v("3.2"): (v("3.7"), None),
    v("4.0"): (v("3.7"), None),
    v("4.1"): (v("4.0"), None),
    v("4.2"): (v("4.0"), None),
    v("4.3"): (v("4.0"), None),
    v("5.0"): (v("4.0"), None),
    v("6.0"): (v("6.0"), None),
    v("6.1"): (v("7.0"), None),
    v("6.3"): (v("8.0"), None),
    v("6.4"): (v("9.0"), None),
    v("6.5"): (v("11.0"), None),
    v("7.0"): (v("11.0"), None),
    v("7.1"): (v("14.0"), None),
    v("7.2"): (v("14.0"), None),
    v("7.3"): (v("14.0"), None),
    v("7.4"): (v("14.0"), None),
    v("7.5"): (v("14.0"), None),
    v("7.6"): (v("16.0"), None),
    v("7.7"): (v("16.0"), None),
    v("7.8"): (v("16.0"), None),
    v("8.0"): (v("17.0"), None),
    v("8.1"): (v("17.0"), None),
    v("8.2"): (v("17.0"), None),
    v("8.3"): (v("17.0"), None),
}


def supported_by(db: Mapping[Version, Range], release: Version) -> VersionSet:
    """Entries of ``db`` whose support range contains ``release``."""
    release = release.release
    return VersionSet(
        key
        for key, (lo, hi) in db.items()
        if lo <= release and (hi is None or release < hi)
    )


def devices_for_cuda(release: Version) -> VersionSet:
    return supported_by(CUDA_CAP_DB, release)


def isas_for_cuda(release: Version) -> VersionSet:
    return supported_by(CUDA_PTX_DB, release)


def devices_for_llvm(release: Version) -> VersionSet:
    return supported_by(LLVM_CAP_DB, release)


def isas_for_llvm(release: Version) -> VersionSet:
    return supported_by(LLVM_PTX_DB, release)
