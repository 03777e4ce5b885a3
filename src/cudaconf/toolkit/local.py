from __future__ import annotations

import os
from collections.abc import Sequence

from cudaconf.errors import (
    Failure,
    MissingDependency,
    MissingRequiredArtifact,
    MissingRequiredBinary,
)
from cudaconf.support.versions import Version
from cudaconf.utils import get_logger

from .descriptor import (
    CUPTI,
    EXTRA_BINARIES,
    LIBCUDADEVRT,
    LIBDEVICE,
    NVDISASM,
    NVTX,
    OPTIONAL_FEATURES,
    ToolkitDescriptor,
)
from .probe import Prober, default_roots

logger = get_logger(__name__)

# library file names differ from the logical component names
LIBRARY_NAMES = {CUPTI: "cupti", NVTX: "nvToolsExt"}
NVTX_VERSIONS = (Version(1),)


def _owning_root(binary: str, dirs: Sequence[str]) -> str:
    """The candidate root whose ``bin`` holds ``binary``, else its grandparent directory."""
    parent = os.path.normpath(os.path.dirname(os.path.dirname(binary)))
    for d in dirs:
        if os.path.normpath(d) == parent:
            return d
    return parent


def scan_local(prober: Prober, *, roots: Sequence[str] | None = None) -> ToolkitDescriptor | Failure:
    """
    Scan for a local installation. The first root (in priority order) that
    provides ``nvdisasm`` is the toolkit; every other component is looked up
    in that root only, so the descriptor never mixes files of two installs.
    """
    dirs = list(default_roots() if roots is None else roots)
    if not dirs:
        return Failure(MissingDependency("Could not find any CUDA toolkit installation"))
    logger.debug("Looking for CUDA in %s", ", ".join(dirs))

    nvdisasm = prober.find_binary(NVDISASM, dirs)
    if nvdisasm is None:
        return Failure(
            MissingRequiredBinary(f"Your CUDA installation does not provide the {NVDISASM} binary")
        )
    try:
        version = prober.query_version(nvdisasm)
    except MissingRequiredBinary as ex:
        return Failure(ex)

    root = _owning_root(nvdisasm, dirs)
    toolkit = [root]
    logger.debug("Using the CUDA %s installation at %s", version, root)

    paths: dict[str, str | None] = {NVDISASM: nvdisasm}

    cupti_dirs = [root, os.path.join(root, "extras", "CUPTI")]
    paths[CUPTI] = prober.find_library(LIBRARY_NAMES[CUPTI], cupti_dirs, [version])
    paths[NVTX] = prober.find_library(LIBRARY_NAMES[NVTX], toolkit, NVTX_VERSIONS)
    for name in (CUPTI, NVTX):
        if paths[name] is None:
            logger.warning(
                "Your CUDA installation does not provide the %s library, %s",
                name,
                OPTIONAL_FEATURES[name],
            )

    libcudadevrt = prober.find_libcudadevrt(toolkit)
    if libcudadevrt is None:
        return Failure(
            MissingRequiredArtifact(f"Your CUDA installation at {root} does not provide libcudadevrt")
        )
    paths[LIBCUDADEVRT] = libcudadevrt

    libdevice = prober.find_libdevice(toolkit)
    if libdevice is None:
        return Failure(
            MissingRequiredArtifact(f"Your CUDA installation at {root} does not provide libdevice")
        )
    paths[LIBDEVICE] = libdevice

    for name in EXTRA_BINARIES:
        paths[name] = prober.find_binary(name, toolkit)

    return ToolkitDescriptor(version=version, dirs=(root,), paths=paths, source="local")
