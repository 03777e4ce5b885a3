from __future__ import annotations

import sys
from collections.abc import Mapping
from pathlib import Path

from cudaconf.errors import (
    Failure,
    FetchError,
    MissingRequiredArtifact,
    MissingRequiredBinary,
    NoCompatibleArtifact,
    VersionMismatch,
)
from cudaconf.support.versions import Version, VersionSet
from cudaconf.utils import get_logger

from .descriptor import (
    CUOBJDUMP,
    CUPTI,
    LIBCUDADEVRT,
    LIBDEVICE,
    NVDISASM,
    NVTX,
    OPTIONAL_FEATURES,
    PTXAS,
    Artifact,
    ArtifactConstraint,
    ToolkitDescriptor,
)
from .naming import ArtifactLayout
from .probe import Prober

logger = get_logger(__name__)


def select_candidates(
    constraint: ArtifactConstraint, artifacts: Mapping[Version, Artifact]
) -> list[Version]:
    """Versions admitted by ``constraint``, newest first."""
    return VersionSet(ver for ver in artifacts if constraint.admits(ver)).descending()


def materialize_first(
    candidates: list[Version], artifacts: Mapping[Version, Artifact]
) -> tuple[Version, Path] | None:
    for ver in candidates:
        try:
            root = artifacts[ver].materialize()
        except (FetchError, OSError) as ex:
            # fall back to the next lower release, never retry this one
            logger.warning("Could not materialize the CUDA %s artifact: %s", ver, ex)
            continue
        logger.debug("Materialized CUDA %s artifact at %s", ver, root)
        return ver, root
    return None


def resolve_artifact(
    constraint: ArtifactConstraint,
    artifacts: Mapping[Version, Artifact],
    prober: Prober,
    *,
    platform: str = sys.platform,
) -> ToolkitDescriptor | Failure:
    chosen = materialize_first(select_candidates(constraint, artifacts), artifacts)
    if chosen is None:
        return Failure(
            NoCompatibleArtifact(f"Could not find a compatible CUDA artifact ({constraint})")
        )
    release, root = chosen
    layout = ArtifactLayout(root, release, platform)

    nvdisasm = layout.binary(NVDISASM)
    if not prober.exists(nvdisasm):
        return Failure(
            MissingRequiredBinary(f"The CUDA {release} artifact does not provide {NVDISASM}")
        )
    try:
        version = prober.query_version(str(nvdisasm))
    except MissingRequiredBinary as ex:
        return Failure(ex)
    if version.release != release.release:
        return Failure(
            VersionMismatch(f"The CUDA {release} artifact provides a CUDA {version} {NVDISASM}")
        )

    paths: dict[str, str | None] = {NVDISASM: str(nvdisasm)}
    for name, path in ((LIBCUDADEVRT, layout.libcudadevrt), (LIBDEVICE, layout.libdevice)):
        if not prober.exists(path):
            return Failure(
                MissingRequiredArtifact(f"The CUDA {release} artifact does not provide {name}")
            )
        paths[name] = str(path)

    optional = {
        CUPTI: layout.cupti,
        NVTX: layout.nvtx,
        CUOBJDUMP: layout.binary(CUOBJDUMP),
        PTXAS: layout.binary(PTXAS),
    }
    for name, path in optional.items():
        if prober.exists(path):
            paths[name] = str(path)
        elif name in OPTIONAL_FEATURES:
            logger.warning(
                "The CUDA %s artifact does not provide %s, %s", release, name, OPTIONAL_FEATURES[name]
            )

    return ToolkitDescriptor(version=version, dirs=(str(root),), paths=paths, source="artifact")
