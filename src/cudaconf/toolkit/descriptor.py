from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

from cudaconf.support.versions import Version

NVDISASM = "nvdisasm"
CUPTI = "cupti"
NVTX = "nvtx"
LIBCUDADEVRT = "libcudadevrt"
LIBDEVICE = "libdevice"
CUOBJDUMP = "cuobjdump"
PTXAS = "ptxas"

PATH_NAMES = (NVDISASM, LIBCUDADEVRT, LIBDEVICE, CUPTI, NVTX, CUOBJDUMP, PTXAS)

# what goes missing when an optional component is absent
OPTIONAL_FEATURES = {
    CUPTI: "SASS code reflection will be unavailable",
    NVTX: "NVTX range annotations will be unavailable",
}

# optional binaries that are looked up but never warned about
EXTRA_BINARIES = (CUOBJDUMP, PTXAS)


@dataclass(frozen=True)
class ToolkitDescriptor:
    version: Version
    dirs: tuple[str, ...]
    paths: Mapping[str, str | None] = field(default_factory=dict)
    source: str = "local"

    def __post_init__(self) -> None:
        full = {name: None for name in PATH_NAMES}
        full.update(self.paths)
        object.__setattr__(self, "paths", full)
        object.__setattr__(self, "dirs", tuple(self.dirs))

    @property
    def release(self) -> Version:
        return self.version.release

    def path(self, name: str) -> str | None:
        return self.paths.get(name)

    def available(self, name: str) -> bool:
        return self.paths.get(name) is not None


@dataclass(frozen=True)
class Artifact:
    """A versioned toolkit bundle; ``materializer`` returns its local directory."""

    version: Version
    materializer: Callable[[], Path]

    def materialize(self) -> Path:
        return Path(self.materializer())


@dataclass(frozen=True)
class ArtifactConstraint:
    """Either an exact pinned version or an upper bound from the driver."""

    version: Version
    exact: bool

    @classmethod
    def pinned(cls, version: Version) -> ArtifactConstraint:
        return cls(version=version, exact=True)

    @classmethod
    def driver(cls, release: Version) -> ArtifactConstraint:
        return cls(version=release.release, exact=False)

    def admits(self, candidate: Version) -> bool:
        if self.exact:
            return candidate == self.version
        return candidate <= self.version

    def __str__(self) -> str:
        if self.exact:
            return f"== {self.version}"
        return f"<= {self.version} (driver release)"
