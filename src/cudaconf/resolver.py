from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from cudaconf.config import CommitResult, Configuration, Settings, load, resolve_and_commit
from cudaconf.errors import Failure, MissingDependency
from cudaconf.plugins.registry import Registry, global_registry
from cudaconf.support import (
    SupportMatrix,
    Version,
    VersionSet,
    backend_support,
    check_backend_host,
    cuda_support,
    resolve,
)
from cudaconf.system import BackendProbe, DriverProbe, cuda_driver, llvm_backend
from cudaconf.toolkit import (
    Artifact,
    ArtifactConstraint,
    ArtifactFetcher,
    DirectoryFetcher,
    FileSystemProber,
    Prober,
    ToolkitDescriptor,
    artifact_catalog,
    resolve_artifact,
    scan_local,
)
from cudaconf.toolkit.descriptor import PATH_NAMES
from cudaconf.toolkit.fetch import default_cache_dir
from cudaconf.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResolvedToolchain:
    """Outcome of one resolution pass; shared read-only with every consumer."""

    toolkit: ToolkitDescriptor
    driver_release: Version
    backend_version: Version
    support: SupportMatrix

    def to_configuration(self) -> Configuration:
        paths = {name: self.toolkit.path(name) for name in PATH_NAMES}
        return Configuration(
            configured=True,
            cuda_driver_version=self.driver_release,
            llvm_version=self.backend_version,
            toolkit_version=self.toolkit.version,
            toolkit_source=self.toolkit.source,
            toolkit_dirs=self.toolkit.dirs,
            target_support=self.support.targets.as_tuple(),
            ptx_support=self.support.isas.as_tuple(),
            **paths,
        )

    @classmethod
    def from_configuration(cls, config: Configuration) -> ResolvedToolchain:
        if not config.configured:
            raise MissingDependency("The CUDA toolchain has not been configured successfully")
        if config.toolkit_version is None or config.cuda_driver_version is None or config.llvm_version is None:
            raise MissingDependency("The CUDA toolchain configuration is incomplete")
        toolkit = ToolkitDescriptor(
            version=config.toolkit_version,
            dirs=config.toolkit_dirs,
            paths={name: getattr(config, name) for name in PATH_NAMES},
            source=config.toolkit_source or "local",
        )
        return cls(
            toolkit=toolkit,
            driver_release=config.cuda_driver_version,
            backend_version=config.llvm_version,
            support=SupportMatrix(VersionSet(config.target_support), VersionSet(config.ptx_support)),
        )


def load_toolchain(path: str | Path) -> ResolvedToolchain:
    """Toolchain persisted at ``path``; an unresolved store means "unavailable"."""
    config = load(path)
    if config is None:
        raise MissingDependency(f"No CUDA toolchain configuration at {path}")
    return ResolvedToolchain.from_configuration(config)


def fetcher_for(settings: Settings, registry: Registry = global_registry) -> ArtifactFetcher:
    source = settings.artifact_source
    if not source:
        return DirectoryFetcher(settings.cache_dir or default_cache_dir())
    scheme = "s3" if source.startswith("s3://") else "file"
    return registry.create("fetcher", scheme, source, cache_dir=settings.cache_dir)


def _escalate(result: ToolkitDescriptor | Failure) -> ToolkitDescriptor:
    if isinstance(result, Failure):
        raise result.error
    return result


def select_toolkit(
    settings: Settings,
    *,
    driver_release: Version,
    prober: Prober,
    artifacts: Mapping[Version, Artifact],
    roots: Sequence[str] | None = None,
    platform: str = sys.platform,
) -> ToolkitDescriptor:
    """
    Artifact-or-local decision:

    - artifacts disabled: local installation only;
    - pinned version: that artifact or nothing;
    - otherwise the newest artifact the driver supports, falling back to a
      local installation.
    """
    if not settings.use_artifacts:
        logger.debug("Use of CUDA artifacts not allowed by user")
        return _escalate(scan_local(prober, roots=roots))

    if settings.pinned_version is not None:
        constraint = ArtifactConstraint.pinned(settings.pinned_version)
        return _escalate(resolve_artifact(constraint, artifacts, prober, platform=platform))

    constraint = ArtifactConstraint.driver(driver_release)
    result = resolve_artifact(constraint, artifacts, prober, platform=platform)
    if isinstance(result, Failure):
        logger.warning("Could not use CUDA from artifacts: %s; looking for a local installation", result)
        return _escalate(scan_local(prober, roots=roots))
    return result


def resolve_toolchain(
    settings: Settings,
    *,
    backend: BackendProbe = llvm_backend,
    driver: DriverProbe = cuda_driver,
    prober: Prober | None = None,
    fetcher: ArtifactFetcher | None = None,
    artifacts: Mapping[Version, Artifact] | None = None,
    roots: Sequence[str] | None = None,
    platform: str = sys.platform,
) -> ResolvedToolchain:
    info = backend()
    check_backend_host(info)
    backend_matrix = backend_support(info)

    driver_release = driver().release

    if artifacts is None:
        artifacts = artifact_catalog(fetcher or fetcher_for(settings))
    toolkit = select_toolkit(
        settings,
        driver_release=driver_release,
        prober=prober or FileSystemProber(platform),
        artifacts=artifacts,
        roots=roots,
        platform=platform,
    )
    origin = "an artifact" if toolkit.source == "artifact" else "a local installation"
    logger.info("Using CUDA %s from %s at %s", toolkit.version, origin, ", ".join(toolkit.dirs))

    cuda_matrix = cuda_support(driver_release, toolkit.version)
    support = resolve(
        backend_matrix,
        cuda_matrix,
        toolkit_release=toolkit.release,
        driver_release=driver_release,
    )
    return ResolvedToolchain(
        toolkit=toolkit,
        driver_release=driver_release,
        backend_version=info.version,
        support=support,
    )


def configure(settings: Settings | None = None, path: str | Path | None = None, **kwargs) -> CommitResult:
    """Resolve the toolchain and commit it to the configuration store."""
    settings = settings or Settings.from_env()
    target = path or settings.config_path
    return resolve_and_commit(target, lambda: resolve_toolchain(settings, **kwargs).to_configuration())
