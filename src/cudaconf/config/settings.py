from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from cudaconf.errors import ResolutionError
from cudaconf.support.versions import Version

VERSION_ENV = "CUDACONF_CUDA_VERSION"
USE_ARTIFACTS_ENV = "CUDACONF_USE_ARTIFACTS"
ARTIFACT_SOURCE_ENV = "CUDACONF_ARTIFACT_SOURCE"
CACHE_DIR_ENV = "CUDACONF_CACHE_DIR"
CONFIG_PATH_ENV = "CUDACONF_CONFIG_PATH"

DEFAULT_CONFIG_PATH = "cudaconf_ext.conf"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: str, name: str) -> bool:
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ResolutionError(f"{name} must be a boolean, got {value!r}", code="ESETTINGS")


@dataclass(frozen=True)
class Settings:
    """Environment-provided knobs for one resolution run."""

    pinned_version: Version | None = None
    use_artifacts: bool = True
    artifact_source: str | None = None
    cache_dir: str | None = None
    config_path: str = DEFAULT_CONFIG_PATH

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ

        pinned = None
        if env.get(VERSION_ENV):
            try:
                pinned = Version.parse(env[VERSION_ENV]).release
            except ValueError as ex:
                raise ResolutionError(
                    f"{VERSION_ENV} must be a version number, got {env[VERSION_ENV]!r}",
                    code="ESETTINGS",
                ) from ex

        use_artifacts = True
        if env.get(USE_ARTIFACTS_ENV):
            use_artifacts = parse_bool(env[USE_ARTIFACTS_ENV], USE_ARTIFACTS_ENV)

        return cls(
            pinned_version=pinned,
            use_artifacts=use_artifacts,
            artifact_source=env.get(ARTIFACT_SOURCE_ENV) or None,
            cache_dir=env.get(CACHE_DIR_ENV) or None,
            config_path=env.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH,
        )
