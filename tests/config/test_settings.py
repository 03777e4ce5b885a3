from __future__ import annotations

import pytest

from cudaconf.config import DEFAULT_CONFIG_PATH, Settings
from cudaconf.errors import ResolutionError
from cudaconf.support import v


def test_defaults() -> None:
    settings = Settings.from_env({})
    assert settings.pinned_version is None
    assert settings.use_artifacts is True
    assert settings.artifact_source is None
    assert settings.config_path == DEFAULT_CONFIG_PATH


def test_overrides() -> None:
    settings = Settings.from_env(
        {
            "CUDACONF_CUDA_VERSION": "10.1.243",
            "CUDACONF_USE_ARTIFACTS": "off",
            "CUDACONF_ARTIFACT_SOURCE": "s3://toolkits/cuda",
            "CUDACONF_CONFIG_PATH": "/tmp/ext.conf",
        }
    )
    assert settings.pinned_version == v("10.1")
    assert settings.use_artifacts is False
    assert settings.artifact_source == "s3://toolkits/cuda"
    assert settings.config_path == "/tmp/ext.conf"


@pytest.mark.parametrize(
    "env",
    [{"CUDACONF_USE_ARTIFACTS": "perhaps"}, {"CUDACONF_CUDA_VERSION": "latest"}],
)
def test_invalid_values(env: dict[str, str]) -> None:
    with pytest.raises(ResolutionError) as exc:
        Settings.from_env(env)
    assert exc.value.code == "ESETTINGS"
