from __future__ import annotations

import logging
from pathlib import Path

import pytest

from cudaconf.config import Configuration, Settings, load
from cudaconf.errors import IncompatibleToolkit, MissingDependency, NoCompatibleArtifact, UnsupportedBackend
from cudaconf.resolver import ResolvedToolchain, configure, fetcher_for, load_toolchain, resolve_toolchain
from cudaconf.support import VersionSet, v
from cudaconf.toolkit import DirectoryFetcher, S3Fetcher, artifact_catalog

LLVM8_CUDA101_TARGETS = VersionSet(
    ["3.0", "3.2", "3.5", "3.7", "5.0", "5.2", "5.3", "6.0", "6.1", "6.2", "7.0", "7.2", "7.5"]
)
LLVM8_CUDA101_ISAS = VersionSet(
    ["3.0", "3.1", "3.2", "4.0", "4.1", "4.2", "4.3", "5.0", "6.0", "6.1", "6.3"]
)


@pytest.fixture
def setup(tmp_path: Path, artifact_tree, local_toolkit, backend_info, stub_prober):
    """Keyword arguments for resolve_toolchain with one artifact and one local install."""
    artifacts_dir = tmp_path / "artifacts"
    artifact_tree(artifacts_dir / "CUDA10.1")
    local_root = local_toolkit(tmp_path / "local-cuda")

    def make(driver: str = "10.1", toolkit: str = "10.1.243", llvm: str = "8.0", **kwargs):
        args = dict(
            backend=lambda: backend_info(llvm),
            driver=lambda: v(driver),
            prober=stub_prober(toolkit),
            artifacts=artifact_catalog(DirectoryFetcher(artifacts_dir), [v("10.2"), v("10.1"), v("10.0")]),
            roots=[str(local_root)],
            platform="linux",
        )
        args.update(kwargs)
        return args

    make.artifacts_dir = artifacts_dir
    make.local_root = local_root
    return make


def test_resolves_from_artifact(setup) -> None:
    toolchain = resolve_toolchain(Settings(), **setup())
    assert toolchain.toolkit.source == "artifact"
    assert toolchain.toolkit.dirs == (str(setup.artifacts_dir / "CUDA10.1"),)
    assert toolchain.toolkit.version == v("10.1.243")
    assert toolchain.driver_release == v("10.1")
    assert toolchain.support.targets == LLVM8_CUDA101_TARGETS
    assert toolchain.support.isas == LLVM8_CUDA101_ISAS


def test_falls_back_to_local_installation(setup, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    empty = artifact_catalog(DirectoryFetcher(tmp_path / "no-artifacts"), [v("10.1"), v("10.0")])
    with caplog.at_level(logging.WARNING, logger="cudaconf"):
        toolchain = resolve_toolchain(Settings(), **setup(artifacts=empty))
    assert toolchain.toolkit.source == "local"
    assert toolchain.toolkit.dirs == (str(setup.local_root),)
    assert "Could not use CUDA from artifacts" in caplog.text


def test_artifacts_disabled_uses_local(setup) -> None:
    toolchain = resolve_toolchain(Settings(use_artifacts=False), **setup())
    assert toolchain.toolkit.source == "local"


def test_pinned_unknown_artifact_is_fatal(setup) -> None:
    with pytest.raises(NoCompatibleArtifact):
        resolve_toolchain(Settings(pinned_version=v("9.9")), **setup())


def test_local_toolkit_newer_than_driver(setup) -> None:
    with pytest.raises(IncompatibleToolkit):
        resolve_toolchain(Settings(use_artifacts=False), **setup(driver="10.0", toolkit="10.1.243"))


def test_unsupported_backend_leaves_store_unresolved(setup, tmp_path: Path, backend_info) -> None:
    path = tmp_path / "ext.conf"
    with pytest.raises(UnsupportedBackend):
        configure(Settings(), path, **setup(backend=lambda: backend_info("8.0", nvptx=False)))
    assert load(path) == Configuration.unresolved()
    with pytest.raises(MissingDependency):
        load_toolchain(path)


def test_configure_twice_is_idempotent(setup, tmp_path: Path) -> None:
    path = tmp_path / "ext.conf"
    first = configure(Settings(), path, **setup())
    content = path.read_bytes()
    second = configure(Settings(), path, **setup())
    assert first.changed
    assert not second.changed
    assert path.read_bytes() == content


def test_persisted_toolchain_round_trips(setup, tmp_path: Path) -> None:
    path = tmp_path / "ext.conf"
    configure(Settings(), path, **setup())
    restored = load_toolchain(path)
    assert restored == resolve_toolchain(Settings(), **setup())
    assert restored.toolkit.available("libdevice")


def test_unconfigured_toolchain_is_unavailable() -> None:
    with pytest.raises(MissingDependency):
        ResolvedToolchain.from_configuration(Configuration.unresolved())


def test_fetcher_selection(tmp_path: Path) -> None:
    assert isinstance(fetcher_for(Settings(artifact_source="s3://toolkits/cuda")), S3Fetcher)
    local = fetcher_for(Settings(artifact_source=str(tmp_path)))
    assert isinstance(local, DirectoryFetcher)
    assert local.root == tmp_path
    cached = fetcher_for(Settings(cache_dir=str(tmp_path / "cache")))
    assert isinstance(cached, DirectoryFetcher)
    assert cached.root == tmp_path / "cache"
