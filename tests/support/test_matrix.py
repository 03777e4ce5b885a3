from __future__ import annotations

import itertools

import pytest

from cudaconf.errors import IncompatibleToolkit, UnsupportedBackend
from cudaconf.support import (
    BackendInfo,
    backend_support,
    cuda_support,
    devices_for_cuda,
    isas_for_cuda,
    v,
)


def test_backend_without_nvptx_is_unsupported(backend_info) -> None:
    with pytest.raises(UnsupportedBackend) as exc:
        backend_support(backend_info("8.0", nvptx=False))
    assert exc.value.code == "EBACKEND"


def test_backend_support_for_llvm_8(backend_info) -> None:
    m = backend_support(backend_info("8.0"))
    assert "7.5" in m.targets
    assert "8.0" not in m.targets
    assert "6.3" in m.isas
    assert "6.4" not in m.isas


def test_backend_support_ignores_host_version() -> None:
    info = BackendInfo(version=v("6.0"), targets=frozenset({"nvptx"}), host_version=v("6.0"))
    m = backend_support(info)
    assert "7.0" in m.targets
    assert "7.2" not in m.targets


@pytest.mark.parametrize(
    "driver,toolkit",
    [(d, t) for d, t in itertools.product(["9.0", "10.0", "10.1", "11.8"], repeat=2) if v(t) > v(d)],
)
def test_toolkit_newer_than_driver_is_incompatible(driver: str, toolkit: str) -> None:
    with pytest.raises(IncompatibleToolkit):
        cuda_support(v(driver), v(toolkit))


def test_toolkit_patch_level_is_ignored() -> None:
    # 10.1.243 > 10.1 as versions, but both are the 10.1 release
    m = cuda_support(v("10.1"), v("10.1.243"))
    assert m.targets == devices_for_cuda(v("10.1"))
    assert m.isas == isas_for_cuda(v("10.1"))


def test_cuda_support_intersects_driver_and_toolkit() -> None:
    m = cuda_support(v("10.1"), v("10.0.130"))
    assert "6.3" in m.isas
    assert "6.4" not in m.isas  # driver knows 6.4, toolkit does not
    assert "7.5" in m.targets


def test_removed_capabilities_drop_out() -> None:
    m = cuda_support(v("12.0"), v("12.0"))
    assert "3.5" not in m.targets
    assert "5.0" in m.targets
    assert "9.0" in m.targets
