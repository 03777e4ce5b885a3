from __future__ import annotations

import pynvml
import pytest

from cudaconf import system
from cudaconf.errors import MissingDependency
from cudaconf.support import v


def test_driver_release_from_nvml(monkeypatch: pytest.MonkeyPatch) -> None:
    shutdowns: list[bool] = []
    monkeypatch.setattr(system.pynvml, "nvmlInit", lambda: None)
    monkeypatch.setattr(system.pynvml, "nvmlSystemGetCudaDriverVersion", lambda: 12040)
    monkeypatch.setattr(system.pynvml, "nvmlShutdown", lambda: shutdowns.append(True))
    assert system.cuda_driver() == v("12.4")
    assert shutdowns == [True]


def test_missing_driver(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail() -> None:
        raise pynvml.NVMLError(pynvml.NVML_ERROR_LIBRARY_NOT_FOUND)

    monkeypatch.setattr(system.pynvml, "nvmlInit", fail)
    with pytest.raises(MissingDependency) as exc:
        system.cuda_driver()
    assert exc.value.code == "EMISSING_DEP"


@pytest.mark.parametrize("has_nvptx", [True, False])
def test_llvm_backend_reports_nvptx(monkeypatch: pytest.MonkeyPatch, has_nvptx: bool) -> None:
    def from_triple(cls, triple: str):
        if not has_nvptx:
            raise RuntimeError(f"No available targets are compatible with triple {triple!r}")
        return object()

    monkeypatch.setattr(system.llvm, "llvm_version_info", (14, 0, 6))
    monkeypatch.setattr(system.llvm, "initialize_all_targets", lambda: None)
    monkeypatch.setattr(system.llvm.Target, "from_triple", classmethod(from_triple))
    info = system.llvm_backend()
    assert info.version == v("14.0.6")
    assert ("nvptx" in info.targets) is has_nvptx
