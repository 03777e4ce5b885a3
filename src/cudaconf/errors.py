from __future__ import annotations

from dataclasses import dataclass


class ResolutionError(Exception):
    """Toolchain resolution error with a short machine-readable code."""

    code = "ERESOLVE"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class MissingDependency(ResolutionError):
    code = "EMISSING_DEP"


class VersionMismatch(ResolutionError):
    code = "EVERSION_MISMATCH"


class UnsupportedBackend(ResolutionError):
    code = "EBACKEND"


class IncompatibleToolkit(ResolutionError):
    code = "ETOOLKIT_DRIVER"


class NoCompatibleTarget(ResolutionError):
    code = "ENO_TARGET"


class NoCompatibleInstructionSet(ResolutionError):
    code = "ENO_ISA"


class NoCompatibleArtifact(ResolutionError):
    code = "ENO_ARTIFACT"


class MissingRequiredBinary(ResolutionError):
    code = "EBINARY"


class MissingRequiredArtifact(ResolutionError):
    code = "EARTIFACT"


class FetchError(ResolutionError):
    """A single artifact version could not be materialized."""

    code = "EFETCH"


class ConfigFormatError(ResolutionError):
    code = "ECONFIG_FORMAT"


@dataclass(frozen=True)
class Failure:
    """Typed failure value returned by toolkit stages instead of raising."""

    error: ResolutionError

    @property
    def code(self) -> str:
        return self.error.code

    def __str__(self) -> str:
        return str(self.error)
