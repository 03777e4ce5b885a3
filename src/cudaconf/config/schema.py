"""
Fixed schema of the persisted configuration.

Every key has a declared kind; values are JSON literals decoded by kind,
so nothing read back from disk is ever evaluated.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any

from cudaconf.errors import ConfigFormatError
from cudaconf.support.versions import Version

BOOL = "bool"
VERSION = "version"
VERSIONS = "versions"
STR = "str"
STRS = "strs"


def _field(kind: str, default: Any = None) -> Any:
    return field(default=default, metadata={"kind": kind})


@dataclass(frozen=True)
class Configuration:
    configured: bool = _field(BOOL, False)
    cuda_driver_version: Version | None = _field(VERSION)
    llvm_version: Version | None = _field(VERSION)
    toolkit_version: Version | None = _field(VERSION)
    toolkit_source: str | None = _field(STR)
    toolkit_dirs: tuple[str, ...] = _field(STRS, ())
    target_support: tuple[Version, ...] = _field(VERSIONS, ())
    ptx_support: tuple[Version, ...] = _field(VERSIONS, ())
    nvdisasm: str | None = _field(STR)
    libcudadevrt: str | None = _field(STR)
    libdevice: str | None = _field(STR)
    cupti: str | None = _field(STR)
    nvtx: str | None = _field(STR)
    cuobjdump: str | None = _field(STR)
    ptxas: str | None = _field(STR)

    @classmethod
    def unresolved(cls) -> Configuration:
        return cls(configured=False)

    def resolved(self) -> Configuration:
        return replace(self, configured=True)


SCHEMA: dict[str, str] = {f.name: f.metadata["kind"] for f in fields(Configuration)}


def encode_value(kind: str, value: Any) -> str:
    if kind == BOOL:
        return json.dumps(bool(value))
    if kind == VERSION:
        return json.dumps(None if value is None else str(value))
    if kind == VERSIONS:
        return json.dumps([str(x) for x in value])
    if kind == STR:
        return json.dumps(value)
    if kind == STRS:
        return json.dumps(list(value))
    raise ValueError(f"Unknown field kind: {kind}")


def decode_value(kind: str, text: str) -> Any:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as ex:
        raise ConfigFormatError(f"Invalid literal {text!r}") from ex

    try:
        if kind == BOOL:
            if not isinstance(raw, bool):
                raise TypeError(raw)
            return raw
        if kind == VERSION:
            return None if raw is None else Version.parse(_expect_str(raw))
        if kind == VERSIONS:
            return tuple(Version.parse(_expect_str(x)) for x in _expect_list(raw))
        if kind == STR:
            return None if raw is None else _expect_str(raw)
        if kind == STRS:
            return tuple(_expect_str(x) for x in _expect_list(raw))
    except (TypeError, ValueError) as ex:
        raise ConfigFormatError(f"Invalid {kind} literal {text!r}") from ex
    raise ValueError(f"Unknown field kind: {kind}")


def _expect_str(raw: Any) -> str:
    if not isinstance(raw, str):
        raise TypeError(raw)
    return raw


def _expect_list(raw: Any) -> list[Any]:
    if not isinstance(raw, list):
        raise TypeError(raw)
    return raw


def to_items(config: Configuration) -> list[tuple[str, str]]:
    """Encoded ``(key, literal)`` pairs; an unresolved config is just its marker."""
    if not config.configured:
        return [("configured", encode_value(BOOL, False))]
    return [(name, encode_value(kind, getattr(config, name))) for name, kind in SCHEMA.items()]


def from_items(items: dict[str, str]) -> Configuration:
    values: dict[str, Any] = {}
    for name, text in items.items():
        kind = SCHEMA.get(name)
        if kind is None:
            continue
        values[name] = decode_value(kind, text)
    return Configuration(**values)
