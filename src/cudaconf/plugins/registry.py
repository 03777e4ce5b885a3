from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cudaconf.toolkit.fetch import DirectoryFetcher, S3Fetcher


@dataclass
class RegisteredComponent:
    kind: str
    name: str
    factory: Callable[..., Any]


class Registry:
    def __init__(self) -> None:
        self._items: dict[str, RegisteredComponent] = {}

    def register(self, kind: str, name: str, factory: Callable[..., Any]) -> None:
        key = f"{kind}:{name}"
        self._items[key] = RegisteredComponent(kind=kind, name=name, factory=factory)

    def get(self, kind: str, name: str) -> RegisteredComponent | None:
        return self._items.get(f"{kind}:{name}")

    def names(self, kind: str) -> list[str]:
        return sorted(item.name for item in self._items.values() if item.kind == kind)

    def create(self, kind: str, name: str, *args: Any, **kwargs: Any) -> Any:
        item = self.get(kind, name)
        if not item:
            available = ", ".join(self.names(kind)) or "none"
            raise KeyError(f"Component not found: {kind}:{name} (available: {available})")
        return item.factory(*args, **kwargs)


def _s3_fetcher(source: str, cache_dir: str | None = None) -> S3Fetcher:
    return S3Fetcher.from_uri(source, cache_dir=cache_dir)


def _directory_fetcher(source: str, cache_dir: str | None = None) -> DirectoryFetcher:
    return DirectoryFetcher(source)


global_registry = Registry()
global_registry.register("fetcher", "s3", _s3_fetcher)
global_registry.register("fetcher", "file", _directory_fetcher)
