from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

_VERSION_RE = re.compile(r"^\s*v?(\d+)(?:\.(\d+))?(?:\.(\d+))?\s*$")


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str | Version) -> Version:
        if isinstance(text, Version):
            return text
        m = _VERSION_RE.match(str(text))
        if m is None:
            raise ValueError(f"Invalid version string: {text!r}")
        major, minor, patch = (int(g) if g is not None else 0 for g in m.groups())
        return cls(major, minor, patch)

    @property
    def release(self) -> Version:
        """The major.minor part; patch levels never change capabilities."""
        return Version(self.major, self.minor)

    def __str__(self) -> str:
        if self.patch:
            return f"{self.major}.{self.minor}.{self.patch}"
        return f"{self.major}.{self.minor}"


def v(text: str) -> Version:
    return Version.parse(text)


class VersionSet:
    """Ascending, duplicate-free collection of versions."""

    __slots__ = ("_items",)

    def __init__(self, versions: Iterable[Version | str] = ()) -> None:
        self._items: tuple[Version, ...] = tuple(
            sorted({Version.parse(x) for x in versions})
        )

    def intersection(self, other: VersionSet) -> VersionSet:
        # merge walk over two sorted sequences keeps the result ordered
        out: list[Version] = []
        i = j = 0
        a, b = self._items, other._items
        while i < len(a) and j < len(b):
            if a[i] == b[j]:
                out.append(a[i])
                i += 1
                j += 1
            elif a[i] < b[j]:
                i += 1
            else:
                j += 1
        return VersionSet(out)

    __and__ = intersection

    def descending(self) -> list[Version]:
        return list(reversed(self._items))

    def as_tuple(self) -> tuple[Version, ...]:
        return self._items

    def __iter__(self) -> Iterator[Version]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            item = Version.parse(item)
        return item in self._items

    def __eq__(self, other: object) -> bool:
        if isinstance(other, VersionSet):
            return self._items == other._items
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __repr__(self) -> str:
        return f"VersionSet([{', '.join(str(x) for x in self._items)}])"


def verlist(versions: Iterable[Version]) -> str:
    return ", ".join(str(x) for x in versions)
