from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from cudaconf.errors import ConfigFormatError
from cudaconf.utils import get_logger

from .schema import Configuration, from_items, to_items

logger = get_logger(__name__)

HEADER = "# autogenerated file, do not edit"
BACKUP_SUFFIX = ".bak"

_LINE_RE = re.compile(r"^(\w+)\s*=\s*(.+?)\s*$")


@dataclass(frozen=True)
class CommitResult:
    config: Configuration
    changed: bool


def backup_path(path: str | Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def load(path: str | Path) -> Configuration | None:
    """Read a store; ``None`` when it does not exist. Unknown lines are ignored."""
    path = Path(path)
    if not path.is_file():
        return None
    items: dict[str, str] = {}
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            m = _LINE_RE.match(line)
            if m is not None:
                items[m.group(1)] = m.group(2)
    return from_items(items)


def save(config: Configuration, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [HEADER] + [f"{key} = {literal}" for key, literal in to_items(config)]
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def _load_previous(path: Path) -> Configuration | None:
    try:
        return load(path)
    except ConfigFormatError as ex:
        logger.warning("Ignoring unreadable previous configuration %s: %s", path, ex)
        return None


def resolve_and_commit(path: str | Path, resolve: Callable[[], Configuration]) -> CommitResult:
    """
    Re-resolve and persist the configuration at ``path``.

    The existing store is moved aside and replaced by an unresolved marker
    before ``resolve`` runs, so a failure (or crash) leaves consumers seeing
    "toolchain unavailable". When the fresh result equals the previous one the
    old file is moved back untouched, keeping dependent builds up to date.
    """
    path = Path(path)
    backup = backup_path(path)
    if path.exists():
        current = _load_previous(path)
        if current is not None and not current.configured and backup.exists():
            # an earlier run failed; its backup still holds the last good store
            path.unlink()
        else:
            os.replace(path, backup)
    save(Configuration.unresolved(), path)

    config = resolve().resolved()

    previous = _load_previous(backup) if backup.exists() else None
    if previous is not None and previous == config:
        os.replace(backup, path)
        logger.debug("Configuration at %s is unchanged", path)
        return CommitResult(config=config, changed=False)

    save(config, path)
    if backup.exists():
        backup.unlink()
    logger.info("Wrote configuration to %s", path)
    return CommitResult(config=config, changed=True)
