"""Environment settings and the persisted configuration store."""

from .schema import Configuration
from .settings import DEFAULT_CONFIG_PATH, Settings
from .store import CommitResult, backup_path, load, resolve_and_commit, save

__all__ = [
    "Configuration",
    "Settings",
    "DEFAULT_CONFIG_PATH",
    "CommitResult",
    "backup_path",
    "load",
    "save",
    "resolve_and_commit",
]
