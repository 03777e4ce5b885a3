"""Toolkit discovery: artifacts, local installations and their collaborators."""

from .artifacts import resolve_artifact, select_candidates
from .descriptor import Artifact, ArtifactConstraint, ToolkitDescriptor
from .fetch import (
    DEFAULT_ARTIFACT_VERSIONS,
    ArtifactFetcher,
    DirectoryFetcher,
    S3Fetcher,
    artifact_catalog,
)
from .local import scan_local
from .probe import FileSystemProber, Prober, default_roots, parse_toolkit_version

__all__ = [
    "Artifact",
    "ArtifactConstraint",
    "ToolkitDescriptor",
    "ArtifactFetcher",
    "DirectoryFetcher",
    "S3Fetcher",
    "DEFAULT_ARTIFACT_VERSIONS",
    "artifact_catalog",
    "resolve_artifact",
    "select_candidates",
    "scan_local",
    "Prober",
    "FileSystemProber",
    "default_roots",
    "parse_toolkit_version",
]
