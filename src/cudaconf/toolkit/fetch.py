from __future__ import annotations

import os
import platform as _platform
import shutil
import sys
import tarfile
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cudaconf.errors import FetchError
from cudaconf.support.versions import Version, v
from cudaconf.utils import get_logger

from .descriptor import Artifact

logger = get_logger(__name__)

DEFAULT_ARTIFACT_VERSIONS = tuple(
    v(x) for x in ("12.4", "12.2", "11.8", "11.0", "10.2", "10.1", "10.0", "9.2", "9.0")
)


class ArtifactFetcher(Protocol):
    """Owns download and caching of toolkit artifacts."""

    def materialize(self, version: Version) -> Path: ...


def artifact_dirname(version: Version) -> str:
    release = version.release
    return f"CUDA{release.major}.{release.minor}"


def platform_tag(platform: str = sys.platform, machine: str | None = None) -> str:
    machine = (machine or _platform.machine() or "x86_64").lower()
    if machine in ("amd64", "x64"):
        machine = "x86_64"
    if platform.startswith("win"):
        os_name = "windows"
    elif platform == "darwin":
        os_name = "macos"
    else:
        os_name = "linux"
    return f"{os_name}-{machine}"


class DirectoryFetcher:
    """Serves artifacts already unpacked as ``<root>/CUDA<major>.<minor>``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def materialize(self, version: Version) -> Path:
        path = self.root / artifact_dirname(version)
        if not path.is_dir():
            raise FetchError(f"No CUDA {version.release} artifact at {path}")
        return path


class S3Fetcher:
    """
    Downloads ``s3://<bucket>/<prefix>/CUDA<ver>-<platform>.tar.gz`` and
    unpacks it into ``<cache_dir>/CUDA<ver>``. An unpacked artifact in the
    cache is reused without contacting S3.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        cache_dir: str | Path | None = None,
        client: Any | None = None,
        platform: str = sys.platform,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.cache_dir = Path(cache_dir) if cache_dir else default_cache_dir()
        self._client = client
        self.platform = platform

    @classmethod
    def from_uri(cls, s3_uri: str, **kwargs: Any) -> S3Fetcher:
        if not s3_uri.startswith("s3://"):
            raise ValueError("s3_uri must start with s3://")
        _, rest = s3_uri.split("s3://", 1)
        bucket, _, prefix = rest.partition("/")
        return cls(bucket, prefix, **kwargs)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("s3")
        return self._client

    def key_for(self, version: Version) -> str:
        name = f"{artifact_dirname(version)}-{platform_tag(self.platform)}.tar.gz"
        return f"{self.prefix}/{name}" if self.prefix else name

    def materialize(self, version: Version) -> Path:
        target = self.cache_dir / artifact_dirname(version)
        if target.is_dir():
            logger.debug("Using cached CUDA %s artifact at %s", version.release, target)
            return target

        key = self.key_for(version)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=".staging_", dir=self.cache_dir))
        try:
            archive = staging / "artifact.tar.gz"
            self.client.download_file(self.bucket, key, str(archive))
            logger.info("Downloaded s3://%s/%s", self.bucket, key)
            unpacked = staging / "root"
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(unpacked, filter="data")
            os.replace(unpacked, target)
        except (BotoCoreError, ClientError) as ex:
            raise FetchError(f"Could not download s3://{self.bucket}/{key}: {ex}") from ex
        except (tarfile.TarError, OSError) as ex:
            raise FetchError(f"Could not unpack CUDA {version.release} artifact: {ex}") from ex
        finally:
            shutil.rmtree(staging, ignore_errors=True)
        return target


def default_cache_dir() -> Path:
    base = os.environ.get("XDG_CACHE_HOME") or os.path.join(os.path.expanduser("~"), ".cache")
    return Path(base) / "cudaconf" / "artifacts"


def artifact_catalog(
    fetcher: ArtifactFetcher, versions: Iterable[Version] = DEFAULT_ARTIFACT_VERSIONS
) -> dict[Version, Artifact]:
    """Deferred artifacts for ``versions``; nothing is fetched until materialized."""
    catalog: dict[Version, Artifact] = {}
    for ver in versions:
        catalog[ver] = Artifact(version=ver, materializer=lambda ver=ver: fetcher.materialize(ver))
    return catalog
