"""Filesystem stand-in for the deployment bucket upload collaborator.

Objects land at ``<bucket_root>/<bucket>/<key>``.  An artifact whose key
already exists with the same size is skipped, which is what makes
content-hashed filenames cheap: an unchanged artifact keeps its name and
is never sent again.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class UploadResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    uploaded: bool
    size_bytes: int = 0


class Uploader(Protocol):
    def upload_descriptor(
        self, bucket: str, directory_name: str, naming: Any, descriptor_path: Path
    ) -> UploadResult: ...


class LocalBucketUploader:
    """Copies files into a directory tree that mirrors bucket keys."""

    def __init__(self, bucket_root: Path) -> None:
        self._root = Path(bucket_root)

    def object_path(self, bucket: str, key: str) -> Path:
        return self._root / bucket / key

    def _put(self, bucket: str, key: str, source: Path, *, skip_existing: bool) -> UploadResult:
        source = Path(source)
        size = source.stat().st_size
        dest = self.object_path(bucket, key)
        if skip_existing and dest.exists() and dest.stat().st_size == size:
            logger.info("Skipping %s: already uploaded", key)
            return UploadResult(key=key, uploaded=False, size_bytes=size)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
        logger.info("Uploaded %s (%d bytes)", key, size)
        return UploadResult(key=key, uploaded=True, size_bytes=size)

    def upload_artifacts(
        self, bucket: str, directory_name: str, paths: list[Path]
    ) -> list[UploadResult]:
        return [
            self._put(bucket, f"{directory_name}/{Path(p).name}", p, skip_existing=True)
            for p in paths
        ]

    def upload_descriptor(
        self, bucket: str, directory_name: str, naming: Any, descriptor_path: Path
    ) -> UploadResult:
        """Upload the descriptor under ``<directory>/<naming suffix>``.

        The descriptor is regenerated on every deploy, so it is always written.
        """
        key = f"{directory_name}/{naming.get_descriptor_suffix()}"
        return self._put(bucket, key, descriptor_path, skip_existing=False)
