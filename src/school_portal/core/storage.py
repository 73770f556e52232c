"""
Object Storage

Bucket/path object storage for uploaded images, gallery media and PPDB
documents. The local implementation keeps each bucket as a directory under
MEDIA_ROOT, which the app serves at /media.

File system calls run in a worker thread so they never block the event loop.
"""

import asyncio
import logging
import shutil
from pathlib import Path, PurePosixPath

from school_portal.core.config import settings

logger = logging.getLogger(__name__)


class StorageBuckets:
    """Bucket names used by the portal."""

    SCHOOL_IMAGES = "school-images"
    SCHOOL_VIDEOS = "school-videos"
    PPDB_DOCUMENTS = "ppdb-documents"
    NEWS_IMAGES = "news-images"
    GALLERY = "gallery"

    ALL = (SCHOOL_IMAGES, SCHOOL_VIDEOS, PPDB_DOCUMENTS, NEWS_IMAGES, GALLERY)


class StorageError(Exception):
    """Raised when an object cannot be stored, found or removed."""


class LocalObjectStorage:
    """Object storage backed by the local file system."""

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root).resolve()
        self.base_url = base_url.rstrip("/")

    def _resolve(self, bucket: str, path: str) -> Path:
        if bucket not in StorageBuckets.ALL:
            raise StorageError(f"Unknown bucket: {bucket}")

        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise StorageError(f"Invalid object path: {path}")

        bucket_root = self.root / bucket
        target = (bucket_root / Path(*relative.parts)).resolve()
        if bucket_root.resolve() not in target.parents:
            raise StorageError(f"Invalid object path: {path}")
        return target

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        # "x" mode refuses to overwrite an existing object
        with open(target, "xb") as fh:
            fh.write(data)

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str | None = None,
    ) -> str:
        """
        Store an object. Existing objects are never overwritten.

        Returns:
            The object path inside the bucket

        Raises:
            StorageError: If the path is invalid or already taken
        """
        target = self._resolve(bucket, path)
        try:
            await asyncio.to_thread(self._write, target, data)
        except FileExistsError as e:
            raise StorageError(f"Object already exists: {bucket}/{path}") from e
        except OSError as e:
            raise StorageError(f"Could not store {bucket}/{path}: {e}") from e

        logger.info(f"Stored object {bucket}/{path} ({len(data)} bytes, {content_type})")
        return path

    def _delete_paths(self, targets: list[Path]) -> int:
        removed = 0
        for target in targets:
            if target.is_dir():
                shutil.rmtree(target)
                removed += 1
            elif target.exists():
                target.unlink()
                removed += 1
        return removed

    async def delete(self, bucket: str, paths: list[str]) -> int:
        """
        Remove objects (or whole folders). Missing paths are ignored.

        Returns:
            Number of objects or folders removed
        """
        targets = [self._resolve(bucket, path) for path in paths]
        try:
            removed = await asyncio.to_thread(self._delete_paths, targets)
        except OSError as e:
            raise StorageError(f"Could not delete from {bucket}: {e}") from e

        logger.info(f"Deleted {removed} object(s) from {bucket}")
        return removed

    async def exists(self, bucket: str, path: str) -> bool:
        target = self._resolve(bucket, path)
        return await asyncio.to_thread(target.exists)

    def _list(self, bucket_root: Path, prefix: str) -> list[str]:
        if not bucket_root.exists():
            return []
        paths = []
        for item in bucket_root.rglob("*"):
            if item.is_file():
                relative = item.relative_to(bucket_root).as_posix()
                if relative.startswith(prefix):
                    paths.append(relative)
        return sorted(paths)

    async def list_paths(self, bucket: str, prefix: str = "") -> list[str]:
        """List object paths in a bucket, optionally filtered by prefix."""
        if bucket not in StorageBuckets.ALL:
            raise StorageError(f"Unknown bucket: {bucket}")
        return await asyncio.to_thread(self._list, self.root / bucket, prefix)

    async def modified_at(self, bucket: str, path: str) -> float:
        """Modification time (epoch seconds) of an object."""
        target = self._resolve(bucket, path)
        stat = await asyncio.to_thread(target.stat)
        return stat.st_mtime

    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL of an object."""
        self._resolve(bucket, path)
        return f"{self.base_url}/{bucket}/{path}"

    def path_from_public_url(self, bucket: str, url: str | None) -> str | None:
        """Object path for a public URL of this bucket, or None for foreign URLs."""
        prefix = f"{self.base_url}/{bucket}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None


_storage: LocalObjectStorage | None = None


def get_storage() -> LocalObjectStorage:
    """Return the configured storage (FastAPI dependency)."""
    global _storage
    if _storage is None:
        _storage = LocalObjectStorage(settings.media_root, settings.media_base_url)
    return _storage
