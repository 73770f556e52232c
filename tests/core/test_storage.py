"""
Unit tests for local object storage.
"""

import pytest

from school_portal.core.storage import StorageBuckets, StorageError


class TestLocalObjectStorage:
    @pytest.mark.asyncio
    async def test_upload_and_public_url(self, storage):
        path = await storage.upload(StorageBuckets.NEWS_IMAGES, "news/1.jpg", b"data", "image/jpeg")

        assert path == "news/1.jpg"
        assert await storage.exists(StorageBuckets.NEWS_IMAGES, "news/1.jpg") is True
        assert (
            storage.get_public_url(StorageBuckets.NEWS_IMAGES, path)
            == "http://testserver/media/news-images/news/1.jpg"
        )

    @pytest.mark.asyncio
    async def test_upload_never_overwrites(self, storage):
        await storage.upload(StorageBuckets.GALLERY, "gallery/a.jpg", b"one")

        with pytest.raises(StorageError):
            await storage.upload(StorageBuckets.GALLERY, "gallery/a.jpg", b"two")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["../escape.txt", "/etc/passwd", "a/../../b", ""])
    async def test_rejects_paths_outside_bucket(self, storage, path):
        with pytest.raises(StorageError):
            await storage.upload(StorageBuckets.GALLERY, path, b"x")

    @pytest.mark.asyncio
    async def test_rejects_unknown_bucket(self, storage):
        with pytest.raises(StorageError):
            await storage.upload("private", "a.txt", b"x")

    @pytest.mark.asyncio
    async def test_delete_folder_and_ignore_missing(self, storage):
        bucket = StorageBuckets.PPDB_DOCUMENTS
        await storage.upload(bucket, "PPDB202507/ktp_1.pdf", b"x")
        await storage.upload(bucket, "PPDB202507/kk_1.pdf", b"x")

        removed = await storage.delete(bucket, ["PPDB202507", "missing.pdf"])

        assert removed == 1
        assert await storage.list_paths(bucket) == []

    @pytest.mark.asyncio
    async def test_list_paths_with_prefix(self, storage):
        bucket = StorageBuckets.PPDB_DOCUMENTS
        await storage.upload(bucket, "A/ktp.pdf", b"x")
        await storage.upload(bucket, "B/ktp.pdf", b"x")

        assert await storage.list_paths(bucket) == ["A/ktp.pdf", "B/ktp.pdf"]
        assert await storage.list_paths(bucket, prefix="B/") == ["B/ktp.pdf"]

    def test_path_from_public_url(self, storage):
        bucket = StorageBuckets.NEWS_IMAGES
        url = "http://testserver/media/news-images/news/9.png"

        assert storage.path_from_public_url(bucket, url) == "news/9.png"
        assert storage.path_from_public_url(bucket, "https://cdn.example.com/x.png") is None
        assert storage.path_from_public_url(bucket, None) is None
