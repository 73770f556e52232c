"""
Unit tests for storing validated uploads.
"""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from school_portal.core.storage import StorageBuckets
from school_portal.core.validators import ADMISSION_DOCUMENT_RULE, MB, NEWS_IMAGE_RULE
from school_portal.modules.shared import ValidationFailedError
from school_portal.modules.shared.uploads import (
    discard_object,
    read_upload,
    require_upload,
    store_upload,
)


def form_file(filename: str, content_type: str, size: int) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(b"x" * size),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestReadUpload:
    @pytest.mark.asyncio
    async def test_reads_whole_file_within_limit(self):
        uploaded = await read_upload(
            form_file("ktp.pdf", "application/pdf", MB), ADMISSION_DOCUMENT_RULE
        )

        assert uploaded.size == MB
        assert uploaded.content_type == "application/pdf"
        assert uploaded.validate(ADMISSION_DOCUMENT_RULE) == []

    @pytest.mark.asyncio
    async def test_oversized_file_is_read_only_past_the_limit(self):
        uploaded = await read_upload(
            form_file("ktp.pdf", "application/pdf", 20 * MB), ADMISSION_DOCUMENT_RULE
        )

        assert uploaded.size == ADMISSION_DOCUMENT_RULE.max_size + 1
        assert uploaded.validate(ADMISSION_DOCUMENT_RULE) == [
            "File ktp.pdf terlalu besar. Maksimal 5 MB"
        ]

    @pytest.mark.asyncio
    async def test_empty_field_counts_as_missing(self):
        assert await read_upload(None, ADMISSION_DOCUMENT_RULE) is None
        assert await read_upload(form_file("", "", 0), ADMISSION_DOCUMENT_RULE) is None

    @pytest.mark.asyncio
    async def test_required_file_missing(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            await require_upload(None, NEWS_IMAGE_RULE, field="image")

        assert "image" in exc_info.value.errors


class TestStoreUpload:
    @pytest.mark.asyncio
    async def test_stores_and_returns_public_url(self, storage, make_upload):
        url = await store_upload(
            storage,
            StorageBuckets.NEWS_IMAGES,
            "news/1.png",
            make_upload("a.png", "image/png"),
            NEWS_IMAGE_RULE,
        )

        assert url == "http://testserver/media/news-images/news/1.png"
        assert await storage.exists(StorageBuckets.NEWS_IMAGES, "news/1.png")

    @pytest.mark.asyncio
    async def test_invalid_upload_is_not_stored(self, storage, make_upload):
        with pytest.raises(ValidationFailedError) as exc_info:
            await store_upload(
                storage,
                StorageBuckets.NEWS_IMAGES,
                "news/2.pdf",
                make_upload("a.pdf", "application/pdf"),
                NEWS_IMAGE_RULE,
            )

        assert "file" in exc_info.value.errors
        assert await storage.list_paths(StorageBuckets.NEWS_IMAGES) == []

    @pytest.mark.asyncio
    async def test_markup_labelled_as_image_is_not_stored(self, storage, make_upload):
        with pytest.raises(ValidationFailedError):
            await store_upload(
                storage,
                StorageBuckets.NEWS_IMAGES,
                "news/5.html",
                make_upload("pwn.html", "image/png"),
                NEWS_IMAGE_RULE,
            )

        assert await storage.list_paths(StorageBuckets.NEWS_IMAGES) == []


class TestDiscardObject:
    @pytest.mark.asyncio
    async def test_removes_own_object(self, storage):
        await storage.upload(StorageBuckets.NEWS_IMAGES, "news/3.png", b"x")

        await discard_object(
            storage,
            StorageBuckets.NEWS_IMAGES,
            "http://testserver/media/news-images/news/3.png",
        )

        assert await storage.list_paths(StorageBuckets.NEWS_IMAGES) == []

    @pytest.mark.asyncio
    async def test_ignores_foreign_url(self, storage):
        await storage.upload(StorageBuckets.NEWS_IMAGES, "news/4.png", b"x")

        await discard_object(storage, StorageBuckets.NEWS_IMAGES, "https://cdn.example.com/4.png")

        assert await storage.list_paths(StorageBuckets.NEWS_IMAGES) == ["news/4.png"]
