"""
News Service

Publishing workflow for news items:

1. Slugs come from the title and are made unique by probing `slug`,
   `slug-1`, `slug-2`, ... The unique index on the column is the final
   arbiter: a write that loses a race to the same slug is retried with a
   fresh probe.
2. `published_at` is stamped when an item is published.
3. Featured images live in the `news-images` bucket and are removed with
   the item.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.storage import LocalObjectStorage, StorageBuckets
from school_portal.core.validators import NEWS_IMAGE_RULE
from school_portal.modules.news import repository
from school_portal.modules.news.helpers import generate_slug, numbered_slug
from school_portal.modules.news.models import NewsCategory, NewsItem
from school_portal.modules.news.schemas import NewsCreate, NewsUpdate
from school_portal.modules.shared import ConflictError, NotFoundError
from school_portal.modules.shared.uploads import (
    UploadedFile,
    discard_object,
    store_upload,
    timestamp_ms,
)

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 3
FEATURED_LIMIT = 3

T = TypeVar("T")


async def create_unique_slug(
    db: AsyncSession, title: str, exclude_id: UUID | None = None
) -> str:
    """
    First free slug for a title.

    Args:
        db: Database session
        title: News title
        exclude_id: Item being edited; its own slug does not count as taken

    Returns:
        `base`, or `base-N` for the smallest N >= 1 not yet in use
    """
    base = generate_slug(title)
    n = 0
    while await repository.slug_exists(db, numbered_slug(base, n), exclude_id):
        n += 1
    return numbered_slug(base, n)


async def _with_unique_slug(
    db: AsyncSession,
    title: str,
    exclude_id: UUID | None,
    write: Callable[[str], Awaitable[T]],
) -> T:
    for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
        slug = await create_unique_slug(db, title, exclude_id)
        try:
            return await write(slug)
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Slug '{slug}' taken concurrently (attempt {attempt})")

    raise ConflictError(
        "Slug berita sedang dipakai. Silakan coba lagi.", error_code="SLUG_CONFLICT"
    )


async def list_published_news(db: AsyncSession, limit: int = 10) -> list[NewsItem]:
    return await repository.list_published(db, limit=limit)


async def list_featured_news(db: AsyncSession) -> list[NewsItem]:
    return await repository.list_published(db, limit=FEATURED_LIMIT, featured_only=True)


async def get_published_news(db: AsyncSession, slug: str) -> NewsItem:
    item = await repository.get_published_by_slug(db, slug)
    if item is None:
        raise NotFoundError("News", slug)
    return item


async def get_news(db: AsyncSession, news_id: UUID) -> NewsItem:
    item = await repository.get_by_id(db, news_id)
    if item is None:
        raise NotFoundError("News", news_id)
    return item


async def list_news(
    db: AsyncSession,
    *,
    is_published: bool | None = None,
    category: NewsCategory | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[NewsItem], int]:
    return await repository.list_all(
        db,
        is_published=is_published,
        category=category,
        search=search,
        skip=skip,
        limit=limit,
    )


async def create_news(db: AsyncSession, data: NewsCreate) -> NewsItem:
    """Create an item with a unique slug; published items get `published_at` now."""
    fields = data.model_dump()
    fields["published_at"] = datetime.now(UTC) if data.is_published else None

    async def write(slug: str) -> NewsItem:
        return await repository.create(db, {**fields, "slug": slug})

    item = await _with_unique_slug(db, data.title, None, write)
    logger.info(f"Created news {item.id} with slug '{item.slug}'")
    return item


async def update_news(db: AsyncSession, news_id: UUID, data: NewsUpdate) -> NewsItem:
    """
    Apply an edit.

    The slug is regenerated only when the title changes. Publishing an item
    that was never published stamps `published_at`.
    """
    item = await get_news(db, news_id)
    changes = data.model_dump(exclude_unset=True)
    for key in ("title", "content", "category", "is_published", "is_featured"):
        if changes.get(key, "") is None:
            del changes[key]

    if changes.get("is_published") and item.published_at is None:
        changes["published_at"] = datetime.now(UTC)

    new_title = changes.get("title")
    if new_title is None or new_title == item.title:
        return await repository.update(db, item, changes)

    async def write(slug: str) -> NewsItem:
        current = await get_news(db, news_id)
        return await repository.update(db, current, {**changes, "slug": slug})

    updated = await _with_unique_slug(db, new_title, news_id, write)
    logger.info(f"News {news_id} retitled, slug now '{updated.slug}'")
    return updated


async def set_news_published(db: AsyncSession, news_id: UUID, is_published: bool) -> NewsItem:
    item = await get_news(db, news_id)
    changes: dict = {"is_published": is_published}
    if is_published:
        changes["published_at"] = datetime.now(UTC)
    updated = await repository.update(db, item, changes)
    logger.info(f"News {news_id} published={is_published}")
    return updated


async def set_news_featured(db: AsyncSession, news_id: UUID, is_featured: bool) -> NewsItem:
    item = await get_news(db, news_id)
    return await repository.update(db, item, {"is_featured": is_featured})


async def delete_news(db: AsyncSession, storage: LocalObjectStorage, news_id: UUID) -> None:
    """Delete an item and its featured image when the image is stored by us."""
    item = await get_news(db, news_id)
    image_url = item.featured_image_url

    await repository.delete_by_id(db, news_id)
    await discard_object(storage, StorageBuckets.NEWS_IMAGES, image_url)
    logger.info(f"Deleted news {news_id}")


async def upload_news_image(storage: LocalObjectStorage, upload: UploadedFile) -> str:
    """Store a featured image under `news/<ms>.<ext>` and return its public URL."""
    path = f"news/{timestamp_ms()}{upload.extension}"
    return await store_upload(storage, StorageBuckets.NEWS_IMAGES, path, upload, NEWS_IMAGE_RULE)
