"""
News Repository

Database operations for news items.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import NewsCategory, NewsItem


async def slug_exists(db: AsyncSession, slug: str, exclude_id: UUID | None = None) -> bool:
    query = select(NewsItem.id).where(NewsItem.slug == slug)
    if exclude_id is not None:
        query = query.where(NewsItem.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


async def create(db: AsyncSession, fields: dict) -> NewsItem:
    item = NewsItem(**fields)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def get_by_id(db: AsyncSession, news_id: UUID) -> NewsItem | None:
    return await db.get(NewsItem, news_id)


async def get_published_by_slug(db: AsyncSession, slug: str) -> NewsItem | None:
    result = await db.execute(
        select(NewsItem).where(NewsItem.slug == slug, NewsItem.is_published.is_(True))
    )
    return result.scalar_one_or_none()


async def list_published(
    db: AsyncSession, *, limit: int, featured_only: bool = False
) -> list[NewsItem]:
    """Published items, most recently published first."""
    query = select(NewsItem).where(NewsItem.is_published.is_(True))
    if featured_only:
        query = query.where(NewsItem.is_featured.is_(True))
    result = await db.execute(query.order_by(NewsItem.published_at.desc()).limit(limit))
    return list(result.scalars().all())


async def list_all(
    db: AsyncSession,
    *,
    is_published: bool | None = None,
    category: NewsCategory | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[NewsItem], int]:
    """All items for the admin table, newest first."""
    query = select(NewsItem)
    if is_published is not None:
        query = query.where(NewsItem.is_published.is_(is_published))
    if category is not None:
        query = query.where(NewsItem.category == category)
    if search:
        query = query.where(NewsItem.title.ilike(f"%{search}%"))

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar() or 0
    result = await db.execute(query.order_by(NewsItem.created_at.desc()).offset(skip).limit(limit))
    return list(result.scalars().all()), total


async def count_all(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(NewsItem))
    return result.scalar() or 0


async def update(db: AsyncSession, item: NewsItem, fields: dict) -> NewsItem:
    for key, value in fields.items():
        setattr(item, key, value)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_by_id(db: AsyncSession, news_id: UUID) -> None:
    await db.execute(delete(NewsItem).where(NewsItem.id == news_id))
    await db.commit()
