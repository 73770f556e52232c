"""
Gallery Repository

Database operations for gallery items.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import GalleryCategory, GalleryItem


async def create(db: AsyncSession, fields: dict) -> GalleryItem:
    item = GalleryItem(**fields)
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def get_by_id(db: AsyncSession, item_id: UUID) -> GalleryItem | None:
    return await db.get(GalleryItem, item_id)


async def list_items(
    db: AsyncSession,
    *,
    category: GalleryCategory | None = None,
    featured_only: bool = False,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> tuple[list[GalleryItem], int]:
    """Items newest first, with the total matching the filters."""
    query = select(GalleryItem)
    if category is not None:
        query = query.where(GalleryItem.category == category)
    if featured_only:
        query = query.where(GalleryItem.is_featured.is_(True))
    if search:
        query = query.where(GalleryItem.title.ilike(f"%{search}%"))

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar() or 0

    query = query.order_by(GalleryItem.created_at.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def count_all(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(GalleryItem))
    return result.scalar() or 0


async def update(db: AsyncSession, item: GalleryItem, fields: dict) -> GalleryItem:
    for key, value in fields.items():
        setattr(item, key, value)
    await db.commit()
    await db.refresh(item)
    return item


async def delete_by_id(db: AsyncSession, item_id: UUID) -> None:
    await db.execute(delete(GalleryItem).where(GalleryItem.id == item_id))
    await db.commit()
