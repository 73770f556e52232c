"""
School Profile Repository

The profile is a singleton: reads take the first row, writes upsert it.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SchoolProfile


async def get(db: AsyncSession) -> SchoolProfile | None:
    """Get the profile row, if it has been created."""
    result = await db.execute(select(SchoolProfile).order_by(SchoolProfile.created_at).limit(1))
    return result.scalar_one_or_none()


async def upsert(db: AsyncSession, fields: dict) -> SchoolProfile:
    """Create the profile row when missing, otherwise update it in place."""
    profile = await get(db)
    if profile is None:
        profile = SchoolProfile(**fields)
        db.add(profile)
    else:
        for key, value in fields.items():
            setattr(profile, key, value)

    await db.commit()
    await db.refresh(profile)
    return profile


async def set_image_url(db: AsyncSession, profile: SchoolProfile, column: str, url: str) -> None:
    setattr(profile, column, url)
    await db.commit()
    await db.refresh(profile)
