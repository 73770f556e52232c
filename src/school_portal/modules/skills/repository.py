"""
Skill Program Repository

Database operations for study programs.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SkillProgram


async def create(db: AsyncSession, fields: dict) -> SkillProgram:
    skill = SkillProgram(**fields)
    db.add(skill)
    await db.commit()
    await db.refresh(skill)
    return skill


async def get_by_id(db: AsyncSession, skill_id: UUID) -> SkillProgram | None:
    return await db.get(SkillProgram, skill_id)


async def list_active(db: AsyncSession) -> list[SkillProgram]:
    """Active programs ordered by name (public site and PPDB form)."""
    result = await db.execute(
        select(SkillProgram).where(SkillProgram.is_active.is_(True)).order_by(SkillProgram.name)
    )
    return list(result.scalars().all())


async def list_all(
    db: AsyncSession,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 10,
) -> tuple[list[SkillProgram], int]:
    """All programs ordered by name, optionally filtered by a name search."""
    query = select(SkillProgram)
    if search:
        query = query.where(SkillProgram.name.ilike(f"%{search}%"))

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar() or 0
    result = await db.execute(query.order_by(SkillProgram.name).offset(skip).limit(limit))
    return list(result.scalars().all()), total


async def count_active(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(SkillProgram).where(SkillProgram.is_active.is_(True))
    )
    return result.scalar() or 0


async def update(db: AsyncSession, skill: SkillProgram, fields: dict) -> SkillProgram:
    for key, value in fields.items():
        setattr(skill, key, value)
    await db.commit()
    await db.refresh(skill)
    return skill


async def delete_by_id(db: AsyncSession, skill_id: UUID) -> None:
    await db.execute(delete(SkillProgram).where(SkillProgram.id == skill_id))
    await db.commit()
