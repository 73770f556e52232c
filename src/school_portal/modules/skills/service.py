"""
Skill Program Service

Public listing and admin management of study programs.
"""

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.storage import LocalObjectStorage, StorageBuckets
from school_portal.core.validators import SKILL_IMAGE_RULE
from school_portal.modules.shared import ConflictError, NotFoundError
from school_portal.modules.shared.uploads import UploadedFile, store_upload, timestamp_ms
from school_portal.modules.skills import repository
from school_portal.modules.skills.models import SkillProgram
from school_portal.modules.skills.schemas import SkillProgramCreate, SkillProgramUpdate

logger = logging.getLogger(__name__)


async def list_active_skills(db: AsyncSession) -> list[SkillProgram]:
    return await repository.list_active(db)


async def get_active_skill(db: AsyncSession, skill_id: UUID) -> SkillProgram:
    """
    Raises:
        NotFoundError: Unknown or inactive program
    """
    skill = await repository.get_by_id(db, skill_id)
    if skill is None or not skill.is_active:
        raise NotFoundError("Skill program", skill_id)
    return skill


async def get_skill(db: AsyncSession, skill_id: UUID) -> SkillProgram:
    skill = await repository.get_by_id(db, skill_id)
    if skill is None:
        raise NotFoundError("Skill program", skill_id)
    return skill


async def list_skills(
    db: AsyncSession, *, search: str | None = None, skip: int = 0, limit: int = 10
) -> tuple[list[SkillProgram], int]:
    return await repository.list_all(db, search=search, skip=skip, limit=limit)


async def create_skill(db: AsyncSession, data: SkillProgramCreate) -> SkillProgram:
    skill = await repository.create(db, data.model_dump())
    logger.info(f"Created skill program {skill.id}: {skill.name}")
    return skill


async def update_skill(db: AsyncSession, skill_id: UUID, data: SkillProgramUpdate) -> SkillProgram:
    skill = await get_skill(db, skill_id)
    changes = data.model_dump(exclude_unset=True)
    # Array and flag columns are NOT NULL, an explicit null means "leave unchanged"
    nullable = {"description", "image_url"}
    changes = {k: v for k, v in changes.items() if v is not None or k in nullable}
    return await repository.update(db, skill, changes)


async def set_skill_active(db: AsyncSession, skill_id: UUID, is_active: bool) -> SkillProgram:
    skill = await get_skill(db, skill_id)
    updated = await repository.update(db, skill, {"is_active": is_active})
    logger.info(f"Skill program {skill_id} active={is_active}")
    return updated


async def delete_skill(db: AsyncSession, skill_id: UUID) -> None:
    """
    Delete a program.

    Raises:
        NotFoundError: Unknown program
        ConflictError: Registrations still reference the program
    """
    await get_skill(db, skill_id)
    try:
        await repository.delete_by_id(db, skill_id)
    except IntegrityError as e:
        await db.rollback()
        raise ConflictError(
            "Kompetensi keahlian masih dipilih oleh pendaftar. Nonaktifkan saja.",
            error_code="SKILL_IN_USE",
        ) from e
    logger.info(f"Deleted skill program {skill_id}")


async def upload_skill_image(storage: LocalObjectStorage, upload: UploadedFile) -> str:
    """Store a program image under `skills/<ms>.<ext>` and return its public URL."""
    path = f"skills/{timestamp_ms()}{upload.extension}"
    return await store_upload(storage, StorageBuckets.SCHOOL_IMAGES, path, upload, SKILL_IMAGE_RULE)
