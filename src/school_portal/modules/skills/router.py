"""Skill program routes (public catalogue, admin management)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.core.storage import LocalObjectStorage, get_storage
from school_portal.core.validators import SKILL_IMAGE_RULE
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.schemas import (
    DEFAULT_LIMIT,
    ListResponse,
    ToggleRequest,
    clamp_pagination,
)
from school_portal.modules.shared.uploads import require_upload
from school_portal.modules.skills import service
from school_portal.modules.skills.schemas import (
    SkillImageResponse,
    SkillProgramCreate,
    SkillProgramResponse,
    SkillProgramUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()

manage_skills = require_permission(Permission.MANAGE_SKILLS)


@router.get("", response_model=list[SkillProgramResponse])
async def list_public_skills(db: AsyncSession = Depends(get_db)) -> list[SkillProgramResponse]:
    """Active programs ordered by name."""
    skills = await service.list_active_skills(db)
    return [SkillProgramResponse.model_validate(s) for s in skills]


@router.get("/{skill_id}", response_model=SkillProgramResponse)
async def get_public_skill(
    skill_id: UUID, db: AsyncSession = Depends(get_db)
) -> SkillProgramResponse:
    try:
        skill = await service.get_active_skill(db, skill_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return SkillProgramResponse.model_validate(skill)


@admin_router.get("", response_model=ListResponse[SkillProgramResponse])
async def list_skills(
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_skills),
) -> ListResponse[SkillProgramResponse]:
    skip, limit = clamp_pagination(skip, limit)
    skills, total = await service.list_skills(db, search=search, skip=skip, limit=limit)
    return ListResponse[SkillProgramResponse](
        items=[SkillProgramResponse.model_validate(s) for s in skills],
        total=total,
        skip=skip,
        limit=limit,
    )


@admin_router.post("/images", response_model=SkillImageResponse)
async def upload_skill_image(
    file: UploadFile = File(...),
    storage: LocalObjectStorage = Depends(get_storage),
    _admin: AdminUser = Depends(manage_skills),
) -> SkillImageResponse:
    try:
        upload = await require_upload(file, SKILL_IMAGE_RULE)
        url = await service.upload_skill_image(storage, upload)
    except PortalServiceError as e:
        raise_http_error(e)
    return SkillImageResponse(url=url)


@admin_router.get("/{skill_id}", response_model=SkillProgramResponse)
async def get_skill(
    skill_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_skills),
) -> SkillProgramResponse:
    try:
        skill = await service.get_skill(db, skill_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return SkillProgramResponse.model_validate(skill)


@admin_router.post("", response_model=SkillProgramResponse, status_code=status.HTTP_201_CREATED)
async def create_skill(
    data: SkillProgramCreate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_skills),
) -> SkillProgramResponse:
    skill = await service.create_skill(db, data)
    return SkillProgramResponse.model_validate(skill)


@admin_router.patch("/{skill_id}", response_model=SkillProgramResponse)
async def update_skill(
    skill_id: UUID,
    data: SkillProgramUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_skills),
) -> SkillProgramResponse:
    try:
        skill = await service.update_skill(db, skill_id, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return SkillProgramResponse.model_validate(skill)


@admin_router.patch("/{skill_id}/status", response_model=SkillProgramResponse)
async def set_skill_status(
    skill_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_skills),
) -> SkillProgramResponse:
    try:
        skill = await service.set_skill_active(db, skill_id, body.value)
    except PortalServiceError as e:
        raise_http_error(e)
    return SkillProgramResponse.model_validate(skill)


@admin_router.delete("/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_skill(
    skill_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_skills),
) -> None:
    try:
        await service.delete_skill(db, skill_id)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} deleted skill program {skill_id}")
