"""School profile routes (public read, admin edit)."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.core.storage import LocalObjectStorage, get_storage
from school_portal.core.validators import PROFILE_IMAGE_RULE
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.profile import service
from school_portal.modules.profile.schemas import (
    ProfileImageKind,
    ProfileImageResponse,
    SchoolProfileResponse,
    SchoolProfileUpdate,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.uploads import require_upload

router = APIRouter()
admin_router = APIRouter()

manage_profile = require_permission(Permission.MANAGE_PROFILE)


@router.get("", response_model=SchoolProfileResponse)
async def get_public_profile(db: AsyncSession = Depends(get_db)) -> SchoolProfileResponse:
    try:
        profile = await service.get_public_profile(db)
    except PortalServiceError as e:
        raise_http_error(e)
    return SchoolProfileResponse.model_validate(profile)


@admin_router.get("", response_model=SchoolProfileResponse | None)
async def get_admin_profile(
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_profile),
) -> SchoolProfileResponse | None:
    """Profile for the edit form; `null` before the first save."""
    profile = await service.get_profile(db)
    return SchoolProfileResponse.model_validate(profile) if profile else None


@admin_router.put("", response_model=SchoolProfileResponse)
async def save_profile(
    data: SchoolProfileUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_profile),
) -> SchoolProfileResponse:
    profile = await service.save_profile(db, data)
    return SchoolProfileResponse.model_validate(profile)


@admin_router.post("/images/{kind}", response_model=ProfileImageResponse)
async def upload_profile_image(
    kind: ProfileImageKind,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    _admin: AdminUser = Depends(manage_profile),
) -> ProfileImageResponse:
    try:
        upload = await require_upload(file, PROFILE_IMAGE_RULE)
        url = await service.upload_profile_image(db, storage, kind, upload)
    except PortalServiceError as e:
        raise_http_error(e)
    return ProfileImageResponse(kind=kind, url=url)
