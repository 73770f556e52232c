"""Gallery routes (public listing and admin management)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.core.storage import LocalObjectStorage, get_storage
from school_portal.core.validators import GALLERY_MEDIA_RULE
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.gallery import service
from school_portal.modules.gallery.models import GalleryCategory
from school_portal.modules.gallery.schemas import (
    GalleryItemFields,
    GalleryItemResponse,
    GalleryItemUpdate,
)
from school_portal.modules.shared import (
    PortalServiceError,
    form_validation_error,
    raise_http_error,
)
from school_portal.modules.shared.schemas import (
    DEFAULT_LIMIT,
    ListResponse,
    ToggleRequest,
    clamp_pagination,
)
from school_portal.modules.shared.uploads import read_upload, require_upload

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()

manage_gallery = require_permission(Permission.MANAGE_GALLERY)


@router.get("", response_model=list[GalleryItemResponse])
async def list_public_gallery(
    category: GalleryCategory | None = Query(None),
    featured: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> list[GalleryItemResponse]:
    items, _total = await service.list_gallery(db, category=category, featured_only=featured)
    return [GalleryItemResponse.model_validate(i) for i in items]


@admin_router.get("", response_model=ListResponse[GalleryItemResponse])
async def list_gallery(
    category: GalleryCategory | None = Query(None),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_gallery),
) -> ListResponse[GalleryItemResponse]:
    skip, limit = clamp_pagination(skip, limit)
    items, total = await service.list_gallery(
        db, category=category, search=search, skip=skip, limit=limit
    )
    return ListResponse[GalleryItemResponse](
        items=[GalleryItemResponse.model_validate(i) for i in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@admin_router.get("/{item_id}", response_model=GalleryItemResponse)
async def get_gallery_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_gallery),
) -> GalleryItemResponse:
    try:
        item = await service.get_gallery_item(db, item_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return GalleryItemResponse.model_validate(item)


@admin_router.post("", response_model=GalleryItemResponse, status_code=status.HTTP_201_CREATED)
async def create_gallery_item(
    title: str = Form(...),
    description: str | None = Form(None),
    category: GalleryCategory = Form(GalleryCategory.ACTIVITY),
    is_featured: bool = Form(False),
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    _admin: AdminUser = Depends(manage_gallery),
) -> GalleryItemResponse:
    """Upload a photo or video (max 10 MB) with its metadata."""
    try:
        try:
            fields = GalleryItemFields(
                title=title.strip(),
                description=description,
                category=category,
                is_featured=is_featured,
            )
        except ValidationError as e:
            raise form_validation_error(e, "Data galeri tidak valid") from e
        upload = await require_upload(file, GALLERY_MEDIA_RULE)
        item = await service.create_gallery_item(db, storage, fields, upload)
    except PortalServiceError as e:
        raise_http_error(e)
    return GalleryItemResponse.model_validate(item)


@admin_router.put("/{item_id}", response_model=GalleryItemResponse)
async def update_gallery_item(
    item_id: UUID,
    title: str | None = Form(None),
    description: str | None = Form(None),
    category: GalleryCategory | None = Form(None),
    is_featured: bool | None = Form(None),
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    _admin: AdminUser = Depends(manage_gallery),
) -> GalleryItemResponse:
    """Update metadata; a new file replaces the stored one."""
    submitted = {
        "title": title.strip() if title is not None else None,
        "description": description,
        "category": category,
        "is_featured": is_featured,
    }
    try:
        try:
            data = GalleryItemUpdate(**{k: v for k, v in submitted.items() if v is not None})
        except ValidationError as e:
            raise form_validation_error(e, "Data galeri tidak valid") from e
        upload = await read_upload(file, GALLERY_MEDIA_RULE)
        item = await service.update_gallery_item(db, storage, item_id, data, upload)
    except PortalServiceError as e:
        raise_http_error(e)
    return GalleryItemResponse.model_validate(item)


@admin_router.patch("/{item_id}/featured", response_model=GalleryItemResponse)
async def set_gallery_featured(
    item_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_gallery),
) -> GalleryItemResponse:
    try:
        item = await service.set_gallery_featured(db, item_id, body.value)
    except PortalServiceError as e:
        raise_http_error(e)
    return GalleryItemResponse.model_validate(item)


@admin_router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gallery_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    admin: AdminUser = Depends(manage_gallery),
) -> None:
    try:
        await service.delete_gallery_item(db, storage, item_id)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} deleted gallery item {item_id}")
