"""News routes (public site and admin)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission, has_permission
from school_portal.core.storage import LocalObjectStorage, get_storage
from school_portal.core.validators import NEWS_IMAGE_RULE
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.news import service
from school_portal.modules.news.models import NewsCategory
from school_portal.modules.news.schemas import (
    NewsCreate,
    NewsImageResponse,
    NewsResponse,
    NewsUpdate,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.schemas import (
    DEFAULT_LIMIT,
    ListResponse,
    ToggleRequest,
    clamp_pagination,
)
from school_portal.modules.shared.uploads import require_upload

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()

manage_news = require_permission(Permission.MANAGE_NEWS)
publish_news = require_permission(Permission.PUBLISH_NEWS)


def _ensure_can_publish(admin: AdminUser, is_published: bool | None) -> None:
    if is_published and not has_permission(admin.role, Permission.PUBLISH_NEWS):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "PERMISSION_DENIED",
                "message": "Anda tidak memiliki akses untuk mempublikasikan berita.",
            },
        )


# ============================================
# Public
# ============================================


@router.get("", response_model=list[NewsResponse])
async def list_published_news(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> list[NewsResponse]:
    items = await service.list_published_news(db, limit=limit)
    return [NewsResponse.model_validate(i) for i in items]


@router.get("/featured", response_model=list[NewsResponse])
async def list_featured_news(db: AsyncSession = Depends(get_db)) -> list[NewsResponse]:
    items = await service.list_featured_news(db)
    return [NewsResponse.model_validate(i) for i in items]


@router.get("/{slug}", response_model=NewsResponse)
async def get_news_by_slug(slug: str, db: AsyncSession = Depends(get_db)) -> NewsResponse:
    try:
        item = await service.get_published_news(db, slug)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsResponse.model_validate(item)


# ============================================
# Admin
# ============================================


@admin_router.get("", response_model=ListResponse[NewsResponse])
async def list_news(
    is_published: bool | None = Query(None),
    category: NewsCategory | None = Query(None),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_news),
) -> ListResponse[NewsResponse]:
    skip, limit = clamp_pagination(skip, limit)
    items, total = await service.list_news(
        db,
        is_published=is_published,
        category=category,
        search=search,
        skip=skip,
        limit=limit,
    )
    return ListResponse[NewsResponse](
        items=[NewsResponse.model_validate(i) for i in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@admin_router.post("/images", response_model=NewsImageResponse)
async def upload_news_image(
    file: UploadFile = File(...),
    storage: LocalObjectStorage = Depends(get_storage),
    _admin: AdminUser = Depends(manage_news),
) -> NewsImageResponse:
    try:
        upload = await require_upload(file, NEWS_IMAGE_RULE)
        url = await service.upload_news_image(storage, upload)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsImageResponse(url=url)


@admin_router.get("/{news_id}", response_model=NewsResponse)
async def get_news(
    news_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_news),
) -> NewsResponse:
    try:
        item = await service.get_news(db, news_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsResponse.model_validate(item)


@admin_router.post("", response_model=NewsResponse, status_code=status.HTTP_201_CREATED)
async def create_news(
    data: NewsCreate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_news),
) -> NewsResponse:
    _ensure_can_publish(admin, data.is_published)
    try:
        item = await service.create_news(db, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsResponse.model_validate(item)


@admin_router.patch("/{news_id}", response_model=NewsResponse)
async def update_news(
    news_id: UUID,
    data: NewsUpdate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_news),
) -> NewsResponse:
    _ensure_can_publish(admin, data.is_published)
    try:
        item = await service.update_news(db, news_id, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsResponse.model_validate(item)


@admin_router.patch("/{news_id}/publish", response_model=NewsResponse)
async def set_news_published(
    news_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(publish_news),
) -> NewsResponse:
    try:
        item = await service.set_news_published(db, news_id, body.value)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsResponse.model_validate(item)


@admin_router.patch("/{news_id}/featured", response_model=NewsResponse)
async def set_news_featured(
    news_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_news),
) -> NewsResponse:
    try:
        item = await service.set_news_featured(db, news_id, body.value)
    except PortalServiceError as e:
        raise_http_error(e)
    return NewsResponse.model_validate(item)


@admin_router.delete("/{news_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_news(
    news_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    admin: AdminUser = Depends(manage_news),
) -> None:
    try:
        await service.delete_news(db, storage, news_id)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} deleted news {news_id}")
