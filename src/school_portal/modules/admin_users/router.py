"""
Admin Users Router

Back-office account management. Super admin only (MANAGE_USERS).
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.modules.admin_users import service
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admin_users.schemas import (
    AdminUserCreate,
    AdminUserResponse,
    AdminUserUpdate,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.schemas import ListResponse, ToggleRequest, clamp_pagination

logger = logging.getLogger(__name__)

router = APIRouter()

manage_users = require_permission(Permission.MANAGE_USERS)


@router.get("", response_model=ListResponse[AdminUserResponse], summary="List Admin Users")
async def list_admin_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_users),
) -> ListResponse[AdminUserResponse]:
    skip, limit = clamp_pagination(skip, limit)
    admins, total = await service.list_admin_users(db, skip=skip, limit=limit)
    return ListResponse[AdminUserResponse](
        items=[AdminUserResponse.model_validate(a) for a in admins],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post(
    "",
    response_model=AdminUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Admin User",
)
async def create_admin_user(
    data: AdminUserCreate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_users),
) -> AdminUserResponse:
    try:
        created = await service.create_admin_user(db, data)
    except PortalServiceError as e:
        raise_http_error(e)

    logger.info(f"Admin {admin.id} created admin user {created.id}")
    return AdminUserResponse.model_validate(created)


@router.patch("/{admin_id}", response_model=AdminUserResponse, summary="Update Admin User")
async def update_admin_user(
    admin_id: UUID,
    data: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_users),
) -> AdminUserResponse:
    try:
        updated = await service.update_admin_user(db, admin_id, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return AdminUserResponse.model_validate(updated)


@router.patch(
    "/{admin_id}/status", response_model=AdminUserResponse, summary="Activate/Deactivate Admin"
)
async def set_admin_status(
    admin_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_users),
) -> AdminUserResponse:
    try:
        updated = await service.set_admin_active(
            db, admin_id, body.value, acting_admin_id=admin.id
        )
    except PortalServiceError as e:
        raise_http_error(e)
    return AdminUserResponse.model_validate(updated)


@router.delete("/{admin_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Admin User")
async def delete_admin_user(
    admin_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_users),
) -> None:
    try:
        await service.delete_admin_user(db, admin_id, acting_admin_id=admin.id)
    except PortalServiceError as e:
        raise_http_error(e)
