"""Contact routes (public list, admin management)."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.contacts import service
from school_portal.modules.contacts.schemas import (
    ContactCreate,
    ContactOrderRequest,
    ContactResponse,
    ContactUpdate,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.schemas import ToggleRequest

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()

manage_contacts = require_permission(Permission.MANAGE_CONTACTS)


@router.get("", response_model=list[ContactResponse])
async def list_public_contacts(db: AsyncSession = Depends(get_db)) -> list[ContactResponse]:
    contacts = await service.list_contacts(db)
    return [ContactResponse.model_validate(c) for c in contacts]


@admin_router.get("", response_model=list[ContactResponse])
async def list_contacts(
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_contacts),
) -> list[ContactResponse]:
    contacts = await service.list_contacts(db)
    return [ContactResponse.model_validate(c) for c in contacts]


@admin_router.put("/order", response_model=list[ContactResponse])
async def reorder_contacts(
    body: ContactOrderRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_contacts),
) -> list[ContactResponse]:
    try:
        contacts = await service.reorder_contacts(db, body.ids)
    except PortalServiceError as e:
        raise_http_error(e)
    return [ContactResponse.model_validate(c) for c in contacts]


@admin_router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_contacts),
) -> ContactResponse:
    try:
        contact = await service.get_contact(db, contact_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return ContactResponse.model_validate(contact)


@admin_router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    data: ContactCreate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_contacts),
) -> ContactResponse:
    try:
        contact = await service.create_contact(db, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return ContactResponse.model_validate(contact)


@admin_router.patch("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: UUID,
    data: ContactUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_contacts),
) -> ContactResponse:
    try:
        contact = await service.update_contact(db, contact_id, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return ContactResponse.model_validate(contact)


@admin_router.patch("/{contact_id}/primary", response_model=ContactResponse)
async def set_contact_primary(
    contact_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_contacts),
) -> ContactResponse:
    try:
        contact = await service.set_contact_primary(db, contact_id, body.value)
    except PortalServiceError as e:
        raise_http_error(e)
    return ContactResponse.model_validate(contact)


@admin_router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_contacts),
) -> None:
    try:
        await service.delete_contact(db, contact_id)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} deleted contact {contact_id}")
