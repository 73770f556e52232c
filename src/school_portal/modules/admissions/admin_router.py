"""
Admission Admin Router

Back-office management of admission periods and registrations.
Reads need VIEW_PPDB, writes need MANAGE_PPDB.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.core.rate_limit import enforce_admin_rate_limit
from school_portal.core.storage import LocalObjectStorage, get_storage
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admissions import service
from school_portal.modules.admissions.models import AdmissionRegistration, RegistrationStatus
from school_portal.modules.admissions.schemas import (
    AdmissionPeriodCreate,
    AdmissionPeriodResponse,
    AdmissionPeriodUpdate,
    RegistrationCounts,
    RegistrationDetail,
    RegistrationListItem,
    RegistrationStatusUpdate,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.schemas import (
    DEFAULT_LIMIT,
    ListResponse,
    ToggleRequest,
    clamp_pagination,
)

logger = logging.getLogger(__name__)

router = APIRouter()

view_ppdb = require_permission(Permission.VIEW_PPDB)
manage_ppdb = require_permission(Permission.MANAGE_PPDB)


def to_list_item(registration: AdmissionRegistration) -> RegistrationListItem:
    item = RegistrationListItem.model_validate(registration)
    item.skill_name = registration.skill.name if registration.skill else None
    item.academic_year = registration.period.academic_year if registration.period else None
    return item


def _to_detail(
    registration: AdmissionRegistration, storage: LocalObjectStorage
) -> RegistrationDetail:
    detail = RegistrationDetail.model_validate(registration)
    detail.skill_name = registration.skill.name if registration.skill else None
    detail.academic_year = registration.period.academic_year if registration.period else None
    detail.document_urls = service.document_urls(storage, registration)
    return detail


# ============================================
# Periods
# ============================================


@router.get("/periods", response_model=list[AdmissionPeriodResponse])
async def list_periods(
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_ppdb),
) -> list[AdmissionPeriodResponse]:
    periods = await service.list_periods(db)
    return [AdmissionPeriodResponse.model_validate(p) for p in periods]


@router.get("/periods/{period_id}", response_model=AdmissionPeriodResponse)
async def get_period(
    period_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_ppdb),
) -> AdmissionPeriodResponse:
    try:
        period = await service.get_period(db, period_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return AdmissionPeriodResponse.model_validate(period)


@router.post(
    "/periods", response_model=AdmissionPeriodResponse, status_code=status.HTTP_201_CREATED
)
async def create_period(
    data: AdmissionPeriodCreate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_ppdb),
) -> AdmissionPeriodResponse:
    try:
        period = await service.create_period(db, data)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} created admission period {period.id}")
    return AdmissionPeriodResponse.model_validate(period)


@router.patch("/periods/{period_id}", response_model=AdmissionPeriodResponse)
async def update_period(
    period_id: UUID,
    data: AdmissionPeriodUpdate,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_ppdb),
) -> AdmissionPeriodResponse:
    try:
        period = await service.update_period(db, period_id, data)
    except PortalServiceError as e:
        raise_http_error(e)
    return AdmissionPeriodResponse.model_validate(period)


@router.patch("/periods/{period_id}/active", response_model=AdmissionPeriodResponse)
async def set_period_active(
    period_id: UUID,
    body: ToggleRequest,
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(manage_ppdb),
) -> AdmissionPeriodResponse:
    """Activate a period (every other period is deactivated) or deactivate it."""
    try:
        period = await service.set_period_active(db, period_id, body.value)
    except PortalServiceError as e:
        raise_http_error(e)
    return AdmissionPeriodResponse.model_validate(period)


@router.delete("/periods/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_period(
    period_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(manage_ppdb),
) -> None:
    try:
        await service.delete_period(db, period_id)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} deleted admission period {period_id}")


# ============================================
# Registrations
# ============================================


@router.get("/registrations", response_model=ListResponse[RegistrationListItem])
async def list_registrations(
    period_id: UUID | None = Query(None),
    status_filter: RegistrationStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=100),
    skip: int = Query(0, ge=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_ppdb),
) -> ListResponse[RegistrationListItem]:
    skip, limit = clamp_pagination(skip, limit)
    registrations, total = await service.list_registrations(
        db, period_id=period_id, status=status_filter, search=search, skip=skip, limit=limit
    )
    return ListResponse[RegistrationListItem](
        items=[to_list_item(r) for r in registrations],
        total=total,
        skip=skip,
        limit=limit,
    )


@router.get("/registrations/counts", response_model=RegistrationCounts)
async def registration_counts(
    period_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_ppdb),
) -> RegistrationCounts:
    return await service.registration_counts(db, period_id)


@router.get("/registrations/recent", response_model=list[RegistrationListItem])
async def recent_registrations(
    limit: int = Query(service.RECENT_LIMIT, ge=1, le=20),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_ppdb),
) -> list[RegistrationListItem]:
    registrations = await service.recent_registrations(db, limit)
    return [to_list_item(r) for r in registrations]


@router.get("/registrations/export.csv", response_class=Response)
async def export_registrations(
    period_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(view_ppdb),
) -> Response:
    """Download the registrations (optionally of one period) as CSV."""
    filename, content = await service.export_registrations_csv(db, period_id)
    logger.info(f"Admin {admin.id} exported registrations (period={period_id})")
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/registrations/{registration_id}", response_model=RegistrationDetail)
async def get_registration(
    registration_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    _admin: AdminUser = Depends(view_ppdb),
) -> RegistrationDetail:
    try:
        registration = await service.get_registration(db, registration_id)
    except PortalServiceError as e:
        raise_http_error(e)
    return _to_detail(registration, storage)


@router.patch("/registrations/{registration_id}/status", response_model=RegistrationDetail)
async def update_registration_status(
    registration_id: UUID,
    body: RegistrationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    admin: AdminUser = Depends(manage_ppdb),
) -> RegistrationDetail:
    """Accept, reject or reset a registration; the applicant is emailed on a decision."""
    await enforce_admin_rate_limit(admin.id, "registration_status")
    try:
        registration = await service.update_registration_status(
            db, registration_id, body.status, body.notes
        )
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} set registration {registration_id} to {body.status.value}")
    return _to_detail(registration, storage)


@router.delete("/registrations/{registration_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_registration(
    registration_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
    admin: AdminUser = Depends(manage_ppdb),
) -> None:
    await enforce_admin_rate_limit(admin.id, "registration_delete")
    try:
        await service.delete_registration(db, storage, registration_id)
    except PortalServiceError as e:
        raise_http_error(e)
    logger.info(f"Admin {admin.id} deleted registration {registration_id}")
