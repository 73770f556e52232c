"""
Dashboard Router

Statistics cards and the latest registrations for the back-office home.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.auth import require_permission
from school_portal.core.database import get_db
from school_portal.core.permissions import Permission
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admissions.admin_router import to_list_item
from school_portal.modules.admissions.schemas import RegistrationListItem
from school_portal.modules.dashboard import service
from school_portal.modules.dashboard.schemas import DashboardStats

router = APIRouter()

view_dashboard = require_permission(Permission.VIEW_DASHBOARD)


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_dashboard),
) -> DashboardStats:
    return await service.get_stats(db)


@router.get("/recent-registrations", response_model=list[RegistrationListItem])
async def recent_registrations(
    limit: int = Query(service.RECENT_LIMIT, ge=1, le=20),
    db: AsyncSession = Depends(get_db),
    _admin: AdminUser = Depends(view_dashboard),
) -> list[RegistrationListItem]:
    registrations = await service.recent_registrations(db, limit)
    return [to_list_item(r) for r in registrations]
