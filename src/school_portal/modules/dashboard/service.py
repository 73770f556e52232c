"""
Dashboard Service

Count-only queries over the other modules' tables.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.modules.admissions import repository as admissions_repository
from school_portal.modules.admissions.models import AdmissionRegistration, RegistrationStatus
from school_portal.modules.dashboard.schemas import DashboardStats
from school_portal.modules.gallery import repository as gallery_repository
from school_portal.modules.news import repository as news_repository
from school_portal.modules.skills import repository as skills_repository

RECENT_LIMIT = 5


async def get_stats(db: AsyncSession) -> DashboardStats:
    by_status = await admissions_repository.count_by_status(db)
    return DashboardStats(
        total_registrations=sum(by_status.values()),
        pending_registrations=by_status.get(RegistrationStatus.PENDING, 0),
        accepted_registrations=by_status.get(RegistrationStatus.ACCEPTED, 0),
        total_news=await news_repository.count_all(db),
        active_skills=await skills_repository.count_active(db),
        gallery_items=await gallery_repository.count_all(db),
    )


async def recent_registrations(
    db: AsyncSession, limit: int = RECENT_LIMIT
) -> list[AdmissionRegistration]:
    registrations, _total = await admissions_repository.list_registrations(db, limit=limit)
    return registrations
