"""
Admission Repository

Database operations for admission periods and registrations.

Functions documented as "not committed" only stage changes; the service
commits them together with the write they belong to.
"""

from uuid import UUID

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from school_portal.modules.admissions.models import (
    AdmissionPeriod,
    AdmissionRegistration,
    RegistrationStatus,
)

# ============================================
# Periods
# ============================================


async def list_periods(db: AsyncSession) -> list[AdmissionPeriod]:
    result = await db.execute(select(AdmissionPeriod).order_by(AdmissionPeriod.created_at.desc()))
    return list(result.scalars().all())


async def get_period(db: AsyncSession, period_id: UUID) -> AdmissionPeriod | None:
    return await db.get(AdmissionPeriod, period_id)


async def get_active_period(db: AsyncSession) -> AdmissionPeriod | None:
    result = await db.execute(
        select(AdmissionPeriod).where(AdmissionPeriod.is_active.is_(True)).limit(1)
    )
    return result.scalar_one_or_none()


async def lock_period(db: AsyncSession, period_id: UUID) -> AdmissionPeriod | None:
    """Load a period with a row lock held until the transaction ends."""
    result = await db.execute(
        select(AdmissionPeriod)
        .where(AdmissionPeriod.id == period_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def deactivate_other_periods(db: AsyncSession, exclude_id: UUID) -> None:
    """Unset `is_active` on every other period (not committed)."""
    await db.execute(
        update(AdmissionPeriod)
        .where(AdmissionPeriod.id != exclude_id, AdmissionPeriod.is_active.is_(True))
        .values(is_active=False)
    )


async def save_period(db: AsyncSession, period: AdmissionPeriod) -> AdmissionPeriod:
    """Commit the period together with anything staged in the same session."""
    db.add(period)
    await db.commit()
    await db.refresh(period)
    return period


async def delete_period(db: AsyncSession, period_id: UUID) -> None:
    await db.execute(delete(AdmissionPeriod).where(AdmissionPeriod.id == period_id))
    await db.commit()


# ============================================
# Registrations
# ============================================


async def registration_number_exists(db: AsyncSession, registration_number: str) -> bool:
    result = await db.execute(
        select(AdmissionRegistration.id)
        .where(AdmissionRegistration.registration_number == registration_number)
        .limit(1)
    )
    return result.first() is not None


async def count_registrations(
    db: AsyncSession,
    *,
    period_id: UUID | None = None,
    status: RegistrationStatus | None = None,
    exclude_status: RegistrationStatus | None = None,
) -> int:
    query = select(func.count()).select_from(AdmissionRegistration)
    if period_id is not None:
        query = query.where(AdmissionRegistration.period_id == period_id)
    if status is not None:
        query = query.where(AdmissionRegistration.status == status)
    if exclude_status is not None:
        query = query.where(AdmissionRegistration.status != exclude_status)
    result = await db.execute(query)
    return result.scalar() or 0


async def count_by_status(
    db: AsyncSession, period_id: UUID | None = None
) -> dict[RegistrationStatus, int]:
    query = select(AdmissionRegistration.status, func.count()).group_by(
        AdmissionRegistration.status
    )
    if period_id is not None:
        query = query.where(AdmissionRegistration.period_id == period_id)
    result = await db.execute(query)
    return {status: count for status, count in result.all()}


async def add_registration(
    db: AsyncSession, registration: AdmissionRegistration
) -> AdmissionRegistration:
    db.add(registration)
    await db.commit()
    await db.refresh(registration)
    return registration


def _with_relations(query):
    return query.options(
        selectinload(AdmissionRegistration.skill),
        selectinload(AdmissionRegistration.period),
    )


async def get_registration(
    db: AsyncSession, registration_id: UUID
) -> AdmissionRegistration | None:
    result = await db.execute(
        _with_relations(select(AdmissionRegistration)).where(
            AdmissionRegistration.id == registration_id
        )
    )
    return result.scalar_one_or_none()


async def get_registration_by_number(
    db: AsyncSession, registration_number: str
) -> AdmissionRegistration | None:
    result = await db.execute(
        _with_relations(select(AdmissionRegistration)).where(
            AdmissionRegistration.registration_number == registration_number
        )
    )
    return result.scalar_one_or_none()


async def list_registrations(
    db: AsyncSession,
    *,
    period_id: UUID | None = None,
    status: RegistrationStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> tuple[list[AdmissionRegistration], int]:
    """Registrations newest first with skill and period loaded, plus the filtered total."""
    query = select(AdmissionRegistration)
    if period_id is not None:
        query = query.where(AdmissionRegistration.period_id == period_id)
    if status is not None:
        query = query.where(AdmissionRegistration.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                AdmissionRegistration.student_name.ilike(pattern),
                AdmissionRegistration.registration_number.ilike(pattern),
            )
        )

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar() or 0

    query = _with_relations(query).order_by(AdmissionRegistration.created_at.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all()), total


async def update_registration(
    db: AsyncSession, registration: AdmissionRegistration, fields: dict
) -> AdmissionRegistration:
    for key, value in fields.items():
        setattr(registration, key, value)
    await db.commit()
    await db.refresh(registration)
    return registration


async def delete_registration(db: AsyncSession, registration_id: UUID) -> None:
    await db.execute(
        delete(AdmissionRegistration).where(AdmissionRegistration.id == registration_id)
    )
    await db.commit()


async def existing_registration_numbers(db: AsyncSession, numbers: list[str]) -> set[str]:
    """The subset of `numbers` that belong to a stored registration."""
    if not numbers:
        return set()
    result = await db.execute(
        select(AdmissionRegistration.registration_number).where(
            AdmissionRegistration.registration_number.in_(numbers)
        )
    )
    return set(result.scalars().all())
