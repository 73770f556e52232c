"""
Unit tests for admission period management.

An in-memory repository stands in for the database so that the
single-active-period rule can be checked across a sequence of operations.
"""

from datetime import date
from unittest.mock import patch
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from school_portal.modules.admissions.models import AdmissionPeriod
from school_portal.modules.admissions.schemas import AdmissionPeriodCreate, AdmissionPeriodUpdate
from school_portal.modules.admissions.service import (
    create_period,
    delete_period,
    set_period_active,
    update_period,
)
from school_portal.modules.shared import ConflictError, NotFoundError, ValidationFailedError


class FakePeriodRepository:
    def __init__(self):
        self.periods: dict[UUID, AdmissionPeriod] = {}
        self.registrations_per_period: dict[UUID, int] = {}
        self.commits = 0

    async def get_period(self, db, period_id):
        return self.periods.get(period_id)

    async def deactivate_other_periods(self, db, exclude_id):
        for period in self.periods.values():
            if period.id != exclude_id:
                period.is_active = False

    async def save_period(self, db, period):
        self.periods[period.id] = period
        self.commits += 1
        return period

    async def count_registrations(self, db, *, period_id=None, status=None, exclude_status=None):
        return self.registrations_per_period.get(period_id, 0)

    async def delete_period(self, db, period_id):
        del self.periods[period_id]

    def active_ids(self) -> list[UUID]:
        return [p.id for p in self.periods.values() if p.is_active]


@pytest.fixture
def fake_repo():
    repo = FakePeriodRepository()
    with patch("school_portal.modules.admissions.service.repository", repo):
        yield repo


def period_data(year: str, *, is_active: bool = False) -> AdmissionPeriodCreate:
    return AdmissionPeriodCreate(
        academic_year=year,
        registration_start=date(2025, 7, 1),
        registration_end=date(2025, 7, 31),
        announcement_date=date(2025, 8, 10),
        max_students=120,
        requirements=["  Lulus SMP/MTs ", "", "Sehat jasmani"],
        is_active=is_active,
    )


class TestSingleActivePeriod:
    @pytest.mark.asyncio
    async def test_sequential_activation_keeps_one_active(self, mock_db, fake_repo):
        first = await create_period(mock_db, period_data("2024/2025", is_active=True))
        assert fake_repo.active_ids() == [first.id]

        second = await create_period(mock_db, period_data("2025/2026", is_active=True))
        assert fake_repo.active_ids() == [second.id]

        await set_period_active(mock_db, first.id, True)
        assert fake_repo.active_ids() == [first.id]

        await update_period(mock_db, second.id, AdmissionPeriodUpdate(is_active=True))
        assert fake_repo.active_ids() == [second.id]

        await set_period_active(mock_db, second.id, False)
        assert fake_repo.active_ids() == []

    @pytest.mark.asyncio
    async def test_inactive_create_leaves_active_period(self, mock_db, fake_repo):
        active = await create_period(mock_db, period_data("2024/2025", is_active=True))
        await create_period(mock_db, period_data("2025/2026"))

        assert fake_repo.active_ids() == [active.id]

    @pytest.mark.asyncio
    async def test_activation_is_one_commit(self, mock_db, fake_repo):
        first = await create_period(mock_db, period_data("2024/2025", is_active=True))
        await create_period(mock_db, period_data("2025/2026", is_active=True))
        commits = fake_repo.commits

        await set_period_active(mock_db, first.id, True)

        assert fake_repo.commits == commits + 1

    @pytest.mark.asyncio
    async def test_lists_are_cleaned(self, mock_db, fake_repo):
        period = await create_period(mock_db, period_data("2025/2026"))
        assert period.requirements == ["Lulus SMP/MTs", "Sehat jasmani"]


class TestPeriodDates:
    def test_create_rejects_end_before_start(self):
        with pytest.raises(ValidationError):
            AdmissionPeriodCreate(
                academic_year="2025/2026",
                registration_start=date(2025, 7, 31),
                registration_end=date(2025, 7, 1),
                max_students=10,
            )

    def test_create_rejects_zero_quota(self):
        with pytest.raises(ValidationError):
            AdmissionPeriodCreate(
                academic_year="2025/2026",
                registration_start=date(2025, 7, 1),
                registration_end=date(2025, 7, 31),
                max_students=0,
            )

    @pytest.mark.asyncio
    async def test_update_checks_merged_dates(self, mock_db, fake_repo):
        period = await create_period(mock_db, period_data("2025/2026"))

        with pytest.raises(ValidationFailedError) as exc_info:
            await update_period(
                mock_db, period.id, AdmissionPeriodUpdate(registration_end=date(2025, 6, 1))
            )

        assert "registration_end" in exc_info.value.errors
        assert period.registration_end == date(2025, 7, 31)

    @pytest.mark.asyncio
    async def test_update_announcement_before_end(self, mock_db, fake_repo):
        period = await create_period(mock_db, period_data("2025/2026"))

        with pytest.raises(ValidationFailedError) as exc_info:
            await update_period(
                mock_db, period.id, AdmissionPeriodUpdate(announcement_date=date(2025, 7, 20))
            )

        assert "announcement_date" in exc_info.value.errors


class TestDeletePeriod:
    @pytest.mark.asyncio
    async def test_period_with_registrations_is_kept(self, mock_db, fake_repo):
        period = await create_period(mock_db, period_data("2025/2026"))
        fake_repo.registrations_per_period[period.id] = 3

        with pytest.raises(ConflictError) as exc_info:
            await delete_period(mock_db, period.id)

        assert exc_info.value.error_code == "PERIOD_IN_USE"
        assert period.id in fake_repo.periods

    @pytest.mark.asyncio
    async def test_delete_empty_period(self, mock_db, fake_repo):
        period = await create_period(mock_db, period_data("2025/2026"))

        await delete_period(mock_db, period.id)

        assert fake_repo.periods == {}

    @pytest.mark.asyncio
    async def test_unknown_period(self, mock_db, fake_repo):
        with pytest.raises(NotFoundError):
            await set_period_active(mock_db, uuid4(), True)

