"""
Fixtures for admission tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from school_portal.modules.admissions.models import (
    AdmissionPeriod,
    AdmissionRegistration,
    Gender,
    RegistrationStatus,
)
from school_portal.modules.skills.models import SkillProgram


@pytest.fixture
def active_period():
    """An active period open through July 2025 with 5 seats."""
    period = MagicMock(spec=AdmissionPeriod)
    period.id = uuid4()
    period.academic_year = "2025/2026"
    period.registration_start = date(2025, 7, 1)
    period.registration_end = date(2025, 7, 31)
    period.announcement_date = date(2025, 8, 10)
    period.max_students = 5
    period.registration_fee = 150000
    period.is_active = True
    return period


@pytest.fixture
def active_skill():
    skill = MagicMock(spec=SkillProgram)
    skill.id = uuid4()
    skill.name = "Teknik Komputer dan Jaringan"
    skill.is_active = True
    return skill


@pytest.fixture
def registration_form(active_skill):
    return {
        "student_name": "Budi Santoso",
        "student_email": "budi@example.com",
        "student_phone": "081234567890",
        "parent_name": "Siti Aminah",
        "parent_phone": "081298765432",
        "parent_email": "",
        "birth_date": "2010-05-17",
        "birth_place": "Bandung",
        "gender": "L",
        "address": "Jl. Merdeka No. 1",
        "previous_school": "SMP Negeri 1 Bandung",
        "chosen_skill_id": str(active_skill.id),
    }


@pytest.fixture
def registration_documents(make_upload):
    return {
        "ktp": make_upload("ktp.pdf", "application/pdf"),
        "kk": make_upload("kk.jpg", "image/jpeg"),
        "ijazah": make_upload("ijazah.png", "image/png"),
        "foto": make_upload("foto.jpg", "image/jpeg"),
    }


@pytest.fixture
def sample_registration(active_period, active_skill):
    registration = MagicMock(spec=AdmissionRegistration)
    registration.id = uuid4()
    registration.period_id = active_period.id
    registration.period = active_period
    registration.registration_number = "PPDB2025070042"
    registration.student_name = "Budi Santoso"
    registration.student_email = "budi@example.com"
    registration.student_phone = "081234567890"
    registration.parent_name = "Siti Aminah"
    registration.parent_phone = "081298765432"
    registration.parent_email = "Siti@Example.com"
    registration.birth_date = date(2010, 5, 17)
    registration.birth_place = "Bandung"
    registration.gender = Gender.MALE
    registration.address = "Jl. Merdeka No. 1, RT 02"
    registration.previous_school = "SMP Negeri 1 Bandung"
    registration.chosen_skill_id = active_skill.id
    registration.skill = active_skill
    registration.documents = {
        "ktp_url": "PPDB2025070042/ktp_1.pdf",
        "foto_url": "PPDB2025070042/foto_1.jpg",
    }
    registration.status = RegistrationStatus.PENDING
    registration.notes = None
    registration.created_at = datetime(2025, 7, 1, 20, 0, tzinfo=UTC)
    registration.updated_at = datetime(2025, 7, 1, 20, 0, tzinfo=UTC)
    return registration
