"""Admission (PPDB) schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from school_portal.modules.admissions.helpers import AdmissionWindowState
from school_portal.modules.admissions.models import Gender, RegistrationStatus
from school_portal.modules.shared.schemas import clean_string_list

# ============================================
# Periods
# ============================================


class AdmissionPeriodResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    academic_year: str
    registration_start: date
    registration_end: date
    announcement_date: date | None = None
    max_students: int
    registration_fee: int
    requirements: list[str]
    documents_needed: list[str]
    selection_process: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class _PeriodLists(BaseModel):
    @field_validator(
        "requirements", "documents_needed", "selection_process", check_fields=False
    )
    @classmethod
    def clean_lists(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return clean_string_list(v)


class AdmissionPeriodCreate(_PeriodLists):
    academic_year: str = Field(..., min_length=4, max_length=20, examples=["2025/2026"])
    registration_start: date
    registration_end: date
    announcement_date: date | None = None
    max_students: int = Field(..., gt=0)
    registration_fee: int = Field(0, ge=0)
    requirements: list[str] = Field(default_factory=list)
    documents_needed: list[str] = Field(default_factory=list)
    selection_process: list[str] = Field(default_factory=list)
    is_active: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> "AdmissionPeriodCreate":
        if self.registration_end < self.registration_start:
            raise ValueError("Tanggal selesai harus setelah tanggal mulai")
        if self.announcement_date and self.announcement_date < self.registration_end:
            raise ValueError("Tanggal pengumuman harus setelah pendaftaran ditutup")
        return self


class AdmissionPeriodUpdate(_PeriodLists):
    """Partial update; date order is checked against the stored values in the service."""

    academic_year: str | None = Field(None, min_length=4, max_length=20)
    registration_start: date | None = None
    registration_end: date | None = None
    announcement_date: date | None = None
    max_students: int | None = Field(None, gt=0)
    registration_fee: int | None = Field(None, ge=0)
    requirements: list[str] | None = None
    documents_needed: list[str] | None = None
    selection_process: list[str] | None = None
    is_active: bool | None = None


class ActiveAdmissionResponse(BaseModel):
    """The active period with its window state, for the public PPDB page."""

    period: AdmissionPeriodResponse
    window_state: AdmissionWindowState
    is_open: bool
    message: str
    remaining_quota: int


# ============================================
# Registrations
# ============================================


class RegistrationForm(BaseModel):
    """Typed PPDB form fields, built after the raw form passed validation."""

    student_name: str
    student_email: str
    student_phone: str
    parent_name: str
    parent_phone: str
    parent_email: str | None = None
    birth_date: date
    birth_place: str
    gender: Gender
    address: str
    previous_school: str
    chosen_skill_id: UUID

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class RegistrationSubmitResponse(BaseModel):
    registration_number: str
    status: RegistrationStatus
    academic_year: str
    message: str = "Pendaftaran berhasil dikirim"


class RegistrationStatusResponse(BaseModel):
    """What an applicant sees when checking their registration."""

    registration_number: str
    student_name: str
    status: RegistrationStatus
    notes: str | None = None
    academic_year: str
    skill_name: str | None = None
    announcement_date: date | None = None
    submitted_at: datetime


class RegistrationListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    registration_number: str
    student_name: str
    student_email: str
    student_phone: str
    parent_name: str
    parent_phone: str
    previous_school: str
    status: RegistrationStatus
    period_id: UUID
    chosen_skill_id: UUID
    skill_name: str | None = None
    academic_year: str | None = None
    created_at: datetime


class RegistrationDetail(RegistrationListItem):
    parent_email: str | None = None
    birth_date: date
    birth_place: str
    gender: Gender
    address: str
    notes: str | None = None
    documents: dict[str, str]
    document_urls: dict[str, str] = Field(default_factory=dict)
    updated_at: datetime


class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus
    notes: str | None = Field(None, max_length=2000)


class RegistrationCounts(BaseModel):
    total: int = 0
    pending: int = 0
    accepted: int = 0
    rejected: int = 0
