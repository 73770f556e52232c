"""
Admission (PPDB) Models

Admission periods and the registrations submitted during them. Applicants
have no accounts: a registration is identified by its registration number.
"""

import enum
import uuid
from datetime import date

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from school_portal.modules.shared import BaseModel, pg_enum
from school_portal.modules.skills.models import SkillProgram


class RegistrationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Gender(str, enum.Enum):
    MALE = "L"
    FEMALE = "P"


class AdmissionPeriod(BaseModel):
    """
    One academic year's admission round.

    At most one period is active; the partial unique index enforces it.
    Registration dates are calendar days in the school's local time zone.
    """

    __tablename__ = "ppdb_periods"

    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    registration_start: Mapped[date] = mapped_column(Date, nullable=False)
    registration_end: Mapped[date] = mapped_column(Date, nullable=False)
    announcement_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    max_students: Mapped[int] = mapped_column(Integer, nullable=False)
    registration_fee: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    requirements: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    documents_needed: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    selection_process: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("registration_end >= registration_start", name="ck_ppdb_periods_dates"),
        CheckConstraint("max_students > 0", name="ck_ppdb_periods_quota"),
        CheckConstraint("registration_fee >= 0", name="ck_ppdb_periods_fee"),
        Index(
            "uq_ppdb_periods_single_active",
            "is_active",
            unique=True,
            postgresql_where=text("is_active"),
        ),
    )

    def __repr__(self) -> str:
        return f"<AdmissionPeriod(year={self.academic_year}, active={self.is_active})>"


class AdmissionRegistration(BaseModel):
    """
    A student's registration for an admission period.

    `documents` maps `<key>_url` (ktp, kk, ijazah, foto) to the object path
    in the ppdb-documents bucket.
    """

    __tablename__ = "ppdb_registrations"

    period_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("ppdb_periods.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    registration_number: Mapped[str] = mapped_column(
        String(20), nullable=False, unique=True, index=True
    )

    # Student
    student_name: Mapped[str] = mapped_column(String(200), nullable=False)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False)
    student_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    birth_place: Mapped[str] = mapped_column(String(100), nullable=False)
    gender: Mapped[Gender] = mapped_column(
        pg_enum(Gender, "gender"),
        nullable=False,
    )
    address: Mapped[str] = mapped_column(Text, nullable=False)
    previous_school: Mapped[str] = mapped_column(String(200), nullable=False)

    # Parent
    parent_name: Mapped[str] = mapped_column(String(200), nullable=False)
    parent_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    parent_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    chosen_skill_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("skills.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    documents: Mapped[dict[str, str]] = mapped_column(JSONB, nullable=False, default=dict)

    status: Mapped[RegistrationStatus] = mapped_column(
        pg_enum(RegistrationStatus, "registration_status"),
        nullable=False,
        default=RegistrationStatus.PENDING,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    period: Mapped[AdmissionPeriod] = relationship(lazy="raise")
    skill: Mapped[SkillProgram] = relationship(lazy="raise")

    __table_args__ = (Index("ix_ppdb_registrations_period_status", "period_id", "status"),)

    def __repr__(self) -> str:
        return (
            f"<AdmissionRegistration(id={self.id}, number={self.registration_number}, "
            f"status={self.status.value})>"
        )
