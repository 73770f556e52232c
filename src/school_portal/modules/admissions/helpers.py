"""
Admission Helpers

Pure functions shared by the admission service, routers and jobs:
admission-window classification, registration numbers, form and document
validation, and CSV rendering of registrations.
"""

import csv
import enum
import io
import re
import secrets
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from school_portal.core.validators import (
    ADMISSION_DOCUMENT_RULE,
    ADMISSION_PHOTO_RULE,
    is_valid_email,
    is_valid_phone,
)
from school_portal.modules.admissions.models import AdmissionPeriod, AdmissionRegistration, Gender
from school_portal.modules.shared.uploads import UploadedFile


class AdmissionWindowState(str, enum.Enum):
    NOT_YET_OPEN = "not_yet_open"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class AdmissionWindow:
    state: AdmissionWindowState | None
    message: str

    @property
    def is_open(self) -> bool:
        return self.state == AdmissionWindowState.OPEN


NO_ACTIVE_PERIOD_MESSAGE = "Tidak ada periode aktif"


def _zone(tz: str | ZoneInfo) -> ZoneInfo:
    return tz if isinstance(tz, ZoneInfo) else ZoneInfo(tz)


def local_date(now: datetime, tz: str | ZoneInfo) -> date:
    """Calendar day of an instant in a time zone. Naive datetimes are taken as UTC."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(_zone(tz)).date()


def format_id_date(value: date) -> str:
    """Indonesian short date, e.g. 1/7/2025."""
    return f"{value.day}/{value.month}/{value.year}"


def classify_admission_window(
    start: date, end: date, now: datetime, tz: str | ZoneInfo
) -> AdmissionWindowState:
    """
    Where `now` falls relative to a registration window.

    The window opens at 00:00 local time on `start` and stays open through
    the last instant of `end`, so only the local calendar day of `now`
    matters.
    """
    today = local_date(now, tz)
    if today < start:
        return AdmissionWindowState.NOT_YET_OPEN
    if today > end:
        return AdmissionWindowState.CLOSED
    return AdmissionWindowState.OPEN


def describe_admission_window(
    period: AdmissionPeriod | None, now: datetime, tz: str | ZoneInfo
) -> AdmissionWindow:
    """Window state plus the message shown on the PPDB page."""
    if period is None:
        return AdmissionWindow(state=None, message=NO_ACTIVE_PERIOD_MESSAGE)

    state = classify_admission_window(period.registration_start, period.registration_end, now, tz)
    if state == AdmissionWindowState.NOT_YET_OPEN:
        message = f"Pendaftaran akan dibuka pada {format_id_date(period.registration_start)}"
    elif state == AdmissionWindowState.CLOSED:
        message = f"Pendaftaran telah ditutup pada {format_id_date(period.registration_end)}"
    else:
        message = "Pendaftaran sedang dibuka"
    return AdmissionWindow(state=state, message=message)


REGISTRATION_NUMBER_RE = re.compile(r"PPDB[0-9]{4}(0[1-9]|1[0-2])[0-9]{4}")


def generate_registration_number(now: datetime, tz: str | ZoneInfo) -> str:
    """`PPDB<YYYY><MM><4 random digits>` using the local year and month."""
    today = local_date(now, tz)
    return f"PPDB{today.year}{today.month:02d}{secrets.randbelow(10000):04d}"


# ============================================
# Registration form
# ============================================

REQUIRED_FIELDS = (
    "student_name",
    "student_email",
    "student_phone",
    "parent_name",
    "parent_phone",
    "birth_date",
    "birth_place",
    "gender",
    "address",
    "previous_school",
    "chosen_skill_id",
)

REQUIRED_MESSAGE = "Field ini wajib diisi"


def validate_registration_form(form: dict[str, str | None]) -> dict[str, str]:
    """
    Check the PPDB form fields.

    Returns:
        Field name -> message; empty when the form is valid
    """
    errors: dict[str, str] = {}
    values = {key: (value or "").strip() for key, value in form.items()}

    for field in REQUIRED_FIELDS:
        if not values.get(field):
            errors[field] = REQUIRED_MESSAGE

    for field in ("student_email", "parent_email"):
        if values.get(field) and not is_valid_email(values[field]):
            errors[field] = "Format email tidak valid"

    for field in ("student_phone", "parent_phone"):
        if values.get(field) and not is_valid_phone(values[field]):
            errors[field] = "Format nomor telepon tidak valid"

    if values.get("birth_date") and "birth_date" not in errors:
        try:
            date.fromisoformat(values["birth_date"])
        except ValueError:
            errors["birth_date"] = "Format tanggal tidak valid"

    if values.get("gender") and values["gender"] not in {g.value for g in Gender}:
        errors["gender"] = "Jenis kelamin tidak valid"

    if values.get("chosen_skill_id"):
        try:
            UUID(values["chosen_skill_id"])
        except ValueError:
            errors["chosen_skill_id"] = "Kompetensi keahlian tidak valid"

    return errors


# ============================================
# Documents
# ============================================

DOCUMENT_KEYS = ("ktp", "kk", "ijazah", "foto")

DOCUMENT_RULES = {
    "ktp": ADMISSION_DOCUMENT_RULE,
    "kk": ADMISSION_DOCUMENT_RULE,
    "ijazah": ADMISSION_DOCUMENT_RULE,
    "foto": ADMISSION_PHOTO_RULE,
}


def validate_documents(documents: dict[str, UploadedFile | None]) -> dict[str, str]:
    """Every document is required and must pass its type and size rule."""
    errors: dict[str, str] = {}
    for key in DOCUMENT_KEYS:
        upload = documents.get(key)
        if upload is None:
            errors[key] = "Dokumen ini wajib diunggah"
            continue
        problems = upload.validate(DOCUMENT_RULES[key])
        if problems:
            errors[key] = "; ".join(problems)
    return errors


def document_path(registration_number: str, key: str, upload: UploadedFile, ms: int) -> str:
    """Object path `<registration_number>/<key>_<ms>.<ext>` in the ppdb-documents bucket."""
    return f"{registration_number}/{key}_{ms}{upload.extension}"


def document_field(key: str) -> str:
    return f"{key}_url"


# ============================================
# CSV export
# ============================================

CSV_HEADERS = (
    "No. Pendaftaran",
    "Nama Siswa",
    "Email Siswa",
    "Telepon Siswa",
    "Nama Orang Tua",
    "Telepon Orang Tua",
    "Email Orang Tua",
    "Tanggal Lahir",
    "Tempat Lahir",
    "Jenis Kelamin",
    "Alamat",
    "Sekolah Asal",
    "Kompetensi Keahlian",
    "Status",
    "Catatan",
    "Tanggal Daftar",
)


def registration_csv_row(
    registration: AdmissionRegistration, skill_name: str | None, tz: str | ZoneInfo
) -> list[str]:
    def text(value) -> str:
        return "" if value is None else str(value)

    return [
        registration.registration_number,
        registration.student_name,
        registration.student_email,
        registration.student_phone,
        registration.parent_name,
        registration.parent_phone,
        text(registration.parent_email),
        registration.birth_date.isoformat(),
        registration.birth_place,
        registration.gender.value,
        registration.address,
        registration.previous_school,
        text(skill_name),
        registration.status.value,
        text(registration.notes),
        format_id_date(local_date(registration.created_at, tz)),
    ]


def build_registrations_csv(
    rows: Iterable[tuple[AdmissionRegistration, str | None]], tz: str | ZoneInfo
) -> str:
    """CSV document with a header row; fields are quoted where needed."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for registration, skill_name in rows:
        writer.writerow(registration_csv_row(registration, skill_name, tz))
    return buffer.getvalue()


def export_filename(now: datetime, tz: str | ZoneInfo) -> str:
    return f"ppdb-registrations-{local_date(now, tz).isoformat()}.csv"
