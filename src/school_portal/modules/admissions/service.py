"""
Admission (PPDB) Service

Business logic for admission periods and registrations.

1. Periods:
   - Create/update with date-order validation
   - Activating a period deactivates every other period in the same commit
   - Periods with registrations cannot be deleted

2. Registration submission:
   - Requires an active period whose window is open today (local time)
   - Chosen program must exist and be active
   - Quota: non-rejected registrations must stay below max_students; the
     final check runs with the period row locked
   - Form fields and all four documents are validated before any upload
   - Documents are stored under `<registration_number>/` and removed again
     if anything after the first upload fails
   - Confirmation email to the student (and parent, when given)

3. Back-office:
   - Filtered lists, status counts, detail with document URLs
   - Status decisions notify the applicant by email
   - CSV export

Email failures are logged and never fail the operation that triggered them.
"""

import logging
import uuid
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.config import settings
from school_portal.core.email import send_registration_decision, send_registration_received
from school_portal.core.storage import LocalObjectStorage, StorageBuckets, StorageError
from school_portal.modules.admissions import repository
from school_portal.modules.admissions.helpers import (
    DOCUMENT_KEYS,
    NO_ACTIVE_PERIOD_MESSAGE,
    AdmissionWindow,
    build_registrations_csv,
    describe_admission_window,
    document_field,
    document_path,
    export_filename,
    generate_registration_number,
    validate_documents,
    validate_registration_form,
)
from school_portal.modules.admissions.models import (
    AdmissionPeriod,
    AdmissionRegistration,
    RegistrationStatus,
)
from school_portal.modules.admissions.schemas import (
    AdmissionPeriodCreate,
    AdmissionPeriodUpdate,
    RegistrationCounts,
    RegistrationForm,
)
from school_portal.modules.shared import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StorageFailureError,
    ValidationFailedError,
)
from school_portal.modules.shared.uploads import UploadedFile, timestamp_ms
from school_portal.modules.skills import repository as skills_repository

logger = logging.getLogger(__name__)

MAX_NUMBER_ATTEMPTS = 10
RECENT_LIMIT = 5


class AdmissionClosedError(ConflictError):
    """Raised when there is no active period or its window is not open."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="ADMISSION_CLOSED")


class QuotaFullError(ConflictError):
    def __init__(self):
        super().__init__(
            message="Kuota pendaftaran untuk periode ini sudah penuh.",
            error_code="QUOTA_FULL",
        )


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(UTC)


# ============================================
# Periods
# ============================================


async def list_periods(db: AsyncSession) -> list[AdmissionPeriod]:
    return await repository.list_periods(db)


async def get_period(db: AsyncSession, period_id: UUID) -> AdmissionPeriod:
    period = await repository.get_period(db, period_id)
    if period is None:
        raise NotFoundError("Admission period", period_id)
    return period


def _check_period_dates(period_fields: dict) -> None:
    start = period_fields["registration_start"]
    end = period_fields["registration_end"]
    announcement = period_fields.get("announcement_date")

    errors = {}
    if end < start:
        errors["registration_end"] = "Tanggal selesai harus setelah tanggal mulai"
    if announcement and announcement < end:
        errors["announcement_date"] = "Tanggal pengumuman harus setelah pendaftaran ditutup"
    if errors:
        raise ValidationFailedError(next(iter(errors.values())), errors=errors)


async def create_period(db: AsyncSession, data: AdmissionPeriodCreate) -> AdmissionPeriod:
    """Create a period. Creating it active deactivates the others in the same commit."""
    fields = data.model_dump()
    _check_period_dates(fields)

    period = AdmissionPeriod(id=uuid.uuid4(), **fields)
    if period.is_active:
        await repository.deactivate_other_periods(db, exclude_id=period.id)

    saved = await repository.save_period(db, period)
    logger.info(f"Created admission period {saved.id} ({saved.academic_year})")
    return saved


async def update_period(
    db: AsyncSession, period_id: UUID, data: AdmissionPeriodUpdate
) -> AdmissionPeriod:
    """
    Update a period. Date order is checked on the merged (stored + new) values;
    activating it deactivates the others in the same commit.
    """
    period = await get_period(db, period_id)
    changes = data.model_dump(exclude_unset=True)
    nullable = {"announcement_date"}
    changes = {k: v for k, v in changes.items() if v is not None or k in nullable}

    merged = {
        "registration_start": changes.get("registration_start", period.registration_start),
        "registration_end": changes.get("registration_end", period.registration_end),
        "announcement_date": changes.get("announcement_date", period.announcement_date),
    }
    _check_period_dates(merged)

    if changes.get("is_active"):
        await repository.deactivate_other_periods(db, exclude_id=period.id)

    for key, value in changes.items():
        setattr(period, key, value)
    return await repository.save_period(db, period)


async def set_period_active(db: AsyncSession, period_id: UUID, is_active: bool) -> AdmissionPeriod:
    """Activate (deactivating every other period) or deactivate a period, in one commit."""
    period = await get_period(db, period_id)
    if is_active:
        await repository.deactivate_other_periods(db, exclude_id=period.id)

    period.is_active = is_active
    saved = await repository.save_period(db, period)
    logger.info(f"Admission period {period_id} active={is_active}")
    return saved


async def delete_period(db: AsyncSession, period_id: UUID) -> None:
    """
    Raises:
        ConflictError: Registrations still reference the period
    """
    await get_period(db, period_id)
    if await repository.count_registrations(db, period_id=period_id) > 0:
        raise ConflictError(
            "Periode ini sudah memiliki pendaftar dan tidak dapat dihapus.",
            error_code="PERIOD_IN_USE",
        )
    await repository.delete_period(db, period_id)
    logger.info(f"Deleted admission period {period_id}")


async def remaining_quota(db: AsyncSession, period: AdmissionPeriod) -> int:
    taken = await repository.count_registrations(
        db, period_id=period.id, exclude_status=RegistrationStatus.REJECTED
    )
    return max(0, period.max_students - taken)


async def get_active_admission(
    db: AsyncSession, now: datetime | None = None
) -> tuple[AdmissionPeriod, AdmissionWindow, int]:
    """
    The active period, its window state and the remaining quota.

    Raises:
        NotFoundError: No active period
    """
    period = await repository.get_active_period(db)
    if period is None:
        raise NotFoundError("Active admission period")

    window = describe_admission_window(period, _now(now), settings.timezone)
    return period, window, await remaining_quota(db, period)


# ============================================
# Submission
# ============================================


async def _unique_registration_number(db: AsyncSession, now: datetime) -> str:
    for _ in range(MAX_NUMBER_ATTEMPTS):
        number = generate_registration_number(now, settings.timezone)
        if not await repository.registration_number_exists(db, number):
            return number
    raise ConflictError(
        "Gagal membuat nomor pendaftaran. Silakan coba lagi.",
        error_code="REGISTRATION_NUMBER_UNAVAILABLE",
    )


async def _discard_documents(storage: LocalObjectStorage, paths: list[str]) -> None:
    if not paths:
        return
    try:
        await storage.delete(StorageBuckets.PPDB_DOCUMENTS, paths)
        logger.info(f"Removed {len(paths)} uploaded document(s) after a failed submission")
    except StorageError as e:
        logger.error(f"Could not remove uploaded documents {paths}: {e}")


async def _upload_documents(
    storage: LocalObjectStorage,
    registration_number: str,
    documents: dict[str, UploadedFile],
    uploaded: list[str],
) -> dict[str, str]:
    """Store every document, appending each stored path to `uploaded` as it goes."""
    stored: dict[str, str] = {}
    for key in DOCUMENT_KEYS:
        upload = documents[key]
        path = document_path(registration_number, key, upload, timestamp_ms())
        await storage.upload(StorageBuckets.PPDB_DOCUMENTS, path, upload.data, upload.content_type)
        uploaded.append(path)
        stored[document_field(key)] = path
    return stored


async def _notify_received(registration: AdmissionRegistration, academic_year: str) -> None:
    recipients = [registration.student_email]
    if registration.parent_email and registration.parent_email != registration.student_email:
        recipients.append(registration.parent_email)

    for email in recipients:
        sent = await send_registration_received(
            to_email=email,
            student_name=registration.student_name,
            registration_number=registration.registration_number,
            academic_year=academic_year,
        )
        if not sent:
            logger.error(
                f"Failed to send confirmation for registration {registration.registration_number}"
            )


async def submit_registration(
    db: AsyncSession,
    storage: LocalObjectStorage,
    form: dict[str, str | None],
    documents: dict[str, UploadedFile | None],
    now: datetime | None = None,
) -> tuple[AdmissionRegistration, AdmissionPeriod]:
    """
    Submit a PPDB registration.

    Args:
        db: Database session
        storage: Object storage for the documents
        form: Raw form fields
        documents: Uploaded files keyed by ktp, kk, ijazah, foto
        now: Current time (defaults to now)

    Returns:
        Tuple of (registration, period)

    Raises:
        AdmissionClosedError: No active period, or its window is not open
        ValidationFailedError: Invalid fields or documents, unknown/inactive program
        QuotaFullError: The period's quota is taken
        StorageFailureError: A document could not be stored
    """
    now = _now(now)

    period = await repository.get_active_period(db)
    window = describe_admission_window(period, now, settings.timezone)
    if period is None or not window.is_open:
        raise AdmissionClosedError(window.message)

    errors = validate_registration_form(form)
    errors.update(validate_documents(documents))
    if errors:
        raise ValidationFailedError("Data pendaftaran tidak valid", errors=errors)

    data = RegistrationForm.model_validate(form)

    skill = await skills_repository.get_by_id(db, data.chosen_skill_id)
    if skill is None or not skill.is_active:
        raise ValidationFailedError(
            "Kompetensi keahlian tidak tersedia",
            errors={"chosen_skill_id": "Kompetensi keahlian tidak tersedia"},
        )

    if await remaining_quota(db, period) <= 0:
        raise QuotaFullError()

    registration_number = await _unique_registration_number(db, now)
    period_id = period.id
    academic_year = period.academic_year

    uploaded: list[str] = []
    try:
        stored = await _upload_documents(storage, registration_number, documents, uploaded)

        # Final quota check with the period row locked until the insert commits
        locked = await repository.lock_period(db, period_id)
        if locked is None or not locked.is_active:
            raise AdmissionClosedError(NO_ACTIVE_PERIOD_MESSAGE)
        if await remaining_quota(db, locked) <= 0:
            raise QuotaFullError()

        registration = await repository.add_registration(
            db,
            AdmissionRegistration(
                period_id=period_id,
                registration_number=registration_number,
                **data.model_dump(),
                documents=stored,
                status=RegistrationStatus.PENDING,
            ),
        )
    except StorageError as e:
        await db.rollback()
        await _discard_documents(storage, uploaded)
        logger.error(f"Document upload failed for {registration_number}: {e}")
        raise StorageFailureError("Gagal mengunggah dokumen. Silakan coba lagi.") from e
    except IntegrityError as e:
        await db.rollback()
        await _discard_documents(storage, uploaded)
        logger.warning(f"Registration insert rejected for {registration_number}: {e.orig}")
        raise ConflictError(
            "Pendaftaran gagal disimpan. Silakan coba lagi.", error_code="REGISTRATION_CONFLICT"
        ) from e
    except Exception:
        await db.rollback()
        await _discard_documents(storage, uploaded)
        raise

    logger.info(f"Registration {registration_number} submitted for period {period_id}")
    await _notify_received(registration, academic_year)
    return registration, period


async def get_registration_status(
    db: AsyncSession, registration_number: str, email: str
) -> AdmissionRegistration:
    """
    Registration lookup for applicants.

    Raises:
        NotFoundError: Unknown registration number
        PermissionDeniedError: Email matches neither the student nor the parent
    """
    registration = await repository.get_registration_by_number(db, registration_number.strip())
    if registration is None:
        raise NotFoundError("Registration", registration_number)

    allowed = {registration.student_email.lower()}
    if registration.parent_email:
        allowed.add(registration.parent_email.lower())
    if email.strip().lower() not in allowed:
        logger.warning(f"Status lookup with non-matching email for {registration_number}")
        raise PermissionDeniedError("Email tidak sesuai dengan data pendaftaran.")

    return registration


# ============================================
# Back-office
# ============================================


async def list_registrations(
    db: AsyncSession,
    *,
    period_id: UUID | None = None,
    status: RegistrationStatus | None = None,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = 10,
) -> tuple[list[AdmissionRegistration], int]:
    return await repository.list_registrations(
        db, period_id=period_id, status=status, search=search, skip=skip, limit=limit
    )


async def registration_counts(
    db: AsyncSession, period_id: UUID | None = None
) -> RegistrationCounts:
    by_status = await repository.count_by_status(db, period_id)
    return RegistrationCounts(
        total=sum(by_status.values()),
        pending=by_status.get(RegistrationStatus.PENDING, 0),
        accepted=by_status.get(RegistrationStatus.ACCEPTED, 0),
        rejected=by_status.get(RegistrationStatus.REJECTED, 0),
    )


async def get_registration(db: AsyncSession, registration_id: UUID) -> AdmissionRegistration:
    registration = await repository.get_registration(db, registration_id)
    if registration is None:
        raise NotFoundError("Registration", registration_id)
    return registration


def document_urls(
    storage: LocalObjectStorage, registration: AdmissionRegistration
) -> dict[str, str]:
    """Public URLs for the stored documents, keyed like `documents`."""
    urls = {}
    for field, path in (registration.documents or {}).items():
        try:
            urls[field] = storage.get_public_url(StorageBuckets.PPDB_DOCUMENTS, path)
        except StorageError:
            logger.warning(f"Skipping invalid document path on {registration.registration_number}")
    return urls


async def update_registration_status(
    db: AsyncSession,
    registration_id: UUID,
    status: RegistrationStatus,
    notes: str | None = None,
) -> AdmissionRegistration:
    """Record a decision and email the applicant when accepted or rejected."""
    registration = await get_registration(db, registration_id)
    previous = registration.status

    await repository.update_registration(db, registration, {"status": status, "notes": notes})
    registration = await get_registration(db, registration_id)
    logger.info(
        f"Registration {registration.registration_number} status {previous.value} -> {status.value}"
    )

    if status != RegistrationStatus.PENDING and status != previous:
        sent = await send_registration_decision(
            to_email=registration.student_email,
            student_name=registration.student_name,
            registration_number=registration.registration_number,
            status=status.value,
            notes=notes,
        )
        if not sent:
            logger.error(
                f"Failed to send decision email for {registration.registration_number}"
            )

    return registration


async def delete_registration(
    db: AsyncSession, storage: LocalObjectStorage, registration_id: UUID
) -> None:
    """Delete a registration and its document folder."""
    registration = await get_registration(db, registration_id)
    number = registration.registration_number

    await repository.delete_registration(db, registration_id)
    try:
        await storage.delete(StorageBuckets.PPDB_DOCUMENTS, [number])
    except StorageError as e:
        logger.warning(f"Could not delete documents of {number}: {e}")
    logger.info(f"Deleted registration {number}")


async def recent_registrations(
    db: AsyncSession, limit: int = RECENT_LIMIT
) -> list[AdmissionRegistration]:
    registrations, _total = await repository.list_registrations(db, limit=limit)
    return registrations


async def export_registrations_csv(
    db: AsyncSession, period_id: UUID | None = None, now: datetime | None = None
) -> tuple[str, str]:
    """
    All matching registrations as CSV.

    Returns:
        Tuple of (filename, csv_text)
    """
    registrations, _total = await repository.list_registrations(db, period_id=period_id)
    rows = ((r, r.skill.name if r.skill else None) for r in registrations)
    content = build_registrations_csv(rows, settings.timezone)
    return export_filename(_now(now), settings.timezone), content
