"""
Unit tests for the admission service: submission, status lookup and
back-office registration handling.

These tests cover:
- Submission gated by the admission window and quota
- Document storage and cleanup when a submission fails
- Applicant status lookup by number and email
- Status decisions and their notification emails
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from school_portal.core.storage import StorageBuckets
from school_portal.modules.admissions.helpers import NO_ACTIVE_PERIOD_MESSAGE
from school_portal.modules.admissions.models import RegistrationStatus
from school_portal.modules.admissions.service import (
    AdmissionClosedError,
    QuotaFullError,
    delete_registration,
    export_registrations_csv,
    get_active_admission,
    get_registration_status,
    submit_registration,
    update_registration_status,
)
from school_portal.modules.shared import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)

SERVICE = "school_portal.modules.admissions.service"

# 10:00 on 15 July 2025 in Asia/Jakarta
INSIDE_WINDOW = datetime(2025, 7, 15, 3, 0, tzinfo=UTC)


@pytest.fixture
def mock_repo(active_period):
    with patch(f"{SERVICE}.repository") as repo:
        repo.get_active_period = AsyncMock(return_value=active_period)
        repo.count_registrations = AsyncMock(return_value=0)
        repo.registration_number_exists = AsyncMock(return_value=False)
        repo.lock_period = AsyncMock(return_value=active_period)
        repo.add_registration = AsyncMock(side_effect=lambda db, registration: registration)
        yield repo


@pytest.fixture
def mock_skills(active_skill):
    with patch(f"{SERVICE}.skills_repository") as repo:
        repo.get_by_id = AsyncMock(return_value=active_skill)
        yield repo


@pytest.fixture
def mock_received_email():
    with patch(f"{SERVICE}.send_registration_received", new_callable=AsyncMock) as send:
        send.return_value = True
        yield send


class TestGetActiveAdmission:
    @pytest.mark.asyncio
    async def test_returns_window_and_remaining_quota(self, mock_db, mock_repo, active_period):
        mock_repo.count_registrations = AsyncMock(return_value=3)

        period, window, remaining = await get_active_admission(mock_db, INSIDE_WINDOW)

        assert period is active_period
        assert window.is_open is True
        assert remaining == 2

    @pytest.mark.asyncio
    async def test_no_active_period(self, mock_db, mock_repo):
        mock_repo.get_active_period = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await get_active_admission(mock_db, INSIDE_WINDOW)


class TestSubmitRegistration:
    @pytest.mark.asyncio
    async def test_success_stores_documents_and_notifies(
        self,
        mock_db,
        storage,
        mock_repo,
        mock_skills,
        mock_received_email,
        registration_form,
        registration_documents,
        active_period,
    ):
        registration, period = await submit_registration(
            mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
        )

        assert period is active_period
        assert registration.registration_number.startswith("PPDB202507")
        assert registration.status == RegistrationStatus.PENDING
        assert registration.parent_email is None
        assert set(registration.documents) == {"ktp_url", "kk_url", "ijazah_url", "foto_url"}

        stored = await storage.list_paths(StorageBuckets.PPDB_DOCUMENTS)
        assert len(stored) == 4
        assert all(p.startswith(f"{registration.registration_number}/") for p in stored)

        mock_repo.add_registration.assert_awaited_once()
        mock_received_email.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_parent_gets_confirmation_too(
        self,
        mock_db,
        storage,
        mock_repo,
        mock_skills,
        mock_received_email,
        registration_form,
        registration_documents,
    ):
        registration_form["parent_email"] = "siti@example.com"

        await submit_registration(
            mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
        )

        assert mock_received_email.await_count == 2

    @pytest.mark.asyncio
    async def test_window_not_open(
        self, mock_db, storage, mock_repo, registration_form, registration_documents
    ):
        before_start = datetime(2025, 6, 15, tzinfo=UTC)

        with pytest.raises(AdmissionClosedError) as exc_info:
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=before_start
            )

        assert exc_info.value.error_code == "ADMISSION_CLOSED"
        assert "akan dibuka" in exc_info.value.message
        assert await storage.list_paths(StorageBuckets.PPDB_DOCUMENTS) == []

    @pytest.mark.asyncio
    async def test_no_active_period(
        self, mock_db, storage, mock_repo, registration_form, registration_documents
    ):
        mock_repo.get_active_period = AsyncMock(return_value=None)

        with pytest.raises(AdmissionClosedError) as exc_info:
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
            )

        assert exc_info.value.message == NO_ACTIVE_PERIOD_MESSAGE

    @pytest.mark.asyncio
    async def test_invalid_form_and_documents_reported_together(
        self, mock_db, storage, mock_repo, registration_form, registration_documents
    ):
        registration_form["student_email"] = "budi"
        registration_documents["kk"] = None

        with pytest.raises(ValidationFailedError) as exc_info:
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
            )

        assert exc_info.value.errors == {
            "student_email": "Format email tidak valid",
            "kk": "Dokumen ini wajib diunggah",
        }
        mock_repo.add_registration.assert_not_called()

    @pytest.mark.asyncio
    async def test_inactive_program(
        self,
        mock_db,
        storage,
        mock_repo,
        mock_skills,
        registration_form,
        registration_documents,
        active_skill,
    ):
        active_skill.is_active = False

        with pytest.raises(ValidationFailedError) as exc_info:
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
            )

        assert "chosen_skill_id" in exc_info.value.errors

    @pytest.mark.asyncio
    async def test_quota_full(
        self, mock_db, storage, mock_repo, mock_skills, registration_form, registration_documents
    ):
        mock_repo.count_registrations = AsyncMock(return_value=5)

        with pytest.raises(QuotaFullError) as exc_info:
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
            )

        assert exc_info.value.status_code == 409
        assert await storage.list_paths(StorageBuckets.PPDB_DOCUMENTS) == []

    @pytest.mark.asyncio
    async def test_quota_taken_during_upload_removes_documents(
        self, mock_db, storage, mock_repo, mock_skills, registration_form, registration_documents
    ):
        # Free at the first check, full once the period row is locked
        mock_repo.count_registrations = AsyncMock(side_effect=[4, 5])

        with pytest.raises(QuotaFullError):
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
            )

        mock_db.rollback.assert_awaited()
        assert await storage.list_paths(StorageBuckets.PPDB_DOCUMENTS) == []

    @pytest.mark.asyncio
    async def test_insert_failure_removes_documents(
        self,
        mock_db,
        storage,
        mock_repo,
        mock_skills,
        mock_received_email,
        registration_form,
        registration_documents,
    ):
        mock_repo.add_registration = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("duplicate key"))
        )

        with pytest.raises(ConflictError) as exc_info:
            await submit_registration(
                mock_db, storage, registration_form, registration_documents, now=INSIDE_WINDOW
            )

        assert exc_info.value.error_code == "REGISTRATION_CONFLICT"
        mock_db.rollback.assert_awaited()
        assert await storage.list_paths(StorageBuckets.PPDB_DOCUMENTS) == []
        mock_received_email.assert_not_called()


class TestGetRegistrationStatus:
    @pytest.mark.asyncio
    async def test_student_email_matches(self, mock_db, sample_registration):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_registration_by_number = AsyncMock(return_value=sample_registration)

            result = await get_registration_status(mock_db, "PPDB2025070042", "BUDI@example.com")

        assert result is sample_registration

    @pytest.mark.asyncio
    async def test_parent_email_matches_case_insensitive(self, mock_db, sample_registration):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_registration_by_number = AsyncMock(return_value=sample_registration)

            result = await get_registration_status(mock_db, "PPDB2025070042", "siti@example.com")

        assert result is sample_registration

    @pytest.mark.asyncio
    async def test_other_email_is_denied(self, mock_db, sample_registration):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_registration_by_number = AsyncMock(return_value=sample_registration)

            with pytest.raises(PermissionDeniedError):
                await get_registration_status(mock_db, "PPDB2025070042", "someone@example.com")

    @pytest.mark.asyncio
    async def test_unknown_number(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_registration_by_number = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await get_registration_status(mock_db, "PPDB2025079999", "budi@example.com")


class TestUpdateRegistrationStatus:
    @pytest.mark.asyncio
    async def test_decision_sends_email(self, mock_db, sample_registration):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_registration_decision", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.get_registration = AsyncMock(return_value=sample_registration)
            mock_repo.update_registration = AsyncMock()
            mock_email.return_value = True

            await update_registration_status(
                mock_db, sample_registration.id, RegistrationStatus.ACCEPTED, "Selamat"
            )

            mock_repo.update_registration.assert_awaited_once_with(
                mock_db,
                sample_registration,
                {"status": RegistrationStatus.ACCEPTED, "notes": "Selamat"},
            )
            mock_email.assert_awaited_once()
            assert mock_email.call_args.kwargs["status"] == "accepted"
            assert mock_email.call_args.kwargs["to_email"] == "budi@example.com"

    @pytest.mark.asyncio
    async def test_back_to_pending_sends_nothing(self, mock_db, sample_registration):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.send_registration_decision", new_callable=AsyncMock) as mock_email,
        ):
            mock_repo.get_registration = AsyncMock(return_value=sample_registration)
            mock_repo.update_registration = AsyncMock()

            await update_registration_status(
                mock_db, sample_registration.id, RegistrationStatus.PENDING
            )

            mock_email.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_registration(self, mock_db, sample_registration):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_registration = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError):
                await update_registration_status(
                    mock_db, sample_registration.id, RegistrationStatus.REJECTED
                )


class TestDeleteAndExport:
    @pytest.mark.asyncio
    async def test_delete_removes_document_folder(self, mock_db, storage, sample_registration):
        bucket = StorageBuckets.PPDB_DOCUMENTS
        await storage.upload(bucket, "PPDB2025070042/ktp_1.pdf", b"x")
        await storage.upload(bucket, "PPDB2025070099/ktp_1.pdf", b"x")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_registration = AsyncMock(return_value=sample_registration)
            mock_repo.delete_registration = AsyncMock()

            await delete_registration(mock_db, storage, sample_registration.id)

            mock_repo.delete_registration.assert_awaited_once_with(
                mock_db, sample_registration.id
            )

        assert await storage.list_paths(bucket) == ["PPDB2025070099/ktp_1.pdf"]

    @pytest.mark.asyncio
    async def test_export_csv(self, mock_db, sample_registration):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_registrations = AsyncMock(return_value=([sample_registration], 1))

            filename, content = await export_registrations_csv(
                mock_db, sample_registration.period_id, now=INSIDE_WINDOW
            )

        assert filename == "ppdb-registrations-2025-07-15.csv"
        assert "PPDB2025070042" in content
        assert "Teknik Komputer dan Jaringan" in content
        mock_repo.list_registrations.assert_awaited_once_with(
            mock_db, period_id=sample_registration.period_id
        )
