"""
HTTP-level tests for application assembly, auth guards and error mapping.
The lifespan is not run, so no database or Redis is needed.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from school_portal.core.auth import get_current_admin
from school_portal.core.database import get_db
from school_portal.main import app
from school_portal.modules.admissions.helpers import AdmissionWindow, AdmissionWindowState
from school_portal.modules.admissions.models import AdmissionPeriod
from school_portal.modules.dashboard.schemas import DashboardStats
from school_portal.modules.shared import NotFoundError


async def _fake_db():
    yield AsyncMock()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = _fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_admin(client):
    def _login(admin):
        app.dependency_overrides[get_current_admin] = lambda: admin
        return client

    return _login


def _period() -> AdmissionPeriod:
    now = datetime(2025, 6, 1, tzinfo=UTC)
    return AdmissionPeriod(
        id=uuid4(),
        academic_year="2025/2026",
        registration_start=date(2025, 7, 1),
        registration_end=date(2025, 7, 31),
        announcement_date=None,
        max_students=100,
        registration_fee=0,
        requirements=[],
        documents_needed=[],
        selection_process=[],
        is_active=True,
        created_at=now,
        updated_at=now,
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"


class TestAdminGuards:
    def test_admin_route_requires_token(self, client):
        response = client.get("/api/v1/admin/dashboard/stats")

        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "NOT_AUTHENTICATED"

    def test_invalid_token(self, client):
        response = client.get(
            "/api/v1/admin/dashboard/stats", headers={"Authorization": "Bearer nope"}
        )
        assert response.status_code == 401

    def test_editor_cannot_manage_users(self, as_admin, editor):
        response = as_admin(editor).get("/api/v1/admin/users")

        assert response.status_code == 403
        assert response.json()["detail"]["error"] == "PERMISSION_DENIED"

    def test_editor_cannot_manage_ppdb(self, as_admin, editor):
        response = as_admin(editor).delete(f"/api/v1/admin/admissions/periods/{uuid4()}")
        assert response.status_code == 403

    def test_menu_for_editor(self, as_admin, editor):
        response = as_admin(editor).get("/api/v1/admin/menu")

        assert response.status_code == 200
        paths = [item["path"] for item in response.json()["items"]]
        assert "/admin/users" not in paths


class TestPublicAdmission:
    def test_active_admission(self, client):
        window = AdmissionWindow(
            state=AdmissionWindowState.NOT_YET_OPEN,
            message="Pendaftaran akan dibuka pada 1/7/2025",
        )
        with patch(
            "school_portal.modules.admissions.service.get_active_admission",
            new=AsyncMock(return_value=(_period(), window, 100)),
        ):
            response = client.get("/api/v1/public/admissions/active")

        assert response.status_code == 200
        body = response.json()
        assert body["is_open"] is False
        assert body["window_state"] == "not_yet_open"
        assert body["remaining_quota"] == 100
        assert body["period"]["academic_year"] == "2025/2026"

    def test_no_active_period_is_404(self, client):
        with patch(
            "school_portal.modules.admissions.service.get_active_admission",
            new=AsyncMock(side_effect=NotFoundError("Active admission period")),
        ):
            response = client.get("/api/v1/public/admissions/active")

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "ACTIVE_ADMISSION_PERIOD_NOT_FOUND"

    def test_status_lookup_requires_email(self, client):
        response = client.get("/api/v1/public/admissions/registrations/PPDB2025070001")
        assert response.status_code == 422


class TestDashboard:
    def test_stats(self, as_admin, editor):
        stats = DashboardStats(
            total_registrations=3,
            pending_registrations=2,
            accepted_registrations=1,
            total_news=4,
            active_skills=5,
            gallery_items=6,
        )
        with patch(
            "school_portal.modules.dashboard.service.get_stats",
            new=AsyncMock(return_value=stats),
        ):
            response = as_admin(editor).get("/api/v1/admin/dashboard/stats")

        assert response.status_code == 200
        assert response.json()["active_skills"] == 5
