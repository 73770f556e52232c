"""
Shared fixtures.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from school_portal.core.storage import LocalObjectStorage
from school_portal.modules.admin_users.models import AdminRole, AdminUser
from school_portal.modules.shared.uploads import UploadedFile


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def storage(tmp_path):
    """Local object storage rooted in a temporary directory."""
    return LocalObjectStorage(tmp_path / "media", "http://testserver/media")


@pytest.fixture
def make_upload():
    """Build an UploadedFile with the given name, type and size."""

    def _make(filename="file.jpg", content_type="image/jpeg", size=1024) -> UploadedFile:
        return UploadedFile(filename=filename, content_type=content_type, data=b"x" * size)

    return _make


def _admin(role: AdminRole, email: str) -> AdminUser:
    admin = MagicMock(spec=AdminUser)
    admin.id = uuid4()
    admin.email = email
    admin.full_name = "Test Admin"
    admin.role = role
    admin.password_hash = "hashed"
    admin.is_active = True
    admin.avatar_url = None
    admin.last_login = None
    admin.created_at = datetime.now(UTC)
    admin.updated_at = datetime.now(UTC)
    return admin


@pytest.fixture
def super_admin():
    return _admin(AdminRole.SUPER_ADMIN, "super@sekolah.sch.id")


@pytest.fixture
def editor():
    return _admin(AdminRole.EDITOR, "editor@sekolah.sch.id")
