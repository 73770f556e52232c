"""
Unit tests for the school profile service.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from school_portal.core.storage import StorageBuckets
from school_portal.modules.profile import service
from school_portal.modules.profile.models import SchoolProfile
from school_portal.modules.profile.schemas import ProfileImageKind, SchoolProfileUpdate
from school_portal.modules.shared import NotFoundError

SERVICE = "school_portal.modules.profile.service"


def existing_profile(**fields) -> MagicMock:
    profile = MagicMock(spec=SchoolProfile)
    profile.name = "SMK Negeri 1"
    profile.logo_url = None
    profile.header_image_url = None
    for key, value in fields.items():
        setattr(profile, key, value)
    return profile


def query_result(profile):
    result = MagicMock()
    result.scalar_one_or_none.return_value = profile
    return result


class TestGetPublicProfile:
    @pytest.mark.asyncio
    async def test_missing_profile(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await service.get_public_profile(mock_db)

        assert exc_info.value.error_code == "SCHOOL_PROFILE_NOT_FOUND"


class TestSaveProfile:
    @pytest.mark.asyncio
    async def test_first_save_creates_row(self, mock_db):
        mock_db.execute.return_value = query_result(None)

        profile = await service.save_profile(mock_db, SchoolProfileUpdate(name="SMK Negeri 1"))

        mock_db.add.assert_called_once_with(profile)
        assert isinstance(profile, SchoolProfile)
        assert profile.name == "SMK Negeri 1"
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_later_save_updates_existing_row(self, mock_db):
        profile = existing_profile()
        mock_db.execute.return_value = query_result(profile)

        saved = await service.save_profile(
            mock_db, SchoolProfileUpdate(name="SMK Negeri 2", vision="Unggul")
        )

        assert saved is profile
        assert profile.name == "SMK Negeri 2"
        assert profile.vision == "Unggul"
        mock_db.add.assert_not_called()
        mock_db.commit.assert_awaited_once()


class TestUploadProfileImage:
    @pytest.mark.asyncio
    async def test_points_existing_profile_at_new_logo(self, mock_db, storage, make_upload):
        profile = existing_profile()

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get = AsyncMock(return_value=profile)
            mock_repo.set_image_url = AsyncMock()

            url = await service.upload_profile_image(
                mock_db, storage, ProfileImageKind.LOGO, make_upload("logo.png", "image/png")
            )

            mock_repo.set_image_url.assert_awaited_once_with(mock_db, profile, "logo_url", url)

        path = storage.path_from_public_url(StorageBuckets.SCHOOL_IMAGES, url)
        assert path.startswith("school/logo_")
        assert path.endswith(".png")

    @pytest.mark.asyncio
    async def test_replaced_logo_is_deleted(self, mock_db, storage, make_upload):
        await storage.upload(StorageBuckets.SCHOOL_IMAGES, "school/logo_1.png", b"old")
        old_url = storage.get_public_url(StorageBuckets.SCHOOL_IMAGES, "school/logo_1.png")
        profile = existing_profile(logo_url=old_url)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get = AsyncMock(return_value=profile)
            mock_repo.set_image_url = AsyncMock()

            url = await service.upload_profile_image(
                mock_db, storage, ProfileImageKind.LOGO, make_upload("logo.png", "image/png")
            )

        new_path = storage.path_from_public_url(StorageBuckets.SCHOOL_IMAGES, url)
        assert await storage.list_paths(StorageBuckets.SCHOOL_IMAGES) == [new_path]

    @pytest.mark.asyncio
    async def test_skill_image_reference_is_kept(self, mock_db, storage, make_upload):
        await storage.upload(StorageBuckets.SCHOOL_IMAGES, "skills/1.png", b"skill")
        skill_url = storage.get_public_url(StorageBuckets.SCHOOL_IMAGES, "skills/1.png")
        profile = existing_profile(header_image_url=skill_url)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get = AsyncMock(return_value=profile)
            mock_repo.set_image_url = AsyncMock()

            await service.upload_profile_image(
                mock_db, storage, ProfileImageKind.HEADER, make_upload()
            )

        assert await storage.exists(StorageBuckets.SCHOOL_IMAGES, "skills/1.png")

    @pytest.mark.asyncio
    async def test_without_profile_only_returns_url(self, mock_db, storage, make_upload):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get = AsyncMock(return_value=None)
            mock_repo.set_image_url = AsyncMock()

            url = await service.upload_profile_image(
                mock_db, storage, ProfileImageKind.HEADER, make_upload()
            )

            mock_repo.set_image_url.assert_not_called()
        assert "school/header_" in url
