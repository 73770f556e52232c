"""
Unit tests for the auth service: sign-in, refresh and password change.
"""

from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from school_portal.core.security import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from school_portal.modules.auth.service import (
    AccountInactiveError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    change_password,
    login,
    logout,
    refresh,
)

SERVICE = "school_portal.modules.auth.service"


class TestLogin:
    @pytest.mark.asyncio
    async def test_success_issues_tokens_with_role_claims(self, mock_db, editor):
        with (
            patch(f"{SERVICE}.AdminUserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password", return_value=True),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=editor)
            mock_repo.touch_last_login = AsyncMock()

            admin, access_token, refresh_token = await login(
                mock_db, editor.email, "rahasia123"
            )

            assert admin is editor
            mock_repo.touch_last_login.assert_awaited_once_with(mock_db, editor)

        claims = decode_token(access_token)
        assert claims["type"] == ACCESS_TOKEN_TYPE
        assert claims["sub"] == str(editor.id)
        assert claims["email"] == editor.email
        assert claims["role"] == "editor"
        assert decode_token(refresh_token)["type"] == "refresh"

    @pytest.mark.asyncio
    async def test_unknown_email(self, mock_db):
        with patch(f"{SERVICE}.AdminUserRepository") as mock_repo:
            mock_repo.get_by_email = AsyncMock(return_value=None)

            with pytest.raises(InvalidCredentialsError) as exc_info:
                await login(mock_db, "nobody@example.com", "whatever1")

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_password(self, mock_db, editor):
        with (
            patch(f"{SERVICE}.AdminUserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password", return_value=False),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=editor)
            mock_repo.touch_last_login = AsyncMock()

            with pytest.raises(InvalidCredentialsError):
                await login(mock_db, editor.email, "salah")

            mock_repo.touch_last_login.assert_not_called()

    @pytest.mark.asyncio
    async def test_inactive_account(self, mock_db, editor):
        editor.is_active = False
        with (
            patch(f"{SERVICE}.AdminUserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password", return_value=True),
        ):
            mock_repo.get_by_email = AsyncMock(return_value=editor)

            with pytest.raises(AccountInactiveError) as exc_info:
                await login(mock_db, editor.email, "rahasia123")

        assert exc_info.value.status_code == 403


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_issues_access_token(self, mock_db, editor):
        token = create_refresh_token(subject=str(editor.id))
        with patch(f"{SERVICE}.AdminUserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=editor)

            access_token = await refresh(mock_db, token)

        assert decode_token(access_token)["email"] == editor.email

    @pytest.mark.asyncio
    async def test_access_token_cannot_refresh(self, mock_db, editor):
        token = create_access_token(subject=str(editor.id))

        with pytest.raises(InvalidRefreshTokenError):
            await refresh(mock_db, token)

    @pytest.mark.asyncio
    async def test_deactivated_admin_cannot_refresh(self, mock_db, editor):
        editor.is_active = False
        token = create_refresh_token(subject=str(editor.id))
        with patch(f"{SERVICE}.AdminUserRepository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=editor)

            with pytest.raises(InvalidRefreshTokenError):
                await refresh(mock_db, token)

    @pytest.mark.asyncio
    async def test_garbage_token(self, mock_db):
        with pytest.raises(InvalidRefreshTokenError):
            await refresh(mock_db, "not-a-jwt")


class TestLogout:
    @pytest.mark.asyncio
    async def test_without_redis_nothing_is_revoked(self):
        with patch("school_portal.core.redis.redis_client", None):
            assert await logout(uuid4().hex, 9999999999) is False

    @pytest.mark.asyncio
    async def test_missing_claims(self):
        assert await logout(None, None) is False


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_wrong_current_password(self, mock_db, editor):
        with (
            patch(f"{SERVICE}.AdminUserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password", return_value=False),
        ):
            mock_repo.update = AsyncMock()

            with pytest.raises(InvalidCredentialsError):
                await change_password(mock_db, editor, "salah", "passwordbaru")

            mock_repo.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_stores_new_hash(self, mock_db, editor):
        with (
            patch(f"{SERVICE}.AdminUserRepository") as mock_repo,
            patch(f"{SERVICE}.verify_password", return_value=True),
            patch(f"{SERVICE}.hash_password", return_value="new-hash"),
        ):
            mock_repo.update = AsyncMock()

            await change_password(mock_db, editor, "rahasia123", "passwordbaru")

            mock_repo.update.assert_awaited_once_with(mock_db, editor, password_hash="new-hash")
