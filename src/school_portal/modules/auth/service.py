"""
Auth Service

Sign-in, token refresh, sign-out and self-service account changes for
back-office admins.
"""

import logging
import time
from uuid import UUID

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.redis import revoke_token
from school_portal.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admin_users.repository import AdminUserRepository
from school_portal.modules.shared import PortalServiceError

logger = logging.getLogger(__name__)


class InvalidCredentialsError(PortalServiceError):
    def __init__(self):
        super().__init__(
            message="Email atau password salah.",
            error_code="INVALID_CREDENTIALS",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class AccountInactiveError(PortalServiceError):
    def __init__(self):
        super().__init__(
            message="Akun Anda telah dinonaktifkan.",
            error_code="ACCOUNT_INACTIVE",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class InvalidRefreshTokenError(PortalServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid or expired refresh token.",
            error_code="INVALID_REFRESH_TOKEN",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


def _access_claims(admin: AdminUser) -> dict[str, str]:
    return {
        "email": admin.email,
        "role": admin.role.value,
        "name": admin.full_name,
    }


def issue_access_token(admin: AdminUser) -> str:
    return create_access_token(subject=str(admin.id), additional_claims=_access_claims(admin))


async def login(db: AsyncSession, email: str, password: str) -> tuple[AdminUser, str, str]:
    """
    Authenticate an admin by email and password.

    Returns:
        Tuple of (admin, access_token, refresh_token)

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        AccountInactiveError: The account has been deactivated
    """
    admin = await AdminUserRepository.get_by_email(db, email)

    if not admin:
        logger.warning("Login attempt for non-existent admin email")
        raise InvalidCredentialsError()

    if not verify_password(password, admin.password_hash):
        logger.warning(f"Invalid password for admin: {admin.id}")
        raise InvalidCredentialsError()

    if not admin.is_active:
        logger.warning(f"Login attempt for inactive admin: {admin.id}")
        raise AccountInactiveError()

    await AdminUserRepository.touch_last_login(db, admin)

    access_token = issue_access_token(admin)
    refresh_token = create_refresh_token(subject=str(admin.id))

    logger.info(f"Admin logged in: {admin.id} (role: {admin.role.value})")
    return admin, access_token, refresh_token


async def refresh(db: AsyncSession, refresh_token: str) -> str:
    """
    Exchange a refresh token for a new access token.

    The admin is re-checked so a deactivated account cannot refresh.
    """
    payload = decode_token(refresh_token)
    if payload is None or payload.get("type") != REFRESH_TOKEN_TYPE:
        raise InvalidRefreshTokenError()

    try:
        admin_id = UUID(payload.get("sub", ""))
    except ValueError as e:
        raise InvalidRefreshTokenError() from e

    admin = await AdminUserRepository.get_by_id(db, admin_id)
    if admin is None or not admin.is_active:
        raise InvalidRefreshTokenError()

    return issue_access_token(admin)


async def logout(token_id: str | None, expires_at: int | None) -> bool:
    """
    Revoke an access token until it would have expired.

    Returns:
        True if the token was revoked server side
    """
    if not token_id or not expires_at:
        return False
    return await revoke_token(token_id, int(expires_at - time.time()))


async def update_me(
    db: AsyncSession,
    admin: AdminUser,
    *,
    full_name: str | None = None,
    avatar_url: str | None = None,
) -> AdminUser:
    changes = {}
    if full_name is not None:
        changes["full_name"] = full_name
    if avatar_url is not None:
        changes["avatar_url"] = avatar_url
    if not changes:
        return admin
    return await AdminUserRepository.update(db, admin, **changes)


async def change_password(
    db: AsyncSession, admin: AdminUser, current_password: str, new_password: str
) -> None:
    """
    Replace the admin's password after checking the current one.

    Raises:
        InvalidCredentialsError: If the current password is wrong
    """
    if not verify_password(current_password, admin.password_hash):
        logger.warning(f"Password change with wrong current password: {admin.id}")
        raise InvalidCredentialsError()

    await AdminUserRepository.update(db, admin, password_hash=hash_password(new_password))
    logger.info(f"Admin {admin.id} changed their password")
