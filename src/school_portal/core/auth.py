"""
Authentication and Authorization Module

FastAPI dependencies for the back-office:

1. The bearer JWT is decoded and checked (signature, expiry, token type,
   not signed out).
2. The admin account is looked up by the token's email and must exist
   and be active. A valid token alone is not enough.
3. Route permissions are checked against the role allowlist.
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.database import get_db
from school_portal.core.permissions import Permission, has_permission
from school_portal.core.redis import is_token_revoked
from school_portal.core.security import ACCESS_TOKEN_TYPE, decode_token
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admin_users.repository import AdminUserRepository

logger = logging.getLogger(__name__)

security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for the admin back-office",
)


@dataclass
class AuthSession:
    """An authenticated request: the admin row plus the decoded token claims."""

    admin: AdminUser
    claims: dict[str, Any]

    @property
    def token_id(self) -> str | None:
        return self.claims.get("jti")

    @property
    def expires_at(self) -> int | None:
        return self.claims.get("exp")


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> AuthSession:
    """
    Validate the bearer token and load the active admin behind it.

    Raises:
        HTTPException 401: Missing, invalid, expired or signed-out token,
            or no active admin account for the token's email
    """
    if credentials is None:
        raise _unauthorized("NOT_AUTHENTICATED", "Silakan login terlebih dahulu.")

    payload = decode_token(credentials.credentials)
    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    if await is_token_revoked(payload.get("jti")):
        raise _unauthorized("TOKEN_REVOKED", "This session has been signed out.")

    email = payload.get("email")
    if not email:
        raise _unauthorized("INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims.")

    admin = await AdminUserRepository.get_active_by_email(db, email)
    if admin is None:
        logger.warning("Token presented for a missing or inactive admin account")
        raise _unauthorized("NOT_AN_ADMIN", "Unauthorized: not an active admin user.")

    return AuthSession(admin=admin, claims=payload)


async def get_current_admin(session: AuthSession = Depends(get_auth_session)) -> AdminUser:
    """
    FastAPI dependency returning the authenticated, active admin.

    Usage:
        @router.get("/admin/endpoint")
        async def endpoint(admin: AdminUser = Depends(get_current_admin)):
            ...
    """
    return session.admin


def require_permission(permission: Permission):
    """
    Build a dependency that also requires the admin's role to hold a permission.

    Usage:
        admin: AdminUser = Depends(require_permission(Permission.MANAGE_NEWS))

    Raises:
        HTTPException 403: If the role is not in the permission's allowlist
    """

    async def dependency(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
        if not has_permission(admin.role, permission):
            logger.warning(
                f"Access denied: admin {admin.id} with role '{admin.role.value}' "
                f"lacks '{permission.value}'"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "PERMISSION_DENIED",
                    "message": "Anda tidak memiliki akses ke fitur ini.",
                },
            )
        return admin

    return dependency


__all__ = [
    "AuthSession",
    "get_auth_session",
    "get_current_admin",
    "require_permission",
]
