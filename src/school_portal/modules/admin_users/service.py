"""
Admin Users Service

Account management for super admins. Sign-in lives in the auth module.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.security import hash_password
from school_portal.modules.admin_users.models import AdminUser
from school_portal.modules.admin_users.repository import AdminUserRepository
from school_portal.modules.admin_users.schemas import AdminUserCreate, AdminUserUpdate
from school_portal.modules.shared import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class SelfModificationError(ConflictError):
    """Raised when an admin tries to deactivate or delete their own account."""

    def __init__(self, action: str):
        super().__init__(
            message=f"You cannot {action} your own account.",
            error_code="SELF_MODIFICATION",
        )


async def _get_or_404(db: AsyncSession, admin_id: UUID) -> AdminUser:
    admin = await AdminUserRepository.get_by_id(db, admin_id)
    if not admin:
        raise NotFoundError("Admin user", admin_id)
    return admin


async def list_admin_users(
    db: AsyncSession, *, skip: int = 0, limit: int = 20
) -> tuple[list[AdminUser], int]:
    return await AdminUserRepository.list_all(db, skip=skip, limit=limit)


async def create_admin_user(db: AsyncSession, data: AdminUserCreate) -> AdminUser:
    """
    Create a back-office account.

    Raises:
        ConflictError: If the email is already registered
    """
    if await AdminUserRepository.get_by_email(db, data.email):
        raise ConflictError(
            f"An admin with email {data.email} already exists.",
            error_code="DUPLICATE_EMAIL",
        )

    return await AdminUserRepository.create(
        db,
        email=data.email,
        password_hash=hash_password(data.password),
        full_name=data.full_name,
        role=data.role,
        avatar_url=data.avatar_url,
    )


async def update_admin_user(db: AsyncSession, admin_id: UUID, data: AdminUserUpdate) -> AdminUser:
    admin = await _get_or_404(db, admin_id)
    changes = data.model_dump(exclude_unset=True)
    updated = await AdminUserRepository.update(db, admin, **changes)
    logger.info(f"Updated admin user {admin_id}: {sorted(changes)}")
    return updated


async def set_admin_active(
    db: AsyncSession, admin_id: UUID, is_active: bool, *, acting_admin_id: UUID
) -> AdminUser:
    """
    Activate or deactivate an account.

    Raises:
        SelfModificationError: If an admin tries to deactivate themselves
    """
    if admin_id == acting_admin_id and not is_active:
        raise SelfModificationError("deactivate")

    admin = await _get_or_404(db, admin_id)
    updated = await AdminUserRepository.update(db, admin, is_active=is_active)
    logger.info(f"Admin {acting_admin_id} set admin {admin_id} active={is_active}")
    return updated


async def delete_admin_user(db: AsyncSession, admin_id: UUID, *, acting_admin_id: UUID) -> None:
    if admin_id == acting_admin_id:
        raise SelfModificationError("delete")

    await _get_or_404(db, admin_id)
    await AdminUserRepository.delete(db, admin_id)
    logger.info(f"Admin {acting_admin_id} deleted admin {admin_id}")
