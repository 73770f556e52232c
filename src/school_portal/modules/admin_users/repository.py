"""
Admin User Repository

Database operations for back-office accounts.
"""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.modules.admin_users.models import AdminRole, AdminUser

logger = logging.getLogger(__name__)


class AdminUserRepository:
    """Repository for admin user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        full_name: str,
        role: AdminRole,
        avatar_url: str | None = None,
        is_active: bool = True,
    ) -> AdminUser:
        """
        Create a new admin user record.

        Args:
            db: Database session
            email: Login email (unique, stored lower-cased)
            password_hash: Hashed password
            full_name: Display name
            role: Back-office role
            avatar_url: Optional avatar image URL
            is_active: Whether the account can sign in

        Returns:
            Created AdminUser instance
        """
        admin = AdminUser(
            email=email.lower(),
            password_hash=password_hash,
            full_name=full_name,
            role=role,
            avatar_url=avatar_url,
            is_active=is_active,
        )

        db.add(admin)
        await db.commit()
        await db.refresh(admin)

        logger.info(f"Created admin user: {admin.id} ({admin.role.value})")
        return admin

    @staticmethod
    async def get_by_id(db: AsyncSession, admin_id: UUID) -> AdminUser | None:
        return await db.get(AdminUser, admin_id)

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> AdminUser | None:
        """Get an admin user by email address (case-insensitive)."""
        result = await db.execute(select(AdminUser).where(AdminUser.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_active_by_email(db: AsyncSession, email: str) -> AdminUser | None:
        """Get an admin user by email only if the account is active."""
        result = await db.execute(
            select(AdminUser).where(
                AdminUser.email == email.lower(),
                AdminUser.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(
        db: AsyncSession, *, skip: int = 0, limit: int = 20
    ) -> tuple[list[AdminUser], int]:
        """List admin users, newest first, with total count."""
        total = (await db.execute(select(func.count()).select_from(AdminUser))).scalar() or 0
        result = await db.execute(
            select(AdminUser).order_by(AdminUser.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all()), total

    @staticmethod
    async def update(db: AsyncSession, admin: AdminUser, **fields) -> AdminUser:
        """Apply field updates to an admin user and commit."""
        for key, value in fields.items():
            if hasattr(admin, key):
                setattr(admin, key, value)

        await db.commit()
        await db.refresh(admin)
        return admin

    @staticmethod
    async def touch_last_login(db: AsyncSession, admin: AdminUser) -> None:
        admin.last_login = datetime.now(UTC)
        await db.commit()

    @staticmethod
    async def delete(db: AsyncSession, admin_id: UUID) -> None:
        await db.execute(delete(AdminUser).where(AdminUser.id == admin_id))
        await db.commit()
