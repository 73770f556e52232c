"""
Admin User Models

Back-office accounts. Public visitors and applicants never have accounts.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.modules.shared import BaseModel, pg_enum


class AdminRole(str, Enum):
    """Roles for back-office users."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EDITOR = "editor"


ROLE_LABELS = {
    AdminRole.SUPER_ADMIN: "Super Admin",
    AdminRole.ADMIN: "Admin",
    AdminRole.EDITOR: "Editor",
}


class AdminUser(BaseModel):
    """
    Back-office user.

    `is_active` gates every authenticated request, not only sign-in, so
    deactivating an account locks it out on its next request.
    """

    __tablename__ = "admin_users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    full_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    role: Mapped[AdminRole] = mapped_column(
        pg_enum(AdminRole, "admin_role"),
        nullable=False,
        default=AdminRole.EDITOR,
    )
    avatar_url: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<AdminUser(id={self.id}, email={self.email}, role={self.role.value})>"
