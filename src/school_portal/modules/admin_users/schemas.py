"""Admin user schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from school_portal.modules.admin_users.models import AdminRole


class AdminUserResponse(BaseModel):
    """Admin account as returned by the API (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: str
    role: AdminRole
    avatar_url: str | None = None
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime


class AdminUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: AdminRole = AdminRole.EDITOR
    avatar_url: str | None = Field(None, max_length=500)


class AdminUserUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=200)
    role: AdminRole | None = None
    avatar_url: str | None = Field(None, max_length=500)
