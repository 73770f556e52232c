"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from school_portal.core.permissions import Permission
from school_portal.modules.admin_users.schemas import AdminUserResponse


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    admin: AdminUserResponse


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class MeResponse(AdminUserResponse):
    """The signed-in admin plus what their role may do."""

    permissions: list[Permission]


class MeUpdate(BaseModel):
    full_name: str | None = Field(None, min_length=1, max_length=200)
    avatar_url: str | None = Field(None, max_length=500)


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)


class MenuItem(BaseModel):
    path: str
    label: str
    children: list["MenuItem"] = []


class MenuResponse(BaseModel):
    items: list[MenuItem]
