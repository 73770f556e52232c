"""School profile schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_portal.core.validators import is_valid_email


class ProfileImageKind(str, Enum):
    LOGO = "logo"
    HEADER = "header"


class SchoolProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    vision: str | None = None
    mission: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    logo_url: str | None = None
    header_image_url: str | None = None
    established_year: int | None = None
    accreditation: str | None = None
    updated_at: datetime


class SchoolProfileUpdate(BaseModel):
    """Full profile form. Saving replaces every field of the singleton row."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    vision: str | None = None
    mission: str | None = None
    address: str | None = None
    phone: str | None = Field(None, max_length=50)
    email: str | None = Field(None, max_length=255)
    website: str | None = Field(None, max_length=255)
    logo_url: str | None = Field(None, max_length=500)
    header_image_url: str | None = Field(None, max_length=500)
    established_year: int | None = Field(None, ge=1800, le=2100)
    accreditation: str | None = Field(None, max_length=10)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Nama sekolah wajib diisi")
        return v

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str | None) -> str | None:
        if v and not is_valid_email(v):
            raise ValueError("Format email tidak valid")
        return v or None


class ProfileImageResponse(BaseModel):
    kind: ProfileImageKind
    url: str
