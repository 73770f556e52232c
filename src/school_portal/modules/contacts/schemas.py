"""Contact schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_portal.modules.contacts.models import ContactType


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: ContactType
    label: str
    value: str
    icon: str | None = None
    order_index: int
    is_primary: bool
    created_at: datetime
    updated_at: datetime


class ContactCreate(BaseModel):
    type: ContactType
    label: str = Field(..., max_length=100)
    value: str
    icon: str | None = Field(None, max_length=100)
    order_index: int | None = Field(None, ge=0)
    is_primary: bool = False

    @field_validator("icon")
    @classmethod
    def blank_icon_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ContactUpdate(BaseModel):
    type: ContactType | None = None
    label: str | None = Field(None, max_length=100)
    value: str | None = None
    icon: str | None = Field(None, max_length=100)
    order_index: int | None = Field(None, ge=0)
    is_primary: bool | None = None

    @field_validator("icon")
    @classmethod
    def blank_icon_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ContactOrderRequest(BaseModel):
    """Contact ids in their new display order."""

    ids: list[UUID] = Field(..., min_length=1)
