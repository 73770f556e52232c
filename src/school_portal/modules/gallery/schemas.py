"""Gallery schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from school_portal.modules.gallery.models import GalleryCategory, MediaType


class GalleryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    media_type: MediaType
    media_url: str
    category: GalleryCategory
    is_featured: bool
    created_at: datetime
    updated_at: datetime


class GalleryItemFields(BaseModel):
    """Metadata sent with a gallery upload (multipart form fields)."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    category: GalleryCategory = GalleryCategory.ACTIVITY
    is_featured: bool = False


class GalleryItemUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    category: GalleryCategory | None = None
    is_featured: bool | None = None
