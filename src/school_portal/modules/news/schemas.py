"""News schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_portal.modules.news.models import NewsCategory


class NewsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    excerpt: str | None = None
    content: str
    category: NewsCategory
    featured_image_url: str | None = None
    is_published: bool
    is_featured: bool
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class NewsCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    excerpt: str | None = None
    content: str = Field(..., min_length=1)
    category: NewsCategory = NewsCategory.NEWS
    featured_image_url: str | None = Field(None, max_length=500)
    is_published: bool = False
    is_featured: bool = False

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Wajib diisi")
        return v.strip()


class NewsUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=300)
    excerpt: str | None = None
    content: str | None = Field(None, min_length=1)
    category: NewsCategory | None = None
    featured_image_url: str | None = Field(None, max_length=500)
    is_published: bool | None = None
    is_featured: bool | None = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Wajib diisi")
        return v.strip() if v else v


class NewsImageResponse(BaseModel):
    url: str
