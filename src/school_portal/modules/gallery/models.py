"""
Gallery Models

Photos and videos of facilities, activities, achievements and events.
"""

import enum

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.modules.shared import BaseModel, pg_enum


class MediaType(str, enum.Enum):
    IMAGE = "image"
    VIDEO = "video"


class GalleryCategory(str, enum.Enum):
    FACILITY = "facility"
    ACTIVITY = "activity"
    ACHIEVEMENT = "achievement"
    EVENT = "event"


class GalleryItem(BaseModel):
    """A stored photo or video. `storage_path` is the object path in the gallery bucket."""

    __tablename__ = "gallery"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_type: Mapped[MediaType] = mapped_column(
        pg_enum(MediaType, "gallery_media_type"),
        nullable=False,
    )
    media_url: Mapped[str] = mapped_column(String(500), nullable=False)
    storage_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    category: Mapped[GalleryCategory] = mapped_column(
        pg_enum(GalleryCategory, "gallery_category"),
        nullable=False,
        default=GalleryCategory.ACTIVITY,
        index=True,
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<GalleryItem(id={self.id}, type={self.media_type.value}, title={self.title})>"
