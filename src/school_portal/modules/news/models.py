"""
News Models

News items, announcements and events published on the public site.
"""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.modules.shared import BaseModel, pg_enum


class NewsCategory(str, enum.Enum):
    NEWS = "news"
    ANNOUNCEMENT = "announcement"
    EVENT = "event"


class NewsItem(BaseModel):
    """
    A news item addressed by its slug.

    The slug is derived from the title and unique across all items;
    `published_at` is set when the item is published.
    """

    __tablename__ = "news"

    title: Mapped[str] = mapped_column(String(300), nullable=False)
    slug: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[NewsCategory] = mapped_column(
        pg_enum(NewsCategory, "news_category"),
        nullable=False,
        default=NewsCategory.NEWS,
    )
    featured_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_news_published", "is_published", "published_at"),)

    def __repr__(self) -> str:
        return f"<NewsItem(id={self.id}, slug={self.slug}, published={self.is_published})>"
