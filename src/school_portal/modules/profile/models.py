"""
School Profile Model

A single row describing the school: identity, vision and mission, contact
summary and the logo/header images shown on the public site.
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.modules.shared import BaseModel


class SchoolProfile(BaseModel):
    """The school profile. The table holds at most one row."""

    __tablename__ = "school_profile"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    vision: Mapped[str | None] = mapped_column(Text, nullable=True)
    mission: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    header_image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    established_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    accreditation: Mapped[str | None] = mapped_column(String(10), nullable=True)

    def __repr__(self) -> str:
        return f"<SchoolProfile(id={self.id}, name={self.name})>"
