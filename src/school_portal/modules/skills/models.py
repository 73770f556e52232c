"""
Skill Program Models

Vocational programs (Kompetensi Keahlian) offered by the school and chosen
by applicants on the PPDB form.
"""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.modules.shared import BaseModel


class SkillProgram(BaseModel):
    """A study program. Inactive programs are hidden from the public site and the PPDB form."""

    __tablename__ = "skills"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    duration_years: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    subjects: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    facilities: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    career_prospects: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<SkillProgram(id={self.id}, name={self.name}, active={self.is_active})>"
