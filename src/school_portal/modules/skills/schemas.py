"""Skill program schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from school_portal.modules.shared.schemas import clean_string_list


class SkillProgramResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    image_url: str | None = None
    duration_years: int
    subjects: list[str]
    facilities: list[str]
    career_prospects: list[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime


class _SkillListFields(BaseModel):
    @field_validator("subjects", "facilities", "career_prospects", check_fields=False)
    @classmethod
    def clean_lists(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        return clean_string_list(v)

    @field_validator("name", check_fields=False)
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Nama kompetensi wajib diisi")
        return v


class SkillProgramCreate(_SkillListFields):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    duration_years: int = Field(3, ge=1, le=6)
    subjects: list[str] = Field(default_factory=list)
    facilities: list[str] = Field(default_factory=list)
    career_prospects: list[str] = Field(default_factory=list)
    is_active: bool = True


class SkillProgramUpdate(_SkillListFields):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = Field(None, max_length=500)
    duration_years: int | None = Field(None, ge=1, le=6)
    subjects: list[str] | None = None
    facilities: list[str] | None = None
    career_prospects: list[str] | None = None
    is_active: bool | None = None


class SkillImageResponse(BaseModel):
    url: str
