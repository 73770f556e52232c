"""
Unit tests for skill program request schemas.
"""

import pytest
from pydantic import ValidationError

from school_portal.modules.skills.schemas import SkillProgramCreate, SkillProgramUpdate


class TestSkillListFields:
    def test_lists_are_cleaned(self):
        data = SkillProgramCreate(
            name="TKJ",
            subjects=[" Jaringan ", "", "Jaringan", "Server"],
            facilities=["  "],
        )

        assert data.subjects == ["Jaringan", "Server"]
        assert data.facilities == []
        assert data.career_prospects == []

    def test_plain_string_is_rejected(self):
        with pytest.raises(ValidationError):
            SkillProgramCreate(name="TKJ", subjects="Jaringan")

    def test_non_string_item_is_rejected(self):
        with pytest.raises(ValidationError):
            SkillProgramCreate(name="TKJ", subjects=[1, "A"])

    def test_update_keeps_null_lists(self):
        assert SkillProgramUpdate(subjects=None).subjects is None

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            SkillProgramCreate(name="   ")
