"""
Unit tests for shared schema helpers.
"""

from school_portal.modules.shared.schemas import clamp_pagination, clean_string_list


class TestCleanStringList:
    def test_trims_and_drops_blanks(self):
        assert clean_string_list(["  Jaringan ", "", "   ", "Server"]) == ["Jaringan", "Server"]

    def test_removes_duplicates_keeping_first_position(self):
        assert clean_string_list(["B", "A", " B", "C", "A "]) == ["B", "A", "C"]

    def test_none_is_empty(self):
        assert clean_string_list(None) == []


class TestClampPagination:
    def test_bounds(self):
        assert clamp_pagination(-5, 0) == (0, 1)
        assert clamp_pagination(10, 500) == (10, 100)
