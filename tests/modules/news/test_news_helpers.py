"""
Unit tests for news slug generation.
"""

import pytest

from school_portal.modules.news.helpers import SLUG_FALLBACK, generate_slug, numbered_slug


class TestGenerateSlug:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Juara 1 Lomba LKS 2024!", "juara-1-lomba-lks-2024"),
            ("  --Info   PPDB--  ", "info-ppdb"),
            ("Kunjungan Industri ke PT. Maju", "kunjungan-industri-ke-pt-maju"),
            ("a - b", "a-b"),
            ("Ujian   Akhir\tSemester", "ujian-akhirsemester"),
        ],
    )
    def test_examples(self, title, expected):
        assert generate_slug(title) == expected

    @pytest.mark.parametrize("title", ["", "   ", "!!!", "—", None])
    def test_fallback(self, title):
        assert generate_slug(title) == SLUG_FALLBACK

    def test_idempotent(self):
        slug = generate_slug("Pentas Seni & Budaya 2025")
        assert generate_slug(slug) == slug

    def test_deterministic(self):
        assert generate_slug("Upacara HUT RI") == generate_slug("Upacara HUT RI")

    def test_only_allowed_characters(self):
        slug = generate_slug("Hari Guru: \"Terima kasih\", Bapak/Ibu!")
        assert slug == "hari-guru-terima-kasih-bapakibu"


class TestNumberedSlug:
    def test_candidates(self):
        assert [numbered_slug("info", n) for n in range(3)] == ["info", "info-1", "info-2"]
