"""
Unit tests for form validation rules and upload checks.
"""

import pytest

from school_portal.core.validators import (
    ADMISSION_DOCUMENT_RULE,
    ADMISSION_PHOTO_RULE,
    GALLERY_MEDIA_RULE,
    MB,
    NEWS_IMAGE_RULE,
    file_extension,
    format_file_size,
    is_valid_contact_phone,
    is_valid_email,
    is_valid_phone,
    validate_upload,
)


class TestEmailValidation:
    @pytest.mark.parametrize("value", ["siswa@example.com", "a.b+c@sekolah.sch.id"])
    def test_valid_emails(self, value):
        assert is_valid_email(value) is True

    @pytest.mark.parametrize(
        "value", ["", None, "no-at-sign", "a@b", "a b@c.com", "a@b .com", "a@b.co\n"]
    )
    def test_invalid_emails(self, value):
        assert is_valid_email(value) is False


class TestPhoneValidation:
    @pytest.mark.parametrize(
        "value", ["081234567890", "+6281234567890", "6281234567890", "0812 3456 7890"]
    )
    def test_valid_indonesian_numbers(self, value):
        assert is_valid_phone(value) is True

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "12345",
            "0012345678",
            "+1 555 0100",
            "08abc45678",
            "08\u0661\u0662\u0663\u0664\u0665\u0666\u0667\u0668\u0669",
        ],
    )
    def test_invalid_numbers(self, value):
        assert is_valid_phone(value) is False

    def test_contact_phone_allows_formatting(self):
        assert is_valid_contact_phone("(021) 555-0123") is True
        assert is_valid_contact_phone("+62 21 555 0123") is True
        assert is_valid_contact_phone("call us") is False
        assert is_valid_contact_phone("\u0660\u0662\u0661") is False


class TestUploadValidation:
    def test_accepts_pdf_document(self):
        assert validate_upload("ijazah.PDF", "application/pdf", MB, ADMISSION_DOCUMENT_RULE) == []

    def test_photo_rejects_pdf(self):
        errors = validate_upload("foto.pdf", "application/pdf", MB, ADMISSION_PHOTO_RULE)
        assert errors == ["Tipe file foto.pdf tidak didukung"]

    def test_rejects_too_large(self):
        errors = validate_upload("ktp.jpg", "image/jpeg", 5 * MB + 1, ADMISSION_DOCUMENT_RULE)
        assert errors == ["File ktp.jpg terlalu besar. Maksimal 5 MB"]

    def test_exact_limit_is_allowed(self):
        assert validate_upload("ktp.jpg", "image/jpeg", 5 * MB, ADMISSION_DOCUMENT_RULE) == []

    def test_rejects_empty_file(self):
        errors = validate_upload("kk.png", "image/png", 0, ADMISSION_DOCUMENT_RULE)
        assert errors == ["File kk.png kosong"]

    def test_mime_rule_checks_content_type(self):
        assert validate_upload("a.webp", "image/webp", 1024, NEWS_IMAGE_RULE) == []
        assert validate_upload("a.png", "text/plain", 1024, NEWS_IMAGE_RULE) == [
            "Tipe file a.png tidak didukung"
        ]

    @pytest.mark.parametrize("filename", ["pwn.html", "a.svg", "a.bin", "noext"])
    def test_image_rule_requires_image_extension(self, filename):
        assert validate_upload(filename, "image/png", 1024, NEWS_IMAGE_RULE) == [
            f"Tipe file {filename} tidak didukung"
        ]

    def test_gallery_accepts_video(self):
        assert validate_upload("clip.mp4", "video/mp4", 9 * MB, GALLERY_MEDIA_RULE) == []

    def test_reports_size_and_type_together(self):
        errors = validate_upload("x.exe", None, 3 * MB, NEWS_IMAGE_RULE)
        assert len(errors) == 2


class TestHelpers:
    def test_file_extension(self):
        assert file_extension("Foto.JPEG") == ".jpeg"
        assert file_extension("archive.tar.gz") == ".gz"
        assert file_extension("noext") == ""
        assert file_extension(None) == ""

    def test_format_file_size(self):
        assert format_file_size(0) == "0 Bytes"
        assert format_file_size(512) == "512 Bytes"
        assert format_file_size(1536) == "1.5 KB"
        assert format_file_size(2 * MB) == "2 MB"
