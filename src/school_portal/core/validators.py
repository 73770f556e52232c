"""
Form Validation Rules

Format checks shared by the schemas (email, phone) and the upload rules
applied before anything is written to object storage.
"""

import re
from dataclasses import dataclass
from pathlib import PurePosixPath

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Indonesian numbers: +62 / 62 / 0 prefix, then 8-12 digits not starting with 0 or 1
PHONE_RE = re.compile(r"(\+62|62|0)[2-9][0-9]{7,11}")

# Contact entries may hold formatted numbers, e.g. "(021) 555-0123"
CONTACT_PHONE_RE = re.compile(r"[0-9\s\-+()]+")

MB = 1024 * 1024


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return EMAIL_RE.fullmatch(value) is not None


def is_valid_phone(value: str | None) -> bool:
    if not value:
        return False
    return PHONE_RE.fullmatch(re.sub(r"\s", "", value)) is not None


def is_valid_contact_phone(value: str | None) -> bool:
    if not value:
        return False
    return CONTACT_PHONE_RE.fullmatch(value) is not None


@dataclass(frozen=True)
class UploadRule:
    """
    Size and type constraints for one kind of upload.

    `extensions` is checked against the file name and `mime_prefixes` against
    the declared MIME type (e.g. "image/"). When both are set both must pass;
    the stored object keeps the file name's extension, which decides how it
    is served.
    """

    max_size: int
    extensions: frozenset[str] = frozenset()
    mime_prefixes: tuple[str, ...] = ()


ADMISSION_DOCUMENT_RULE = UploadRule(
    max_size=5 * MB,
    extensions=frozenset({".jpg", ".jpeg", ".png", ".pdf"}),
)
ADMISSION_PHOTO_RULE = UploadRule(
    max_size=5 * MB,
    extensions=frozenset({".jpg", ".jpeg", ".png"}),
)
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"})
VIDEO_EXTENSIONS = frozenset({".mp4", ".webm", ".mov"})

NEWS_IMAGE_RULE = UploadRule(
    max_size=2 * MB, extensions=IMAGE_EXTENSIONS, mime_prefixes=("image/",)
)
SKILL_IMAGE_RULE = UploadRule(
    max_size=2 * MB, extensions=IMAGE_EXTENSIONS, mime_prefixes=("image/",)
)
PROFILE_IMAGE_RULE = UploadRule(
    max_size=5 * MB, extensions=IMAGE_EXTENSIONS, mime_prefixes=("image/",)
)
GALLERY_MEDIA_RULE = UploadRule(
    max_size=10 * MB,
    extensions=IMAGE_EXTENSIONS | VIDEO_EXTENSIONS,
    mime_prefixes=("image/", "video/"),
)


def format_file_size(size: int) -> str:
    """Human readable size, e.g. 5242880 -> '5 MB'."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(units) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f}".rstrip("0").rstrip(".") + f" {units[unit]}"


def file_extension(filename: str | None) -> str:
    """Lower-cased extension including the dot, or '' when there is none."""
    if not filename:
        return ""
    return PurePosixPath(filename).suffix.lower()


def validate_upload(
    filename: str | None,
    content_type: str | None,
    size: int,
    rule: UploadRule,
) -> list[str]:
    """
    Check one uploaded file against a rule.

    Returns:
        List of error messages; empty when the file is acceptable
    """
    errors: list[str] = []
    name = filename or "file"

    if size <= 0:
        errors.append(f"File {name} kosong")
    elif size > rule.max_size:
        errors.append(f"File {name} terlalu besar. Maksimal {format_file_size(rule.max_size)}")

    type_ok = True
    if rule.extensions:
        type_ok = file_extension(filename) in rule.extensions
    if rule.mime_prefixes:
        mime = (content_type or "").lower()
        type_ok = type_ok and any(mime.startswith(prefix) for prefix in rule.mime_prefixes)

    if not type_ok:
        errors.append(f"Tipe file {name} tidak didukung")

    return errors
