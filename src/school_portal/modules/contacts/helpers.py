"""Contact entry validation."""

from school_portal.core.validators import is_valid_contact_phone, is_valid_email
from school_portal.modules.contacts.models import ContactType


def validate_contact(
    type_: ContactType | str | None, label: str | None, value: str | None
) -> dict[str, str]:
    """
    Check a contact entry.

    Returns:
        Field name -> message; empty when the entry is valid
    """
    errors: dict[str, str] = {}

    if not type_:
        errors["type"] = "Tipe kontak harus dipilih"
    if not (label or "").strip():
        errors["label"] = "Label harus diisi"

    value = (value or "").strip()
    if not value:
        errors["value"] = "Nilai kontak harus diisi"
    elif type_ == ContactType.EMAIL and not is_valid_email(value):
        errors["value"] = "Format email tidak valid"
    elif type_ == ContactType.PHONE and not is_valid_contact_phone(value):
        errors["value"] = "Format nomor telepon tidak valid"

    return errors
