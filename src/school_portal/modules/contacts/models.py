"""
Contact Models

Contact entries (phone numbers, emails, addresses, social accounts) shown on
the contact page and footer.
"""

import enum

from sqlalchemy import Boolean, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.modules.shared import BaseModel, pg_enum


class ContactType(str, enum.Enum):
    PHONE = "phone"
    EMAIL = "email"
    LOCATION = "location"
    SOCIAL = "social"


class Contact(BaseModel):
    """
    A contact entry.

    At most one contact per type is primary; the partial unique index
    enforces it at the database level.
    """

    __tablename__ = "contacts"

    type: Mapped[ContactType] = mapped_column(
        pg_enum(ContactType, "contact_type"),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_contacts_order_index", "order_index"),
        Index(
            "uq_contacts_primary_per_type",
            "type",
            unique=True,
            postgresql_where=text("is_primary"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, type={self.type.value}, primary={self.is_primary})>"
