"""
Contacts Service

Contact entries with per-type primary flags and a manual display order.

Making a contact primary clears the flag on the other contacts of its type
in the same commit, so each type has at most one primary contact.
"""

import logging
import uuid
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.modules.contacts import repository
from school_portal.modules.contacts.helpers import validate_contact
from school_portal.modules.contacts.models import Contact
from school_portal.modules.contacts.schemas import ContactCreate, ContactUpdate
from school_portal.modules.shared import NotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)


def _check(type_, label, value) -> None:
    errors = validate_contact(type_, label, value)
    if errors:
        raise ValidationFailedError(next(iter(errors.values())), errors=errors)


async def list_contacts(db: AsyncSession) -> list[Contact]:
    return await repository.list_ordered(db)


async def get_contact(db: AsyncSession, contact_id: UUID) -> Contact:
    contact = await repository.get_by_id(db, contact_id)
    if contact is None:
        raise NotFoundError("Contact", contact_id)
    return contact


async def create_contact(db: AsyncSession, data: ContactCreate) -> Contact:
    """
    Create a contact. Without an explicit position it goes to the end of the list.

    Raises:
        ValidationFailedError: Blank label/value or malformed email/phone
    """
    _check(data.type, data.label, data.value)

    order_index = data.order_index
    if order_index is None:
        current_max = await repository.max_order_index(db)
        order_index = 0 if current_max is None else current_max + 1

    contact = Contact(
        id=uuid.uuid4(),
        type=data.type,
        label=data.label.strip(),
        value=data.value.strip(),
        icon=data.icon,
        order_index=order_index,
        is_primary=data.is_primary,
    )
    if contact.is_primary:
        await repository.clear_primary(db, contact.type, exclude_id=contact.id)

    saved = await repository.save(db, contact)
    logger.info(f"Created contact {saved.id} ({saved.type.value})")
    return saved


async def update_contact(db: AsyncSession, contact_id: UUID, data: ContactUpdate) -> Contact:
    """
    Update a contact.

    A primary contact that ends up primary (including one moved to another
    type) clears the other primaries of its resulting type.
    """
    contact = await get_contact(db, contact_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if "icon" in data.model_fields_set:
        changes["icon"] = data.icon

    new_type = changes.get("type", contact.type)
    new_label = changes.get("label", contact.label)
    new_value = changes.get("value", contact.value)
    _check(new_type, new_label, new_value)

    if changes.get("is_primary", contact.is_primary):
        await repository.clear_primary(db, new_type, exclude_id=contact.id)

    for key, value in changes.items():
        if key in ("label", "value"):
            value = value.strip()
        setattr(contact, key, value)

    return await repository.save(db, contact)


async def set_contact_primary(db: AsyncSession, contact_id: UUID, is_primary: bool) -> Contact:
    """Set or clear the primary flag; setting it clears the other primaries of the type."""
    contact = await get_contact(db, contact_id)
    if is_primary:
        await repository.clear_primary(db, contact.type, exclude_id=contact.id)

    contact.is_primary = is_primary
    saved = await repository.save(db, contact)
    logger.info(f"Contact {contact_id} primary={is_primary} for type {saved.type.value}")
    return saved


async def reorder_contacts(db: AsyncSession, contact_ids: list[UUID]) -> list[Contact]:
    """
    Give the listed contacts order_index 0..n-1 in the order given, in one commit.

    Raises:
        ValidationFailedError: An id is listed twice
        NotFoundError: An id does not exist
    """
    if len(set(contact_ids)) != len(contact_ids):
        raise ValidationFailedError(
            "Daftar kontak berisi duplikat", errors={"ids": "Setiap kontak hanya boleh sekali"}
        )

    contacts = {c.id: c for c in await repository.get_many(db, contact_ids)}
    for contact_id in contact_ids:
        if contact_id not in contacts:
            raise NotFoundError("Contact", contact_id)

    for index, contact_id in enumerate(contact_ids):
        contacts[contact_id].order_index = index

    await repository.commit(db)
    return await repository.list_ordered(db)


async def delete_contact(db: AsyncSession, contact_id: UUID) -> None:
    await get_contact(db, contact_id)
    await repository.delete_by_id(db, contact_id)
    logger.info(f"Deleted contact {contact_id}")
