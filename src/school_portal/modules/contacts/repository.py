"""
Contact Repository

Database operations for contact entries. `clear_primary` and `set_order`
only stage changes; the caller commits with `save` or `commit`.
"""

from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Contact, ContactType


async def list_ordered(db: AsyncSession) -> list[Contact]:
    result = await db.execute(select(Contact).order_by(Contact.order_index, Contact.created_at))
    return list(result.scalars().all())


async def get_by_id(db: AsyncSession, contact_id: UUID) -> Contact | None:
    return await db.get(Contact, contact_id)


async def get_many(db: AsyncSession, contact_ids: list[UUID]) -> list[Contact]:
    result = await db.execute(select(Contact).where(Contact.id.in_(contact_ids)))
    return list(result.scalars().all())


async def max_order_index(db: AsyncSession) -> int | None:
    result = await db.execute(select(func.max(Contact.order_index)))
    return result.scalar()


async def clear_primary(db: AsyncSession, contact_type: ContactType, exclude_id: UUID) -> None:
    """Unset `is_primary` on every other contact of a type (not committed)."""
    await db.execute(
        update(Contact)
        .where(
            Contact.type == contact_type,
            Contact.id != exclude_id,
            Contact.is_primary.is_(True),
        )
        .values(is_primary=False)
    )


async def save(db: AsyncSession, contact: Contact) -> Contact:
    """Commit the contact together with anything staged in the same session."""
    db.add(contact)
    await db.commit()
    await db.refresh(contact)
    return contact


async def commit(db: AsyncSession) -> None:
    await db.commit()


async def delete_by_id(db: AsyncSession, contact_id: UUID) -> None:
    await db.execute(delete(Contact).where(Contact.id == contact_id))
    await db.commit()
