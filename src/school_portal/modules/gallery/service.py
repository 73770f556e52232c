"""
Gallery Service

Gallery items are created from an uploaded file; the media type follows the
file's MIME family. Replacing or deleting an item also removes its stored
object.
"""

import logging
import secrets
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.storage import LocalObjectStorage, StorageBuckets, StorageError
from school_portal.core.validators import GALLERY_MEDIA_RULE
from school_portal.modules.gallery import repository
from school_portal.modules.gallery.models import GalleryCategory, GalleryItem, MediaType
from school_portal.modules.gallery.schemas import GalleryItemFields, GalleryItemUpdate
from school_portal.modules.shared import NotFoundError
from school_portal.modules.shared.uploads import UploadedFile, store_upload, timestamp_ms

logger = logging.getLogger(__name__)


def media_type_for(content_type: str | None) -> MediaType:
    return MediaType.VIDEO if (content_type or "").lower().startswith("video/") else MediaType.IMAGE


def _object_path(upload: UploadedFile) -> str:
    return f"{timestamp_ms()}-{secrets.token_hex(4)}{upload.extension}"


async def _store(storage: LocalObjectStorage, upload: UploadedFile) -> tuple[str, str]:
    path = _object_path(upload)
    url = await store_upload(storage, StorageBuckets.GALLERY, path, upload, GALLERY_MEDIA_RULE)
    return path, url


async def _remove_object(storage: LocalObjectStorage, path: str | None) -> None:
    if not path:
        return
    try:
        await storage.delete(StorageBuckets.GALLERY, [path])
    except StorageError as e:
        logger.warning(f"Could not delete gallery object {path}: {e}")


async def list_gallery(
    db: AsyncSession,
    *,
    category: GalleryCategory | None = None,
    featured_only: bool = False,
    search: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> tuple[list[GalleryItem], int]:
    return await repository.list_items(
        db,
        category=category,
        featured_only=featured_only,
        search=search,
        skip=skip,
        limit=limit,
    )


async def get_gallery_item(db: AsyncSession, item_id: UUID) -> GalleryItem:
    item = await repository.get_by_id(db, item_id)
    if item is None:
        raise NotFoundError("Gallery item", item_id)
    return item


async def create_gallery_item(
    db: AsyncSession,
    storage: LocalObjectStorage,
    fields: GalleryItemFields,
    upload: UploadedFile,
) -> GalleryItem:
    """
    Store the file, then insert the row. The object is removed again if the insert fails.

    Raises:
        ValidationFailedError: File empty, too large or not an image/video
        StorageFailureError: The object could not be stored
    """
    path, url = await _store(storage, upload)
    try:
        item = await repository.create(
            db,
            {
                **fields.model_dump(),
                "media_type": media_type_for(upload.content_type),
                "media_url": url,
                "storage_path": path,
            },
        )
    except Exception:
        await _remove_object(storage, path)
        raise

    logger.info(f"Created gallery item {item.id} ({item.media_type.value})")
    return item


async def update_gallery_item(
    db: AsyncSession,
    storage: LocalObjectStorage,
    item_id: UUID,
    data: GalleryItemUpdate,
    upload: UploadedFile | None = None,
) -> GalleryItem:
    """
    Update metadata and optionally replace the file.

    A replacement is stored first; the previous object is deleted only after
    the row points at the new one.
    """
    item = await get_gallery_item(db, item_id)
    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}

    old_path = item.storage_path
    new_path = None
    if upload is not None:
        new_path, url = await _store(storage, upload)
        changes.update(
            media_type=media_type_for(upload.content_type),
            media_url=url,
            storage_path=new_path,
        )

    try:
        updated = await repository.update(db, item, changes)
    except Exception:
        await _remove_object(storage, new_path)
        raise

    if new_path is not None:
        await _remove_object(storage, old_path)
    return updated


async def set_gallery_featured(db: AsyncSession, item_id: UUID, is_featured: bool) -> GalleryItem:
    item = await get_gallery_item(db, item_id)
    return await repository.update(db, item, {"is_featured": is_featured})


async def delete_gallery_item(db: AsyncSession, storage: LocalObjectStorage, item_id: UUID) -> None:
    item = await get_gallery_item(db, item_id)
    path = item.storage_path

    await repository.delete_by_id(db, item_id)
    await _remove_object(storage, path)
    logger.info(f"Deleted gallery item {item_id}")
