"""
School Profile Service

Reads and upserts the singleton profile and stores its logo and header images.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.storage import LocalObjectStorage, StorageBuckets
from school_portal.core.validators import PROFILE_IMAGE_RULE
from school_portal.modules.profile import repository
from school_portal.modules.profile.models import SchoolProfile
from school_portal.modules.profile.schemas import ProfileImageKind, SchoolProfileUpdate
from school_portal.modules.shared import NotFoundError
from school_portal.modules.shared.uploads import (
    UploadedFile,
    discard_object,
    store_upload,
    timestamp_ms,
)

logger = logging.getLogger(__name__)

IMAGE_COLUMNS = {
    ProfileImageKind.LOGO: "logo_url",
    ProfileImageKind.HEADER: "header_image_url",
}


async def get_profile(db: AsyncSession) -> SchoolProfile | None:
    return await repository.get(db)


async def get_public_profile(db: AsyncSession) -> SchoolProfile:
    """
    Profile for the public site.

    Raises:
        NotFoundError: If the profile has not been set up yet
    """
    profile = await repository.get(db)
    if profile is None:
        raise NotFoundError("School profile")
    return profile


async def save_profile(db: AsyncSession, data: SchoolProfileUpdate) -> SchoolProfile:
    """Create the profile on first save, update it afterwards."""
    profile = await repository.upsert(db, data.model_dump())
    logger.info(f"School profile saved: {profile.id}")
    return profile


async def upload_profile_image(
    db: AsyncSession,
    storage: LocalObjectStorage,
    kind: ProfileImageKind,
    upload: UploadedFile,
) -> str:
    """
    Store a logo or header image and point the profile at it.

    The image is stored under `school/<kind>_<ms>.<ext>`. When no profile
    exists yet the URL is only returned, to be sent with the first save.
    A replaced image of our own is deleted once the profile points at the
    new one.

    Returns:
        Public URL of the stored image

    Raises:
        ValidationFailedError: Wrong type or too large
        StorageFailureError: The object could not be stored
    """
    path = f"school/{kind.value}_{timestamp_ms()}{upload.extension}"
    url = await store_upload(
        storage, StorageBuckets.SCHOOL_IMAGES, path, upload, PROFILE_IMAGE_RULE
    )

    profile = await repository.get(db)
    if profile is not None:
        column = IMAGE_COLUMNS[kind]
        previous = getattr(profile, column)
        await repository.set_image_url(db, profile, column, url)

        previous_path = storage.path_from_public_url(StorageBuckets.SCHOOL_IMAGES, previous)
        if previous_path and previous_path.startswith("school/") and previous != url:
            await discard_object(storage, StorageBuckets.SCHOOL_IMAGES, previous)

    return url
