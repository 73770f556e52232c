"""
Admission Background Jobs

Purges document folders in the ppdb-documents bucket that no registration
references. They are left behind when a submission fails after some
documents were stored and the inline cleanup could not finish (process
killed, storage error during cleanup).

- Runs hourly; can also be triggered manually via the debug job endpoints
- Only folders older than ORPHAN_DOCUMENT_GRACE_HOURS are touched, so
  submissions still in flight are never affected
- Idempotent and handles its own database session
"""

import logging
import time
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from school_portal.core.config import settings
from school_portal.core.database import async_session_maker
from school_portal.core.scheduler import register_job
from school_portal.core.storage import LocalObjectStorage, StorageBuckets, StorageError, get_storage
from school_portal.modules.admissions import repository

logger = logging.getLogger(__name__)

JOB_ID_PURGE_ORPHANED_DOCUMENTS = "admissions_purge_orphaned_documents"


async def _folder_ages(storage: LocalObjectStorage) -> dict[str, float]:
    """Registration-number folder -> newest object mtime in it."""
    newest: dict[str, float] = {}
    for path in await storage.list_paths(StorageBuckets.PPDB_DOCUMENTS):
        folder, _, rest = path.partition("/")
        if not rest:
            continue
        mtime = await storage.modified_at(StorageBuckets.PPDB_DOCUMENTS, path)
        newest[folder] = max(mtime, newest.get(folder, 0.0))
    return newest


async def purge_orphaned_documents(
    storage: LocalObjectStorage | None = None,
    grace_hours: int | None = None,
) -> dict[str, Any]:
    """
    Delete document folders older than the grace period with no registration row.

    Returns:
        Dict with the number of folders scanned and the folders deleted
    """
    storage = storage or get_storage()
    grace_hours = settings.orphan_document_grace_hours if grace_hours is None else grace_hours
    cutoff = time.time() - grace_hours * 3600

    folders = await _folder_ages(storage)
    candidates = [folder for folder, mtime in folders.items() if mtime < cutoff]

    if not candidates:
        logger.info(f"Orphaned document purge: scanned {len(folders)} folder(s), nothing to do")
        return {"scanned": len(folders), "deleted": []}

    async with async_session_maker() as db:
        referenced = await repository.existing_registration_numbers(db, candidates)

    orphans = sorted(set(candidates) - referenced)
    deleted = []
    for folder in orphans:
        try:
            await storage.delete(StorageBuckets.PPDB_DOCUMENTS, [folder])
            deleted.append(folder)
        except StorageError as e:
            logger.error(f"Failed to purge orphaned documents in {folder}: {e}")

    logger.info(
        f"Orphaned document purge: scanned {len(folders)} folder(s), deleted {len(deleted)}"
    )
    return {"scanned": len(folders), "deleted": deleted}


def register_admission_jobs() -> None:
    """Register admission jobs with the scheduler. Call during startup."""
    register_job(
        JOB_ID_PURGE_ORPHANED_DOCUMENTS,
        purge_orphaned_documents,
        IntervalTrigger(hours=1),
    )
    logger.info("Registered admission background jobs")
