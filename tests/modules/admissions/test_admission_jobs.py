"""
Unit tests for the orphaned document purge job.
"""

import os
import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from school_portal.core.storage import StorageBuckets
from school_portal.modules.admissions.jobs import purge_orphaned_documents

JOBS = "school_portal.modules.admissions.jobs"
BUCKET = StorageBuckets.PPDB_DOCUMENTS


async def _store(storage, path: str, age_hours: float) -> None:
    await storage.upload(BUCKET, path, b"x")
    mtime = time.time() - age_hours * 3600
    os.utime(storage.root / BUCKET / path, (mtime, mtime))


@pytest.fixture
def session_maker(mock_db):
    session = MagicMock()
    session.__aenter__.return_value = mock_db
    session.__aexit__.return_value = False
    maker = MagicMock(return_value=session)
    with patch(f"{JOBS}.async_session_maker", maker):
        yield maker


class TestPurgeOrphanedDocuments:
    @pytest.mark.asyncio
    async def test_deletes_only_old_unreferenced_folders(self, storage, session_maker):
        await _store(storage, "PPDB2025070001/ktp_1.pdf", age_hours=48)
        await _store(storage, "PPDB2025070002/ktp_1.pdf", age_hours=48)
        await _store(storage, "PPDB2025070003/ktp_1.pdf", age_hours=1)

        with patch(f"{JOBS}.repository") as mock_repo:
            mock_repo.existing_registration_numbers = AsyncMock(
                return_value={"PPDB2025070002"}
            )

            result = await purge_orphaned_documents(storage=storage, grace_hours=24)

            mock_repo.existing_registration_numbers.assert_awaited_once()
            candidates = mock_repo.existing_registration_numbers.call_args.args[1]
            assert sorted(candidates) == ["PPDB2025070001", "PPDB2025070002"]

        assert result == {"scanned": 3, "deleted": ["PPDB2025070001"]}
        assert await storage.list_paths(BUCKET) == [
            "PPDB2025070002/ktp_1.pdf",
            "PPDB2025070003/ktp_1.pdf",
        ]

    @pytest.mark.asyncio
    async def test_recent_file_keeps_folder(self, storage, session_maker):
        await _store(storage, "PPDB2025070001/ktp_1.pdf", age_hours=48)
        await _store(storage, "PPDB2025070001/kk_1.pdf", age_hours=2)

        result = await purge_orphaned_documents(storage=storage, grace_hours=24)

        assert result == {"scanned": 1, "deleted": []}
        session_maker.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_bucket(self, storage, session_maker):
        result = await purge_orphaned_documents(storage=storage, grace_hours=24)

        assert result == {"scanned": 0, "deleted": []}
