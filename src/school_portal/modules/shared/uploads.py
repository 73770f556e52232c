"""
Uploaded Files

Services receive uploads as `UploadedFile` so they stay independent of the
web framework; routers build them from FastAPI's `UploadFile`.
"""

import logging
import time
from dataclasses import dataclass

from fastapi import UploadFile

from school_portal.core.storage import LocalObjectStorage, StorageError
from school_portal.core.validators import UploadRule, file_extension, validate_upload
from school_portal.modules.shared.exceptions import StorageFailureError, ValidationFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str | None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return file_extension(self.filename)

    def validate(self, rule: UploadRule) -> list[str]:
        return validate_upload(self.filename, self.content_type, self.size, rule)


async def read_upload(upload: UploadFile | None, rule: UploadRule) -> UploadedFile | None:
    """
    Read a multipart upload into memory. Empty file fields count as missing.

    At most `rule.max_size + 1` bytes are read, so an oversized file is kept
    only as far as needed to fail the size check in `UploadedFile.validate`.
    """
    if upload is None or not upload.filename:
        return None
    data = await upload.read(rule.max_size + 1)
    return UploadedFile(filename=upload.filename, content_type=upload.content_type, data=data)


async def require_upload(
    upload: UploadFile | None, rule: UploadRule, field: str = "file"
) -> UploadedFile:
    """Like `read_upload` but a missing file is a validation error."""
    uploaded = await read_upload(upload, rule)
    if uploaded is None:
        raise ValidationFailedError("File wajib diupload", errors={field: "File wajib diupload"})
    return uploaded


def timestamp_ms() -> int:
    return int(time.time() * 1000)


async def store_upload(
    storage: LocalObjectStorage,
    bucket: str,
    path: str,
    upload: UploadedFile,
    rule: UploadRule,
) -> str:
    """
    Validate an upload against a rule and store it.

    Returns:
        Public URL of the stored object

    Raises:
        ValidationFailedError: Wrong type, empty or too large
        StorageFailureError: The object could not be stored
    """
    errors = upload.validate(rule)
    if errors:
        raise ValidationFailedError(errors[0], errors={"file": "; ".join(errors)})

    try:
        await storage.upload(bucket, path, upload.data, upload.content_type)
    except StorageError as e:
        logger.error(f"Upload to {bucket} failed: {e}")
        raise StorageFailureError("Gagal mengupload file") from e

    return storage.get_public_url(bucket, path)


async def discard_object(storage: LocalObjectStorage, bucket: str, url: str | None) -> None:
    """Delete an object referenced by one of our public URLs. Failures are logged only."""
    path = storage.path_from_public_url(bucket, url)
    if not path:
        return
    try:
        await storage.delete(bucket, [path])
    except StorageError as e:
        logger.warning(f"Could not delete {bucket}/{path}: {e}")
