"""
Local file storage for uploaded documents.
"""
import logging
import os
import uuid
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def _target_path(original_name: str) -> Path:
    suffix = Path(original_name or "").suffix.lower() or ".pdf"
    directory = Path(settings.upload.upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"document-{uuid.uuid4().hex}{suffix}"


async def save_upload(upload: UploadFile) -> tuple[str, int]:
    """
    Stream an upload to disk, enforcing the size limit.

    Returns:
        tuple: (stored path, size in bytes)

    Raises:
        ValidationError: If the content type is not allowed or the file is too large
    """
    if upload.content_type not in settings.upload.allowed_upload_types_list:
        raise ValidationError("Only PDF files are allowed")

    path = _target_path(upload.filename)
    limit = settings.upload.max_upload_bytes
    size = 0
    handle = await run_in_threadpool(open, path, "wb")
    try:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > limit:
                raise ValidationError(f"File exceeds the {limit // (1024 * 1024)}MB limit")
            await run_in_threadpool(handle.write, chunk)
    except BaseException:
        await run_in_threadpool(handle.close)
        await delete_file(str(path))
        raise
    await run_in_threadpool(handle.close)

    if size == 0:
        await delete_file(str(path))
        raise ValidationError("Uploaded file is empty")

    return str(path), size


async def delete_file(path: str) -> None:
    """Remove a stored file; a missing file is not an error."""
    try:
        await run_in_threadpool(os.remove, path)
    except FileNotFoundError:
        logger.warning(f"Stored file already missing: {path}")
