"""
images/storage.py

Stores uploaded images on local disk:
- Enforces the size limit while reading the upload
- Validates the image type by content sniffing, not the client's content type
- Writes files under the uploads directory with a unique, sanitized name
"""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

import filetype
from fastapi import HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from softwarepros.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES: set[str] = {"image/jpeg", "image/png", "image/gif", "image/webp"}

CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredFile:
    filename: str
    original_name: str
    url: str
    size: int
    mime_type: str


def _safe_name(original: str | None) -> str:
    name = os.path.basename(original or "image").replace(" ", "_")
    name = "".join(c for c in name if c.isalnum() or c in ("_", "-", "."))
    return name or "image"


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    chunks: list[bytes] = []
    size = 0
    while chunk := await file.read(CHUNK_SIZE):
        size += len(chunk)
        if size > limit:
            logger.warning(f"[UPLOAD] Rejected '{file.filename}': larger than {limit} bytes")
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File size exceeds the limit of {limit // 1024 // 1024} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _write(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


async def save_image(file: UploadFile) -> StoredFile:
    """
    Validates and stores an uploaded image.

    Raises:
        HTTPException 400: empty file.
        HTTPException 413: file larger than MAX_IMAGE_SIZE_BYTES.
        HTTPException 415: content is not a supported image type.
    """
    try:
        content = await _read_limited(file, settings.MAX_IMAGE_SIZE_BYTES)
    finally:
        await file.close()

    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Received an empty file.")

    kind = filetype.guess(content[:261])
    if kind is None or kind.mime not in ALLOWED_MIME_TYPES:
        detected = kind.mime if kind else "unknown"
        logger.warning(f"[UPLOAD] Rejected '{file.filename}': unsupported type {detected}")
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported file type: '{detected}'",
        )

    filename = f"{uuid.uuid4().hex}_{_safe_name(file.filename)}"
    await run_in_threadpool(_write, settings.uploads_path / filename, content)
    logger.info(f"[UPLOAD] Stored {filename} ({len(content)} bytes, {kind.mime})")

    return StoredFile(
        filename=filename,
        original_name=file.filename or filename,
        url=f"{settings.UPLOADS_URL_PREFIX.rstrip('/')}/{filename}",
        size=len(content),
        mime_type=kind.mime,
    )


def remove_image_file(filename: str) -> None:
    """Deletes a stored file; failures are logged and do not propagate."""
    path = settings.uploads_path / os.path.basename(filename)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"[UPLOAD] Could not delete {path}: {e}")
