"""
Local disk storage for uploaded content files.

Files live under UPLOAD_DIR with generated names; the content type is derived
from the extension of the uploaded file name:

    PDF   -> .pdf
    IMAGE -> .jpg .jpeg .png
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple
from uuid import uuid4

from fastapi import UploadFile

from contentkosh_api.core.errors import BadRequestError
from contentkosh_api.core.settings import get_app_settings
from contentkosh_api.db.models.enums import ContentType

logger = logging.getLogger(__name__)

BYTES_IN_MB = 1024 * 1024

FILE_EXTENSIONS: Dict[ContentType, Tuple[str, ...]] = {
    ContentType.PDF: (".pdf",),
    ContentType.IMAGE: (".jpg", ".jpeg", ".png"),
}

MIME_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StoredFile:
    path: str
    size: int
    content_type: ContentType


def upload_dir() -> Path:
    return Path(get_app_settings().UPLOAD_DIR).resolve()


def max_size_bytes(content_type: ContentType) -> int:
    settings = get_app_settings()
    if content_type == ContentType.PDF:
        return settings.MAX_PDF_SIZE_MB * BYTES_IN_MB
    return settings.MAX_IMAGE_SIZE_MB * BYTES_IN_MB


def content_type_for(filename: str) -> Optional[ContentType]:
    ext = os.path.splitext(filename)[1].lower()
    for content_type, extensions in FILE_EXTENSIONS.items():
        if ext in extensions:
            return content_type
    return None


# PUBLIC_INTERFACE
def mime_type_for(path: str) -> str:
    return MIME_TYPES.get(os.path.splitext(path)[1].lower(), DEFAULT_MIME_TYPE)


# PUBLIC_INTERFACE
def validate_upload(content_type: ContentType, file_size: int) -> None:
    """Reject disallowed types and files over the per-type size limit."""
    if content_type.value not in get_app_settings().allowed_file_types:
        raise BadRequestError("File type is not allowed")
    limit = max_size_bytes(content_type)
    if file_size > limit:
        label = "PDF file" if content_type == ContentType.PDF else "Image file"
        raise BadRequestError(f"{label} size cannot exceed {limit // BYTES_IN_MB}MB")


# PUBLIC_INTERFACE
def validate_file_path(file_path: str, content_type: ContentType) -> None:
    """The path must resolve inside UPLOAD_DIR and carry an extension of its type."""
    if not file_path:
        raise BadRequestError("File path is required")
    resolved = Path(file_path).resolve()
    if upload_dir() not in resolved.parents:
        raise BadRequestError("Invalid file path")
    if resolved.suffix.lower() not in FILE_EXTENSIONS[content_type]:
        raise BadRequestError("File extension does not match content type")


# PUBLIC_INTERFACE
async def save_upload(file: UploadFile, declared_type: Optional[ContentType] = None) -> StoredFile:
    """
    Validate and persist an uploaded file.

    The type comes from the file extension; a declared type must agree with it.
    At most the largest allowed size plus one byte is read into memory.
    """
    filename = file.filename or ""
    content_type = content_type_for(filename)
    if content_type is None:
        ext = os.path.splitext(filename)[1].lower()
        raise BadRequestError(f"File type {ext or '(none)'} is not allowed")
    if declared_type is not None and declared_type != content_type:
        raise BadRequestError("File extension does not match content type")

    data = await file.read(max_size_bytes(content_type) + 1)
    validate_upload(content_type, len(data))

    target_dir = upload_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    ext = os.path.splitext(filename)[1].lower()
    target = target_dir / f"file-{uuid4().hex}{ext}"
    validate_file_path(str(target), content_type)
    with open(target, "wb") as f:
        f.write(data)
    logger.info("Stored upload %s (%d bytes)", target.name, len(data))
    return StoredFile(path=str(target), size=len(data), content_type=content_type)


# PUBLIC_INTERFACE
def remove_file(file_path: str) -> None:
    """Best-effort removal of a stored file."""
    try:
        os.unlink(file_path)
    except OSError as exc:
        logger.warning("Failed to delete file %s: %s", file_path, exc)
