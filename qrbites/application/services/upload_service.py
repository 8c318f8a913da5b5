"""Image upload service: file checks, upload to cloud storage, compensating cleanup."""

import os
import uuid
from dataclasses import dataclass
from typing import Iterable, List

import structlog

from qrbites.config import get_settings
from qrbites.core.exceptions import BadRequestError
from qrbites.infrastructure.cloudinary_api import CloudinaryClient

logger = structlog.get_logger(__name__)

UPLOAD_FOLDERS = {
    "restaurant": "restaurants",
    "menu": "menus",
    "menuItem": "menu-items",
    "qrcode": "qrcodes",
}

# MIME type -> extensions it may arrive with
ALLOWED_TYPES = {
    "image/jpeg": {".jpg", ".jpeg"},
    "image/jpg": {".jpg", ".jpeg"},
    "image/png": {".png"},
    "image/webp": {".webp"},
}

INVALID_TYPE_MESSAGE = "Only image files allowed (jpeg, jpg, png, webp)"


@dataclass
class IncomingFile:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class UploadedFile:
    url: str
    public_id: str
    original_name: str
    size: int


def validate_file(file: IncomingFile) -> None:
    settings = get_settings()
    extension = os.path.splitext(file.filename or "")[1].lower()
    content_type = (file.content_type or "").lower()

    if extension not in ALLOWED_TYPES.get(content_type, set()):
        raise BadRequestError(INVALID_TYPE_MESSAGE)
    if file.size > settings.MAX_FILE_SIZE:
        raise BadRequestError(f"File too large. Max {settings.max_file_size_mb}MB")
    if file.size == 0:
        raise BadRequestError("Uploaded file is empty")


def validate_files(files: List[IncomingFile], multiple: bool) -> None:
    settings = get_settings()
    if not multiple and len(files) > 1:
        raise BadRequestError("Only one file allowed")
    if len(files) > settings.MAX_FILE_COUNT:
        raise BadRequestError(f"Too many files. Max {settings.MAX_FILE_COUNT}")
    for file in files:
        validate_file(file)


async def upload_files(storage: CloudinaryClient, files: Iterable[IncomingFile],
                       upload_type: str) -> List[UploadedFile]:
    """Upload every file; if one fails, remove the ones already stored and re-raise."""
    folder = UPLOAD_FOLDERS[upload_type]
    uploaded: List[UploadedFile] = []

    try:
        for file in files:
            public_id = f"{upload_type}-{uuid.uuid4().hex}"
            result = await storage.upload(file.content, folder, public_id=public_id, filename=file.filename)
            uploaded.append(UploadedFile(
                url=result["secure_url"],
                public_id=result["public_id"],
                original_name=file.filename,
                size=file.size,
            ))
    except Exception:
        if uploaded:
            logger.info("Cleaning up partially uploaded files", count=len(uploaded))
            await cleanup_uploads(storage, uploaded)
        raise

    if uploaded:
        logger.info("Files uploaded", upload_type=upload_type, count=len(uploaded))
    return uploaded


async def cleanup_uploads(storage: CloudinaryClient, uploaded: Iterable[UploadedFile]) -> None:
    """
    Remove uploaded objects after a failed request.

    Cleanup failures are logged and do not replace the error that caused
    the cleanup.
    """
    for file in uploaded:
        try:
            await storage.destroy(file.public_id)
        except Exception:
            logger.exception("Cloud storage cleanup failed", public_id=file.public_id)

