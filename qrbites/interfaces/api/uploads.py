"""Upload dependencies: validate the body, then push images to cloud storage."""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, Type, TypeVar

import structlog
from fastapi import Depends
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from qrbites.application.services.upload_service import (
    UploadedFile,
    cleanup_uploads,
    upload_files,
    validate_files,
)
from qrbites.core.exceptions import BadRequestError, validation_error_from
from qrbites.infrastructure.cloudinary_api import CloudinaryClient, get_storage
from qrbites.interfaces.api.deps import RequestPayload, get_request_payload

logger = structlog.get_logger(__name__)

S = TypeVar("S", bound=BaseModel)


@dataclass
class StagedUpload(Generic[S]):
    """Validated body plus the images already stored for it."""
    payload: Optional[S] = None
    files: List[UploadedFile] = field(default_factory=list)

    @property
    def urls(self) -> List[str]:
        return [file.url for file in self.files]

    @property
    def url(self) -> Optional[str]:
        return self.files[0].url if self.files else None


async def cleanup_on_error(storage: CloudinaryClient, uploaded: List[UploadedFile]) -> None:
    """Compensate for a request that failed after its images reached storage."""
    if uploaded:
        logger.info("Cleaning up uploads after failed request", count=len(uploaded))
        await cleanup_uploads(storage, uploaded)


def validate_and_upload(schema: Type[S], upload_type: str, field_name: str = "image", multiple: bool = False):
    """
    Dependency factory: validate non-file fields against ``schema`` first, then
    check and upload the files in ``field_name``. Uploaded objects are deleted
    again if anything downstream raises.
    """

    async def dependency(
        raw: RequestPayload = Depends(get_request_payload),
        storage: CloudinaryClient = Depends(get_storage),
    ):
        try:
            payload = schema.model_validate(raw.fields)
        except PydanticValidationError as e:
            raise validation_error_from(e.errors()) from None

        files = raw.files_for(field_name)
        validate_files(files, multiple)
        uploaded = await upload_files(storage, files, upload_type)
        try:
            yield StagedUpload(payload=payload, files=uploaded)
        except Exception:
            await cleanup_on_error(storage, uploaded)
            raise

    return dependency


def upload_single(upload_type: str, field_name: str = "image"):
    """Dependency factory for dedicated image endpoints: one required file, no body schema."""

    async def dependency(
        raw: RequestPayload = Depends(get_request_payload),
        storage: CloudinaryClient = Depends(get_storage),
    ):
        files = raw.files_for(field_name)
        if not files:
            raise BadRequestError("Please upload an image")
        validate_files(files, multiple=False)
        uploaded = await upload_files(storage, files, upload_type)
        try:
            yield StagedUpload(files=uploaded)
        except Exception:
            await cleanup_on_error(storage, uploaded)
            raise

    return dependency
