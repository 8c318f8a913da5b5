"""Cloudinary upload API HTTP client.

Images are stored under ``qrbites/{folder}`` (restaurants, menus,
menu-items, qrcodes). Requests are signed with the account secret, so no
SDK is needed.
"""

import hashlib
import re
import time
from typing import Optional

import httpx
import structlog

from qrbites.config import get_settings
from qrbites.core.exceptions import ServerError

logger = structlog.get_logger(__name__)

ROOT_FOLDER = "qrbites"
_PUBLIC_ID_RE = re.compile(r"/qrbites/([^/]+)/([^.]+)")


class StorageError(ServerError):
    """Cloud storage rejected or failed a request."""


def public_id_from_url(url: Optional[str]) -> Optional[str]:
    """Recover the public id from a delivery URL, or None for foreign URLs."""
    if not url or not isinstance(url, str):
        return None
    match = _PUBLIC_ID_RE.search(url)
    if not match:
        return None
    return f"{ROOT_FOLDER}/{match.group(1)}/{match.group(2)}"


class CloudinaryClient:
    """Client for the Cloudinary image upload and destroy endpoints."""

    def __init__(self, cloud_name: str = None, api_key: str = None, api_secret: str = None,
                 timeout: float = 60):
        settings = get_settings()
        self.cloud_name = cloud_name if cloud_name is not None else settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key if api_key is not None else settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.CLOUDINARY_API_SECRET
        self.base_url = f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image"
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _sign(self, params: dict) -> str:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, ""))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    def _signed_payload(self, params: dict) -> dict:
        params = {**params, "timestamp": int(time.time())}
        return {**params, "api_key": self.api_key, "signature": self._sign(params)}

    async def _post(self, action: str, data: dict, files: dict = None) -> dict:
        if not self.is_configured:
            raise StorageError("Cloud storage is not configured")

        url = f"{self.base_url}/{action}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, data=data, files=files)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            error_text = e.response.text[:200] if e.response.text else "No response body"
            logger.error("Cloudinary request failed", action=action,
                         status_code=e.response.status_code, error=error_text)
            raise StorageError(f"Cloud storage {action} failed") from e
        except httpx.HTTPError as e:
            logger.error("Cloudinary unreachable", action=action, error=str(e))
            raise StorageError(f"Cloud storage {action} failed") from e

    async def upload(self, content: bytes, folder: str, public_id: Optional[str] = None,
                     filename: str = "upload") -> dict:
        """
        Upload image bytes into ``qrbites/{folder}``.

        Returns the Cloudinary response; ``secure_url`` and ``public_id`` are
        what callers need.
        """
        params = {"folder": f"{ROOT_FOLDER}/{folder}"}
        if public_id:
            params["public_id"] = public_id
            params["overwrite"] = "true"

        result = await self._post("upload", self._signed_payload(params), files={"file": (filename, content)})
        logger.info("Uploaded to Cloudinary", public_id=result.get("public_id"), folder=folder)
        return result

    async def destroy(self, public_id: str) -> dict:
        result = await self._post("destroy", self._signed_payload({"public_id": public_id, "invalidate": "true"}))
        logger.info("Deleted from Cloudinary", public_id=public_id, result=result.get("result"))
        return result

    async def destroy_url(self, url: Optional[str]) -> bool:
        """Delete the object behind a delivery URL. Unknown URLs are skipped."""
        public_id = public_id_from_url(url)
        if not public_id:
            return False
        await self.destroy(public_id)
        return True


_client: Optional[CloudinaryClient] = None


def get_storage() -> CloudinaryClient:
    """FastAPI dependency returning the shared storage client."""
    global _client
    if _client is None:
        _client = CloudinaryClient()
    return _client
