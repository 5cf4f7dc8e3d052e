"""
Media upload service.

Uses Cloudinary for storing fall clips. Uploads are blocking SDK calls run
off the event loop with ``UPLOAD_TIMEOUT_SECONDS`` as the bound.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import cloudinary.uploader

from core.config import Settings
from core.exceptions import InternalError, ValidationError
from core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class UploadedMedia:
    media_url: str
    media_id: str


class MediaService:
    """Cloudinary uploader bound to one account and folder."""

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: str = "ultracare/falls",
        max_bytes: int = 20 * 1024 * 1024,
        timeout: float = 60.0,
    ):
        self.folder = folder
        self.max_bytes = max_bytes
        self.timeout = timeout

        if all([cloud_name, api_key, api_secret]):
            self.credentials = {
                "cloud_name": cloud_name,
                "api_key": api_key,
                "api_secret": api_secret,
            }
        else:
            self.credentials = None
            logger.warning("Cloudinary configuration incomplete")

    @classmethod
    def from_settings(cls, settings: Settings) -> "MediaService":
        return cls(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.UPLOAD_FOLDER,
            max_bytes=settings.UPLOAD_MAX_BYTES,
            timeout=settings.UPLOAD_TIMEOUT_SECONDS,
        )

    @property
    def is_configured(self) -> bool:
        return self.credentials is not None

    def _upload(self, data: bytes, filename: Optional[str]) -> dict:
        return cloudinary.uploader.upload(
            data,
            resource_type="video",
            folder=self.folder,
            filename=filename,
            secure=True,
            **self.credentials,
        )

    async def upload_video(self, data: bytes, filename: Optional[str] = None) -> UploadedMedia:
        if not data:
            raise ValidationError("No file uploaded")
        if len(data) > self.max_bytes:
            raise ValidationError(f"File too large (max {self.max_bytes} bytes)")
        if not self.is_configured:
            logger.error("Upload attempted without Cloudinary configuration")
            raise InternalError("Upload failed")

        try:
            result = await asyncio.wait_for(
                asyncio.to_thread(self._upload, data, filename),
                timeout=self.timeout,
            )
        except Exception as e:
            logger.error(f"Cloudinary upload failed: {str(e)}")
            raise InternalError("Upload failed")

        logger.info(f"Uploaded media {result.get('public_id')}")
        return UploadedMedia(media_url=result["secure_url"], media_id=result["public_id"])
