"""Image hosting through Cloudinary."""

import base64
import logging
from dataclasses import dataclass

import cloudinary
import cloudinary.uploader

from src.config import get_settings
from src.services.errors import UploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageFile:
    """An uploaded file held in memory."""

    data: bytes
    mime_type: str


class ImageHost:
    """Uploads raw image bytes and returns the public URL."""

    def __init__(self) -> None:
        self.settings = get_settings()
        cloudinary.config(
            cloud_name=self.settings.cloudinary_cloud_name,
            api_key=self.settings.cloudinary_api_key,
            api_secret=self.settings.cloudinary_api_secret,
            secure=True,
        )

    def upload_file(self, image: ImageFile) -> str:
        return self.upload(image.data, image.mime_type)

    def upload(self, data: bytes, mime_type: str) -> str:
        """Upload an image and return its secure URL.

        Raises UploadError if the file is empty or Cloudinary rejects it.
        """
        if not data:
            raise UploadError("No file provided for upload")

        data_url = f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
        try:
            result = cloudinary.uploader.upload(data_url, resource_type="auto")
        except Exception as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise UploadError() from e

        url = result.get("secure_url")
        if not url:
            logger.error(f"Cloudinary response missing secure_url: {result}")
            raise UploadError()
        return url


def get_image_host() -> ImageHost:
    """Get an image host instance."""
    return ImageHost()
