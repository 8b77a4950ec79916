"""Cloudinary media storage adapter."""

import logging
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from blog_api.config import settings

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ("image", "video", "raw", "auto")


class MediaStorageError(Exception):
    """Raised when the media host is unreachable, misconfigured or rejects a call."""


class CloudinaryStorage:
    """
    Stores and removes media assets on Cloudinary.

    Credentials are read from settings on first use; an unconfigured
    storage raises MediaStorageError instead of calling out.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
    ):
        self.cloud_name = cloud_name if cloud_name is not None else settings.CLOUDINARY_CLOUD_NAME
        self.api_key = api_key if api_key is not None else settings.CLOUDINARY_API_KEY
        self.api_secret = api_secret if api_secret is not None else settings.CLOUDINARY_API_SECRET
        self._configured = False

    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _ensure_configured(self) -> None:
        if self._configured:
            return
        if not self.is_configured():
            raise MediaStorageError("Cloudinary credentials are not configured")
        cloudinary.config(
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
        )
        self._configured = True

    def upload(
        self,
        content: bytes,
        *,
        folder: Optional[str] = None,
        resource_type: str = "auto",
        filename: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Upload raw bytes and return the asset description from Cloudinary."""
        self._ensure_configured()
        options: Dict[str, Any] = {"resource_type": resource_type}
        if folder:
            options["folder"] = folder
        if filename:
            options["filename_override"] = filename
            options["use_filename"] = True
        try:
            result = cloudinary.uploader.upload(content, **options)
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise MediaStorageError(str(e)) from e
        except Exception as e:
            logger.exception("Unexpected error while uploading to Cloudinary")
            raise MediaStorageError(str(e)) from e

        if not result or "public_id" not in result:
            raise MediaStorageError("Cloudinary upload failed")
        result.setdefault("folder", folder)
        if filename and not result.get("original_filename"):
            result["original_filename"] = filename
        logger.info(f"Uploaded asset {result['public_id']} ({result.get('bytes')} bytes)")
        return result

    def destroy(self, public_id: str, *, resource_type: str = "image") -> Dict[str, Any]:
        """Delete a remote asset. A missing asset is not an error."""
        self._ensure_configured()
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type=resource_type)
        except CloudinaryError as e:
            logger.error(f"Cloudinary destroy failed for {public_id}: {e}")
            raise MediaStorageError(str(e)) from e
        except Exception as e:
            logger.exception(f"Unexpected error while deleting {public_id} from Cloudinary")
            raise MediaStorageError(str(e)) from e

        outcome = (result or {}).get("result")
        if outcome not in ("ok", "not found"):
            raise MediaStorageError(f"Cloudinary refused to delete {public_id}: {outcome}")
        logger.info(f"Deleted asset {public_id} ({outcome})")
        return result


# Singleton instance
media_storage = CloudinaryStorage()


def get_media_storage() -> CloudinaryStorage:
    """Dependency returning the process-wide media storage."""
    return media_storage
