# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles uploads, removals and signed URLs in the attachments bucket.
# Objects are private; clients only ever see time-limited signed URLs.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import SignedUrlError, StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Every path is relative to settings.ATTACHMENTS_BUCKET.
    """

    @staticmethod
    def _bucket():
        return SupabaseClient.get_client().storage.from_(settings.ATTACHMENTS_BUCKET)

    @staticmethod
    def upload(path: str, content: bytes, content_type: str) -> str:
        """
        Upload bytes to storage (no overwrite).

        Args:
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type stored with the object

        Returns:
            Storage path where file was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        try:
            StorageService._bucket().upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "false"}
            )

            logger.info(f"Uploaded file to storage: {path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def download(path: str) -> bytes | None:
        """Object bytes, or None when the download fails."""
        try:
            return StorageService._bucket().download(path)
        except Exception as e:
            logger.warning(f"Failed to download {path}: {e}")
            return None

    @staticmethod
    def remove(paths: list[str]) -> None:
        """Delete objects. Best effort: failures are logged."""
        paths = [path for path in paths if path]
        if not paths:
            return

        try:
            StorageService._bucket().remove(paths)
            logger.info(f"Removed {len(paths)} object(s) from storage")
        except Exception as e:
            logger.warning(f"Failed to remove storage objects {paths}: {e}")

    @staticmethod
    def create_signed_url(path: str, expires_in: int | None = None) -> str:
        """
        Time-limited URL for a private object.

        Raises:
            SignedUrlError: If storage refuses to sign the path
        """
        try:
            result = StorageService._bucket().create_signed_url(
                path,
                expires_in or settings.SIGNED_URL_EXPIRES_IN,
            )
        except Exception as e:
            logger.error(f"Failed to sign URL for {path}: {e}")
            raise SignedUrlError(path)

        url = (result or {}).get("signedURL") or (result or {}).get("signedUrl")
        if not url:
            raise SignedUrlError(path)
        return url

    @staticmethod
    def try_signed_url(path: str | None) -> str | None:
        """Signed URL or None, for optional objects such as thumbnails."""
        if not path:
            return None
        try:
            return StorageService.create_signed_url(path)
        except SignedUrlError:
            return None
