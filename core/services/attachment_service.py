# =============================================================================
# core/services/attachment_service.py - Attachment Business Logic
# =============================================================================
# Upload pipeline for files attached to a conversation:
#   validate type/size -> process (image compress + thumbnail, PDF text)
#   -> upload to storage -> insert row (cleanup storage on failure)
#   -> signed URL for immediate display
#
# Storage layout:
#   <user_id>/<conversation_id>/<safe_filename>
#   <user_id>/<conversation_id>/thumbnails/thumb_<safe_filename>
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import (
    FileTooLargeError,
    ForbiddenError,
    InvalidFileTypeError,
    ResourceNotFoundError,
    StorageUploadError,
)
from core.models.attachment import AttachmentCreate
from core.services.conversation_service import ConversationService
from core.services.storage_service import StorageService
from lib import file_processing
from lib.supabase_client import SupabaseClient
from lib.utils import generate_safe_filename, normalize_uuid, same_owner

logger = logging.getLogger(__name__)

TABLE = "conversation_attachments"


class AttachmentService:
    """
    Service for conversation attachments.
    """

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def validate_file(content_type: str | None, size: int) -> None:
        """
        Raises:
            InvalidFileTypeError: If the MIME type is not allowed
            FileTooLargeError: If the file exceeds MAX_ATTACHMENT_SIZE_MB
        """
        if not file_processing.is_allowed_file_type(content_type):
            raise InvalidFileTypeError(content_type or "unknown", file_processing.ALLOWED_MIME_TYPES)

        if not file_processing.is_valid_file_size(size, settings.max_attachment_size_bytes):
            raise FileTooLargeError(size / 1024 / 1024, settings.MAX_ATTACHMENT_SIZE_MB)

    @staticmethod
    def with_urls(attachment: dict[str, Any], strict: bool = False) -> dict[str, Any]:
        """
        Attachment row plus signed_url and thumbnail_url.

        With strict=True a failure to sign the main file raises SignedUrlError;
        otherwise signed_url is None.
        """
        if strict:
            signed_url = StorageService.create_signed_url(attachment["storage_path"])
        else:
            signed_url = StorageService.try_signed_url(attachment.get("storage_path"))

        return {
            **attachment,
            "signed_url": signed_url,
            "thumbnail_url": StorageService.try_signed_url(attachment.get("thumbnail_path")),
        }

    # -------------------------------------------------------------------------
    # Upload
    # -------------------------------------------------------------------------

    @staticmethod
    def upload(
        user_id: UUID | str,
        conversation_id: str,
        file_name: str,
        content_type: str | None,
        content: bytes,
        message_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Process, store and record an uploaded file.

        Returns:
            The attachment row with signed_url

        Raises:
            ResourceNotFoundError / ForbiddenError: Conversation not the caller's
            InvalidFileTypeError / FileTooLargeError: File rejected
            StorageUploadError: Upload or row insert failed
        """
        ConversationService.get_conversation(conversation_id, user_id)
        AttachmentService.validate_file(content_type, len(content))

        user_id = normalize_uuid(user_id)
        base_path = f"{user_id}/{conversation_id}"
        safe_filename = generate_safe_filename(file_name)

        processed = content
        extracted_text = None
        thumbnail_path = None
        metadata: dict[str, Any] = {}

        if file_processing.is_image(content_type):
            processed = file_processing.compress_image(content)
            metadata["width"], metadata["height"] = file_processing.get_image_dimensions(processed)

            try:
                thumbnail = file_processing.create_thumbnail(content)
                thumbnail_path = StorageService.upload(
                    f"{base_path}/thumbnails/thumb_{safe_filename}",
                    thumbnail,
                    "image/jpeg",
                )
            except Exception as e:
                logger.warning(f"Thumbnail skipped for {file_name}: {e}")
                thumbnail_path = None

        elif file_processing.is_pdf(content_type):
            try:
                extracted_text, metadata["page_count"] = file_processing.extract_pdf_text(content)
            except Exception as e:
                logger.warning(f"PDF text extraction failed for {file_name}: {e}")

        storage_path = StorageService.upload(f"{base_path}/{safe_filename}", processed, content_type)

        record = AttachmentCreate(
            conversation_id=conversation_id,
            message_id=message_id or None,
            user_id=user_id,
            file_name=file_name,
            file_type=content_type,
            file_size=len(processed),
            storage_path=storage_path,
            extracted_text=extracted_text,
            thumbnail_path=thumbnail_path,
            metadata=metadata,
        )

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(record.to_row()).execute()
            if not response.data:
                raise Exception("Insert returned no data")
            attachment = response.data[0]

        except Exception as e:
            logger.error(f"Failed to create attachment record: {e}")
            StorageService.remove([storage_path, thumbnail_path])
            raise StorageUploadError("Failed to create attachment record")

        logger.info(f"Stored attachment {attachment.get('id')} ({content_type}) in {conversation_id}")

        return {
            **attachment,
            "signed_url": StorageService.try_signed_url(storage_path),
        }

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def get_owned(attachment_id: str, user_id: UUID | str) -> dict[str, Any]:
        """
        Raises:
            ResourceNotFoundError: If the attachment doesn't exist
            ForbiddenError: If another user owns it
        """
        attachment = SupabaseClient.fetch_row(TABLE, attachment_id)
        if not attachment:
            raise ResourceNotFoundError("Attachment", attachment_id)
        if not same_owner(attachment, user_id):
            raise ForbiddenError("attachment")
        return attachment

    @staticmethod
    def get_attachment(attachment_id: str, user_id: UUID | str) -> dict[str, Any]:
        """Owned attachment with URLs; signing failure is a 500."""
        attachment = AttachmentService.get_owned(attachment_id, user_id)
        return AttachmentService.with_urls(attachment, strict=True)

    @staticmethod
    def list_for_conversation(conversation_id: str, user_id: UUID | str) -> list[dict[str, Any]]:
        ConversationService.get_conversation(conversation_id, user_id)

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("conversation_id", conversation_id)
                .order("created_at")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list attachments for conversation {conversation_id}: {e}")
            raise

        return [AttachmentService.with_urls(row) for row in response.data or []]

    @staticmethod
    def list_for_message(message_id: str, user_id: UUID | str) -> list[dict[str, Any]]:
        """The caller's attachments linked to a message."""
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("message_id", message_id)
                .eq("user_id", normalize_uuid(user_id))
                .order("created_at")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list attachments for message {message_id}: {e}")
            raise

        return [AttachmentService.with_urls(row) for row in response.data or []]

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    @staticmethod
    def delete(attachment_id: str, user_id: UUID | str) -> None:
        """Remove the stored objects (best effort), then the row."""
        attachment = AttachmentService.get_owned(attachment_id, user_id)

        StorageService.remove([attachment.get("storage_path"), attachment.get("thumbnail_path")])

        client = SupabaseClient.get_client()
        try:
            client.table(TABLE).delete().eq("id", attachment_id).execute()
            logger.info(f"Deleted attachment: {attachment_id}")
        except Exception as e:
            logger.error(f"Failed to delete attachment record {attachment_id}: {e}")
            raise
