# =============================================================================
# app/routers/attachments.py - Chat Attachment Endpoints
# =============================================================================
# Upload, fetch and delete files attached to conversations.
# Images are recompressed and thumbnailed, PDFs get their text extracted.
# Files are private: reads return short-lived signed URLs.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from app.auth import AuthUser, get_current_user
from core.services.attachment_service import AttachmentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload", status_code=201)
async def upload_attachment(
    file: Annotated[UploadFile, File(description="Image (jpeg, png, gif, webp) or PDF")],
    conversation_id: Annotated[str, Form(description="Conversation the file belongs to")],
    message_id: Annotated[str | None, Form(description="Optional message to link")] = None,
    user: AuthUser = Depends(get_current_user),
):
    """
    Upload a file to one of the caller's conversations.

    Returns the attachment record with a signed URL.
    """
    content = await file.read()
    filename = file.filename or "file"

    logger.info(f"Processing attachment upload: {filename} ({len(content)} bytes)")

    attachment = AttachmentService.upload(
        user_id=user.id,
        conversation_id=conversation_id,
        file_name=filename,
        content_type=file.content_type,
        content=content,
        message_id=message_id or None,
    )
    return {"success": True, "data": attachment}


@router.get("/{attachment_id}")
async def get_attachment(
    attachment_id: Annotated[str, Path(description="Attachment UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Attachment record with signed_url and thumbnail_url."""
    attachment = AttachmentService.get_attachment(attachment_id, user.id)
    return {"success": True, "data": attachment}


@router.delete("/{attachment_id}")
async def delete_attachment(
    attachment_id: Annotated[str, Path(description="Attachment UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Delete the stored file, its thumbnail and the record."""
    AttachmentService.delete(attachment_id, user.id)
    return {"success": True, "message": "Attachment deleted successfully"}
