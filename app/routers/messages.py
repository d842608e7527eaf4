# =============================================================================
# app/routers/messages.py - Message Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import AuthUser, get_current_user
from core.services.attachment_service import AttachmentService

router = APIRouter()


@router.get("/{message_id}/attachments")
async def list_message_attachments(
    message_id: Annotated[str, Path(description="Message UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """The caller's attachments for a message, with signed URLs."""
    attachments = AttachmentService.list_for_message(message_id, user.id)
    return {"success": True, "data": attachments}
