# =============================================================================
# core/models/attachment.py - Attachment Schemas
# =============================================================================
# A file attached to a conversation (and optionally a message).
# The binary lives in Supabase Storage; the row in
# `conversation_attachments` keeps its path and processing results.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field


class AttachmentCreate(BaseModel):
    """
    Row inserted after a successful upload.

    Example:
        {
            "conversation_id": "660e8400-...",
            "user_id": "550e8400-...",
            "file_name": "devis.pdf",
            "file_type": "application/pdf",
            "file_size": 18342,
            "storage_path": "550e8400-.../660e8400-.../1700000000000_devis.pdf",
            "extracted_text": "...",
            "metadata": {"page_count": 2}
        }
    """
    conversation_id: str
    message_id: str | None = None
    user_id: str
    file_name: str
    file_type: str
    file_size: int = Field(..., ge=0)
    storage_path: str
    extracted_text: str | None = None
    thumbnail_path: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_row(self) -> dict[str, Any]:
        return self.model_dump()
