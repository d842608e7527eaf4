# =============================================================================
# app/routers/conversations.py - Conversation Endpoints
# =============================================================================
# Conversation CRUD plus the per-conversation message and attachment lists.
# All endpoints require authentication and ownership of the conversation.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, get_current_user
from core.models.conversation import (
    ConversationCreate,
    ConversationStatus,
    ConversationUpdate,
    GenerateTitleRequest,
)
from core.services.attachment_service import AttachmentService
from core.services.conversation_service import ConversationService
from core.services.message_service import MessageService
from lib.utils import build_pagination

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Collection
# =============================================================================

@router.get("")
async def list_conversations(
    user: AuthUser = Depends(get_current_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Items per page")] = 20,
    agent_id: Annotated[str | None, Query(description="Filter by agent")] = None,
    status: Annotated[ConversationStatus | None, Query(description="Filter by status")] = None,
    search: Annotated[str | None, Query(description="Match on title or summary")] = None,
):
    """
    List the caller's conversations, most recently active first.

    Deleted conversations are only returned when status=deleted is asked for.
    """
    conversations, total = ConversationService.list_conversations(
        user_id=user.id,
        page=page,
        limit=limit,
        agent_id=agent_id,
        status=status,
        search=search,
    )

    return {
        "success": True,
        "data": conversations,
        "pagination": build_pagination(page, limit, total),
    }


@router.post("", status_code=201)
async def create_conversation(
    request: ConversationCreate,
    user: AuthUser = Depends(get_current_user),
):
    """Start a conversation with one of the caller's agents."""
    conversation = ConversationService.create_conversation(
        user_id=user.id,
        agent_id=request.agent_id,
        title=request.title,
    )
    return {"success": True, "data": conversation}


@router.post("/generate-title")
async def generate_title(
    request: GenerateTitleRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Title a conversation from its first messages.

    The title is saved on the conversation and returned.
    """
    title = ConversationService.generate_title(request.conversation_id, user.id)
    return {"success": True, "data": {"title": title}}


# =============================================================================
# Single conversation
# =============================================================================

@router.get("/{conversation_id}")
async def get_conversation(
    conversation_id: Annotated[str, Path(description="Conversation UUID")],
    user: AuthUser = Depends(get_current_user),
):
    conversation = ConversationService.get_conversation(conversation_id, user.id, with_agent=True)
    return {"success": True, "data": conversation}


@router.patch("/{conversation_id}")
async def update_conversation(
    conversation_id: Annotated[str, Path(description="Conversation UUID")],
    request: ConversationUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """Rename, archive or restore a conversation."""
    conversation = ConversationService.update_conversation(
        conversation_id,
        user.id,
        request.to_update_dict(),
    )
    return {"success": True, "data": conversation}


@router.delete("/{conversation_id}")
async def delete_conversation(
    conversation_id: Annotated[str, Path(description="Conversation UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Soft delete: the conversation is kept with status "deleted"."""
    ConversationService.delete_conversation(conversation_id, user.id)
    return {"success": True, "message": "Conversation deleted successfully"}


@router.get("/{conversation_id}/messages")
async def list_messages(
    conversation_id: Annotated[str, Path(description="Conversation UUID")],
    user: AuthUser = Depends(get_current_user),
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=200, description="Items per page")] = 50,
):
    """Messages of the conversation, oldest first."""
    ConversationService.get_conversation(conversation_id, user.id)

    messages, total = MessageService.list_messages(conversation_id, page=page, limit=limit)

    return {
        "success": True,
        "data": messages,
        "pagination": build_pagination(page, limit, total),
    }


@router.get("/{conversation_id}/attachments")
async def list_conversation_attachments(
    conversation_id: Annotated[str, Path(description="Conversation UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Attachments of the conversation with signed URLs."""
    attachments = AttachmentService.list_for_conversation(conversation_id, user.id)
    return {"success": True, "data": attachments}
