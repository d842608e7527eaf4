# =============================================================================
# app/routers/chat.py - Agent Chat Endpoint
# =============================================================================
# Handles one chat turn with an agent.
#
# Flow:
# 1. Agent and conversation must belong to the caller
# 2. Plan limits are checked for the agent's model
# 3. Recent history + the new message go to the LLM router
# 4. Both messages are stored and usage is logged
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.models.chat import ChatRequest
from core.services.chat_service import ChatService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat")
async def chat(
    request: ChatRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Send a message to an agent and get its reply.

    Body accepts snake_case or camelCase ids:
        {"message": "Bonjour", "agentId": "...", "conversationId": "..."}

    Returns the stored assistant message and token usage.
    """
    result = ChatService.send(user.id, request)

    return {
        "success": True,
        "data": result,
    }
