# =============================================================================
# core/models/chat.py - Chat Schemas
# =============================================================================
# These models define the API contract for chatting with an agent:
# - ChatRequest: User sends a message to an agent inside a conversation
# - ChatUsage: Token usage returned next to the assistant message
#
# Flow:
# 1. User sends ChatRequest
# 2. API checks plan limits, stores the user message, calls the LLM
# 3. Response carries the stored assistant message and token usage
# =============================================================================

from pydantic import AliasChoices, BaseModel, Field


class ChatRequest(BaseModel):
    """
    Schema for sending a chat message.

    The web client sends camelCase ids (agentId, conversationId);
    snake_case is accepted as well.

    Example:
        {
            "message": "Rédige un devis pour un mariage de 120 personnes",
            "agent_id": "550e8400-...",
            "conversation_id": "660e8400-...",
            "attachment_ids": ["770e8400-..."]
        }
    """

    # The user's message
    message: str = Field(
        ...,
        min_length=1,
        description="User message sent to the agent"
    )

    # Agent answering the message (must belong to the caller)
    agent_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("agent_id", "agentId"),
        description="Agent ID"
    )

    # Conversation the exchange is appended to
    conversation_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("conversation_id", "conversationId"),
        description="Conversation ID"
    )

    # Uploaded attachments sent along with this message (PDF text, images)
    attachment_ids: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("attachment_ids", "attachmentIds"),
        description="Attachment IDs from the same conversation"
    )


class ChatUsage(BaseModel):
    """Token usage of one assistant reply."""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
