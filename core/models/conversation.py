# =============================================================================
# core/models/conversation.py - Conversation & Message Schemas
# =============================================================================
# These models define the API contract for conversations:
# - ConversationCreate: Start a conversation with one of the caller's agents
# - ConversationUpdate: Rename or archive a conversation
# - GenerateTitleRequest: Ask the LLM for a title from the first messages
# - ConversationStatus / MessageRole: enums shared with the chat flow
#
# Deleting a conversation is a soft delete (status -> deleted); messages
# and attachments stay in place.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class ConversationStatus(str, Enum):
    """
    Possible states for a conversation.

    - active: shown in the sidebar
    - archived: still listed unless filtered out by status
    - deleted: soft-deleted, never returned by default
    """
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class MessageRole(str, Enum):
    """
    Who sent the message in a conversation.

    - user: The human user
    - assistant: The agent's reply
    - system: Injected context (rare)
    """
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ConversationCreate(BaseModel):
    """
    Schema for starting a conversation.

    Example:
        {"agent_id": "550e8400-...", "title": "Devis mariage Dupont"}
    """
    agent_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("agent_id", "agentId"),
        description="Agent the conversation talks to"
    )
    title: str | None = Field(
        default=None,
        max_length=255,
        description="Optional title; generated later when omitted"
    )


class ConversationUpdate(BaseModel):
    """Rename or change the status of a conversation."""
    title: str | None = Field(default=None, max_length=255)
    status: ConversationStatus | None = None

    def to_update_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, mode="json")


class GenerateTitleRequest(BaseModel):
    """Body of POST /conversations/generate-title."""
    conversation_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("conversation_id", "conversationId"),
    )
