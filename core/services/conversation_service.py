# =============================================================================
# core/services/conversation_service.py - Conversation Business Logic
# =============================================================================
# Handles conversation CRUD operations.
# A conversation belongs to one user and one of that user's agents.
# Deleting is a soft delete: status becomes "deleted".
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ForbiddenError, ResourceNotFoundError, ValidationFailedError
from core.models.conversation import ConversationStatus
from core.services.agent_service import AgentService
from core.services.message_service import MessageService
from lib.llm_client import generate_conversation_title
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, page_range, same_owner, utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "conversations"
SELECT_WITH_AGENT = "*, agent:agents(*, sector:sectors(*))"


class ConversationService:
    """
    Service for conversation management operations.
    """

    @staticmethod
    def list_conversations(
        user_id: UUID | str,
        page: int = 1,
        limit: int = 20,
        agent_id: str | None = None,
        status: ConversationStatus | None = None,
        search: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List the caller's conversations, most recently updated first.

        Without a status filter, deleted conversations are left out.

        Returns:
            (conversations, total_count)
        """
        client = SupabaseClient.get_client()

        query = (
            client.table(TABLE)
            .select(SELECT_WITH_AGENT, count="exact")
            .eq("user_id", normalize_uuid(user_id))
        )
        if agent_id:
            query = query.eq("agent_id", agent_id)
        if status:
            query = query.eq("status", status.value)
        else:
            query = query.neq("status", ConversationStatus.DELETED.value)
        if search:
            query = query.or_(f"title.ilike.%{search}%,summary.ilike.%{search}%")

        start, end = page_range(page, limit)
        try:
            response = (
                query
                .order("updated_at", desc=True)
                .range(start, end)
                .execute()
            )
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list conversations for user {user_id}: {e}")
            raise

    @staticmethod
    def get_conversation(
        conversation_id: str | UUID,
        user_id: UUID | str,
        with_agent: bool = False,
    ) -> dict[str, Any]:
        """
        Get a conversation the caller owns.

        Raises:
            ResourceNotFoundError: If the conversation doesn't exist
            ForbiddenError: If another user owns it
        """
        columns = SELECT_WITH_AGENT if with_agent else "*"
        conversation = SupabaseClient.fetch_row(TABLE, conversation_id, columns=columns)

        if not conversation:
            raise ResourceNotFoundError("Conversation", str(conversation_id))
        if not same_owner(conversation, user_id):
            raise ForbiddenError("conversation")

        return conversation

    @staticmethod
    def create_conversation(
        user_id: UUID | str,
        agent_id: str,
        title: str | None = None,
    ) -> dict[str, Any]:
        """
        Start a conversation with one of the caller's agents.

        Raises:
            ResourceNotFoundError / ForbiddenError: If the agent isn't the caller's
        """
        AgentService.get_agent(agent_id, user_id)

        data = {
            "user_id": normalize_uuid(user_id),
            "agent_id": agent_id,
            "title": title,
            "status": ConversationStatus.ACTIVE.value,
            "metadata": {},
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()

            if response.data:
                conversation = response.data[0]
                logger.info(f"Created conversation: {conversation['id']} with agent: {agent_id}")
                return conversation

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to create conversation: {e}")
            raise

    @staticmethod
    def update_conversation(
        conversation_id: str | UUID,
        user_id: UUID | str,
        updates: dict[str, Any],
    ) -> dict[str, Any]:
        conversation = ConversationService.get_conversation(conversation_id, user_id)

        update_data = {key: value for key, value in updates.items() if key in ("title", "status", "summary")}
        if not update_data:
            return conversation

        update_data["updated_at"] = utc_now_iso()

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .update(update_data)
                .eq("id", normalize_uuid(conversation_id))
                .execute()
            )

            if response.data:
                logger.info(f"Updated conversation: {conversation_id}")
                return response.data[0]

            return conversation

        except Exception as e:
            logger.error(f"Failed to update conversation {conversation_id}: {e}")
            raise

    @staticmethod
    def delete_conversation(conversation_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """Soft delete: the row stays with status "deleted"."""
        return ConversationService.update_conversation(
            conversation_id,
            user_id,
            {"status": ConversationStatus.DELETED.value},
        )

    @staticmethod
    def set_title(conversation_id: str | UUID, user_id: UUID | str, title: str) -> dict[str, Any]:
        return ConversationService.update_conversation(conversation_id, user_id, {"title": title})

    @staticmethod
    def touch(conversation_id: str | UUID) -> None:
        """Bump updated_at so the conversation moves to the top of the list."""
        client = SupabaseClient.get_client()
        try:
            (
                client.table(TABLE)
                .update({"updated_at": utc_now_iso()})
                .eq("id", normalize_uuid(conversation_id))
                .execute()
            )
        except Exception as e:
            logger.warning(f"Failed to touch conversation {conversation_id}: {e}")

    @staticmethod
    def generate_title(conversation_id: str | UUID, user_id: UUID | str) -> str:
        """
        Title the conversation from its first messages and save it.

        Raises:
            ResourceNotFoundError / ForbiddenError: Conversation not the caller's
            ValidationFailedError: If the conversation has no messages yet
            LLMProviderError: If the title model fails
        """
        ConversationService.get_conversation(conversation_id, user_id)

        messages = MessageService.get_first_messages(conversation_id, 4)
        if not messages:
            raise ValidationFailedError("No messages found in conversation")

        title = generate_conversation_title(messages)
        ConversationService.set_title(conversation_id, user_id, title)

        logger.info(f"Generated title for conversation {conversation_id}: {title}")
        return title
