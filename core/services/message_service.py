# =============================================================================
# core/services/message_service.py - Message Storage
# =============================================================================
# Reads and writes rows of the `messages` table.
# Ownership is checked on the parent conversation by the callers.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from core.models.conversation import MessageRole
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, page_range

logger = logging.getLogger(__name__)

TABLE = "messages"


class MessageService:
    """
    Service for message reads and writes.
    """

    @staticmethod
    def list_messages(
        conversation_id: str | UUID,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Messages of a conversation in chronological order.

        Returns:
            (messages, total_count)
        """
        client = SupabaseClient.get_client()
        start, end = page_range(page, limit)

        try:
            response = (
                client.table(TABLE)
                .select("*", count="exact")
                .eq("conversation_id", normalize_uuid(conversation_id))
                .order("created_at")
                .range(start, end)
                .execute()
            )
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list messages for conversation {conversation_id}: {e}")
            raise

    @staticmethod
    def get_recent_history(conversation_id: str | UUID, limit: int) -> list[dict[str, Any]]:
        """
        The last `limit` messages, oldest first.

        Returns:
            [{"role": ..., "content": ...}, ...] ready for the LLM router
        """
        client = SupabaseClient.get_client()

        response = (
            client.table(TABLE)
            .select("role, content, created_at")
            .eq("conversation_id", normalize_uuid(conversation_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )

        rows = list(reversed(response.data or []))
        return [{"role": row["role"], "content": row["content"]} for row in rows]

    @staticmethod
    def get_first_messages(conversation_id: str | UUID, count: int = 4) -> list[dict[str, Any]]:
        """The opening messages of a conversation (used for titles)."""
        client = SupabaseClient.get_client()

        response = (
            client.table(TABLE)
            .select("role, content")
            .eq("conversation_id", normalize_uuid(conversation_id))
            .order("created_at")
            .limit(count)
            .execute()
        )
        return response.data or []

    @staticmethod
    def create_message(
        conversation_id: str | UUID,
        role: MessageRole,
        content: str,
        model_used: str | None = None,
        tokens_used: int | None = None,
        latency_ms: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Insert a message.

        Raises:
            Exception: If the insert fails
        """
        data = {
            "conversation_id": normalize_uuid(conversation_id),
            "role": role.value,
            "content": content,
            "metadata": metadata or {},
        }
        if model_used is not None:
            data["model_used"] = model_used
        if tokens_used is not None:
            data["tokens_used"] = tokens_used
        if latency_ms is not None:
            data["latency_ms"] = latency_ms

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()

            if response.data:
                message = response.data[0]
                logger.debug(f"Saved {role.value} message {message.get('id')} in {conversation_id}")
                return message

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to save {role.value} message: {e}")
            raise
