# =============================================================================
# core/services/chat_service.py - Chat Orchestration
# =============================================================================
# One chat turn, end to end:
#   agent (caller's) -> conversation (caller's) -> plan limits
#   -> attachments -> history -> save user message -> LLM
#   -> save assistant message -> touch conversation -> usage log
#
# Attached PDFs reach the model as extracted text prepended to the
# question; attached images are sent as base64 image parts.
#
# Message persistence after the LLM call is best effort: the reply is
# returned to the user even if saving it fails.
# =============================================================================

import base64
import logging
import time
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from app.config import settings
from app.exceptions import ResourceNotFoundError
from core.models.chat import ChatRequest, ChatUsage
from core.models.conversation import MessageRole
from core.services.attachment_service import AttachmentService
from core.services.conversation_service import ConversationService
from core.services.limits_service import LimitsService
from core.services.message_service import MessageService
from core.services.storage_service import StorageService
from core.services.usage_service import UsageService
from lib import file_processing
from lib.llm_client import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, send_message
from lib.supabase_client import SupabaseClient
from lib.utils import same_owner

logger = logging.getLogger(__name__)


def build_pdf_context(message: str, pdfs: list[dict[str, Any]]) -> str:
    """User message prefixed with the extracted text of attached PDFs."""
    if not pdfs:
        return message

    documents = []
    for pdf in pdfs:
        page_count = (pdf.get("metadata") or {}).get("page_count")
        pages = f"Pages: {page_count}\n" if page_count else ""
        documents.append(
            f"📄 Document PDF: {pdf.get('file_name')}\n"
            f"{pages}---\n"
            f"{pdf.get('extracted_text') or '[Contenu non disponible]'}\n"
            f"---"
        )

    return (
        "Contexte - Documents PDF joints:\n\n"
        + "\n\n".join(documents)
        + f"\n\n---\n\nQuestion de l'utilisateur: {message}"
    )


class ChatService:
    """
    Service running a chat turn against an agent.
    """

    @staticmethod
    def _get_caller_agent(agent_id: str, user_id: UUID | str) -> dict[str, Any]:
        # Agents of other users are reported as missing
        agent = SupabaseClient.fetch_row("agents", agent_id)
        if not agent or not same_owner(agent, user_id):
            raise ResourceNotFoundError("Agent", agent_id)
        return agent

    @staticmethod
    def _get_attachments(
        attachment_ids: list[str],
        conversation_id: str,
        user_id: UUID | str,
    ) -> list[dict[str, Any]]:
        attachments = []
        for attachment_id in attachment_ids:
            attachment = AttachmentService.get_owned(attachment_id, user_id)
            if str(attachment.get("conversation_id")) != str(conversation_id):
                raise ResourceNotFoundError("Attachment", attachment_id)
            attachments.append(attachment)
        return attachments

    @staticmethod
    def _load_images(attachments: list[dict[str, Any]]) -> list[dict[str, str]]:
        # Stored images are JPEG re-encodes; unreadable ones are left out
        images = []
        for attachment in attachments:
            content = StorageService.download(attachment["storage_path"])
            if content is None:
                continue
            images.append({
                "media_type": "image/jpeg",
                "data": base64.b64encode(content).decode("ascii"),
            })
        return images

    @staticmethod
    def send(user_id: UUID | str, request: ChatRequest) -> dict[str, Any]:
        """
        Send the user's message to the agent and store both sides.

        Returns:
            {"message": <assistant message>, "usage": ChatUsage dict}

        Raises:
            ResourceNotFoundError: Agent, conversation or attachment missing
            ForbiddenError: Conversation or attachment owned by someone else
            LimitReachedError: Plan limits exceeded
            LLMProviderError: Provider call failed
        """
        agent = ChatService._get_caller_agent(request.agent_id, user_id)
        ConversationService.get_conversation(request.conversation_id, user_id)

        model = agent.get("model") or settings.DEFAULT_LLM_MODEL
        LimitsService.enforce(LimitsService.check_all_limits_for_message(user_id, model))

        attachments = ChatService._get_attachments(request.attachment_ids, request.conversation_id, user_id)
        pdfs = [a for a in attachments if file_processing.is_pdf(a.get("file_type"))]
        images = ChatService._load_images(
            [a for a in attachments if file_processing.is_image(a.get("file_type"))]
        )

        history = MessageService.get_recent_history(request.conversation_id, settings.CHAT_HISTORY_LIMIT)
        history.append({"role": MessageRole.USER.value, "content": build_pdf_context(request.message, pdfs)})

        try:
            MessageService.create_message(request.conversation_id, MessageRole.USER, request.message)
        except Exception as e:
            logger.warning(f"Continuing without saved user message: {e}")

        temperature = agent.get("temperature")
        started = time.monotonic()
        response = send_message(
            agent.get("system_prompt") or "",
            history,
            model=model,
            temperature=DEFAULT_TEMPERATURE if temperature is None else temperature,
            max_tokens=agent.get("max_tokens") or DEFAULT_MAX_TOKENS,
            images=images or None,
        )
        latency_ms = int((time.monotonic() - started) * 1000)

        usage = ChatUsage(
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            total_tokens=response.total_tokens,
        )

        saved = None
        try:
            saved = MessageService.create_message(
                request.conversation_id,
                MessageRole.ASSISTANT,
                response.content,
                model_used=response.model,
                tokens_used=response.total_tokens,
                latency_ms=latency_ms,
                metadata=response.usage_dict(),
            )
        except Exception as e:
            logger.warning(f"Failed to save assistant message: {e}")

        ConversationService.touch(request.conversation_id)

        UsageService.track_usage(
            user_id,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            agent_id=request.agent_id,
            conversation_id=request.conversation_id,
            metadata={"latency_ms": latency_ms},
        )

        logger.info(
            f"Chat turn in {request.conversation_id}: {response.provider}/{response.model}, "
            f"{response.total_tokens} tokens, {latency_ms}ms"
        )

        return {
            "message": {
                "id": (saved or {}).get("id"),
                "role": MessageRole.ASSISTANT.value,
                "content": response.content,
                "model_used": response.model,
                "tokens_used": response.total_tokens,
                "latency_ms": latency_ms,
                "created_at": (saved or {}).get("created_at") or datetime.now(timezone.utc).isoformat(),
            },
            "usage": usage.model_dump(),
        }
