# =============================================================================
# lib/llm_client.py - LLM Router (Anthropic + OpenAI)
# =============================================================================
# Routes chat completions to the right provider based on the agent's model.
#
# Agents store short model names ("haiku", "sonnet", "gpt-4o", ...).
# The router maps them to provider model ids and picks the SDK:
#   haiku / sonnet / opus / claude  -> anthropic
#   gpt / gpt-4o / gpt-4o-mini      -> openai
#
# Usage:
#   from lib.llm_client import send_message
#   response = send_message(agent["system_prompt"], history, model="sonnet")
#   print(response.content, response.input_tokens)
# =============================================================================

import logging
import re
from dataclasses import dataclass
from typing import Any

from app.exceptions import LLMProviderError

logger = logging.getLogger(__name__)

ANTHROPIC = "anthropic"
OPENAI = "openai"

# Short names and full ids -> provider
MODEL_PROVIDERS = {
    "haiku": ANTHROPIC,
    "sonnet": ANTHROPIC,
    "opus": ANTHROPIC,
    "claude": ANTHROPIC,
    "claude-3-haiku-20240307": ANTHROPIC,
    "claude-3-sonnet-20240229": ANTHROPIC,
    "claude-3-opus-20240229": ANTHROPIC,
    "gpt-4o-mini": OPENAI,
    "gpt-4o": OPENAI,
    "gpt": OPENAI,
}

# Short names -> provider model ids (full ids pass through)
MODEL_IDS = {
    "haiku": "claude-3-haiku-20240307",
    "sonnet": "claude-3-sonnet-20240229",
    "opus": "claude-3-opus-20240229",
    "claude": "claude-3-haiku-20240307",
    "gpt-4o-mini": "gpt-4o-mini",
    "gpt-4o": "gpt-4o",
    "gpt": "gpt-4o-mini",
}

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 1.0

TITLE_MODEL = "haiku"
TITLE_MAX_LENGTH = 60

# Lazy-loaded provider clients
_openai_client = None
_anthropic_client = None


@dataclass
class LLMResponse:
    """Normalized completion result from either provider."""
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def usage_dict(self) -> dict[str, int]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
        }


# =============================================================================
# Routing
# =============================================================================

def get_provider(model: str) -> str:
    """
    Provider for a model name.

    Exact matches win; otherwise the prefix decides. Unknown models go
    to Anthropic.
    """
    provider = MODEL_PROVIDERS.get(model)
    if provider:
        return provider

    if model.startswith("gpt"):
        return OPENAI
    if model.startswith("claude-"):
        return ANTHROPIC

    logger.warning(f"Unknown model '{model}', defaulting to anthropic")
    return ANTHROPIC


def resolve_model_id(model: str) -> str:
    """Provider model id for a short name. Full ids are returned unchanged."""
    return MODEL_IDS.get(model, model)


# =============================================================================
# Provider Clients
# =============================================================================

def get_openai_client():
    """Get or create OpenAI client (lazy initialization)."""
    global _openai_client
    if _openai_client is None:
        from openai import OpenAI
        from app.config import settings
        _openai_client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _openai_client


def get_anthropic_client():
    """Get or create Anthropic client (lazy initialization)."""
    global _anthropic_client
    if _anthropic_client is None:
        from anthropic import Anthropic
        from app.config import settings
        _anthropic_client = Anthropic(api_key=settings.ANTHROPIC_API_KEY)
    return _anthropic_client


# Images are {"media_type": "image/png", "data": <base64>}
def _openai_image_part(image: dict[str, str]) -> dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{image['media_type']};base64,{image['data']}"},
    }


def _anthropic_image_part(image: dict[str, str]) -> dict[str, Any]:
    return {
        "type": "image",
        "source": {"type": "base64", "media_type": image["media_type"], "data": image["data"]},
    }


def _attach_images(messages: list[dict[str, Any]], image_parts: list[dict[str, Any]]) -> None:
    """Turn the last user turn into a text part followed by the image parts."""
    for msg in reversed(messages):
        if msg["role"] == "user":
            msg["content"] = [{"type": "text", "text": msg["content"]}, *image_parts]
            return


def _send_openai(
    system_prompt: str,
    messages: list[dict[str, Any]],
    model_id: str,
    temperature: float,
    max_tokens: int,
    images: list[dict[str, str]] | None = None,
) -> LLMResponse:
    openai_messages = [{"role": "system", "content": system_prompt}]
    openai_messages.extend(
        {"role": msg["role"], "content": msg["content"]} for msg in messages
    )
    if images:
        _attach_images(openai_messages, [_openai_image_part(image) for image in images])

    client = get_openai_client()
    response = client.chat.completions.create(
        model=model_id,
        messages=openai_messages,
        temperature=temperature,
        max_tokens=max_tokens,
    )

    usage = response.usage
    return LLMResponse(
        content=response.choices[0].message.content or "",
        input_tokens=usage.prompt_tokens if usage else 0,
        output_tokens=usage.completion_tokens if usage else 0,
        model=model_id,
        provider=OPENAI,
    )


def _send_anthropic(
    system_prompt: str,
    messages: list[dict[str, Any]],
    model_id: str,
    temperature: float,
    max_tokens: int,
    images: list[dict[str, str]] | None = None,
) -> LLMResponse:
    # Anthropic takes the system prompt separately and no "system" turns
    anthropic_messages = [
        {"role": msg["role"], "content": msg["content"]}
        for msg in messages
        if msg["role"] in ("user", "assistant")
    ]
    if images:
        _attach_images(anthropic_messages, [_anthropic_image_part(image) for image in images])

    client = get_anthropic_client()
    response = client.messages.create(
        model=model_id,
        system=system_prompt,
        messages=anthropic_messages,
        temperature=temperature,
        max_tokens=max_tokens,
    )

    text_blocks = [block.text for block in response.content if getattr(block, "type", None) == "text"]
    return LLMResponse(
        content=text_blocks[0] if text_blocks else "",
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
        model=model_id,
        provider=ANTHROPIC,
    )


def send_message(
    system_prompt: str,
    messages: list[dict[str, Any]],
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    images: list[dict[str, str]] | None = None,
) -> LLMResponse:
    """
    Send a conversation to the provider that serves `model`.

    Args:
        system_prompt: The agent's system prompt
        messages: [{"role": "user"|"assistant", "content": str}, ...] oldest first
        model: Short name or full model id (default "haiku")
        temperature: Sampling temperature (default 1)
        max_tokens: Completion budget (default 4096)
        images: Base64 images {"media_type", "data"} added to the last user turn

    Returns:
        LLMResponse with text and token usage

    Raises:
        LLMProviderError: If the provider call fails
    """
    model = model or "haiku"
    provider = get_provider(model)
    model_id = resolve_model_id(model)
    temperature = DEFAULT_TEMPERATURE if temperature is None else temperature
    max_tokens = max_tokens or DEFAULT_MAX_TOKENS

    logger.info(f"Routing to {provider} with model {model_id}")

    try:
        if provider == OPENAI:
            return _send_openai(system_prompt, messages, model_id, temperature, max_tokens, images)
        return _send_anthropic(system_prompt, messages, model_id, temperature, max_tokens, images)
    except Exception as e:
        logger.error(f"{provider} API error: {e}")
        raise LLMProviderError(provider, getattr(e, "message", None) or str(e))


# =============================================================================
# Conversation Titles
# =============================================================================

TITLE_SYSTEM_PROMPT = "Tu es un assistant qui génère des titres concis pour des conversations."


def build_title_prompt(messages: list[dict[str, Any]]) -> str:
    """Prompt asking for a short French title from the first two exchanges."""
    context = "\n\n".join(
        f"{'Utilisateur' if msg.get('role') == 'user' else 'Assistant'}: {msg.get('content', '')}"
        for msg in messages[:4]
    )
    return (
        "Génère un titre court et concis (maximum 50 caractères) pour résumer cette "
        "conversation. Le titre doit être en français, sans guillemets, et capturer "
        "l'essence de la demande principale de l'utilisateur.\n\n"
        f"Conversation:\n{context}\n\n"
        "Réponds UNIQUEMENT avec le titre, sans aucun texte additionnel, ponctuation "
        "finale ou guillemets."
    )


def clean_title(raw_title: str) -> str:
    """
    Normalize a model-generated title.

    Strips surrounding quotes and one trailing . ! or ?, then truncates
    anything over 60 characters to 57 plus "...".
    """
    title = raw_title.strip()
    title = re.sub(r"^[\"']|[\"']$", "", title)
    title = re.sub(r"[.!?]$", "", title)

    if len(title) > TITLE_MAX_LENGTH:
        title = title[:57] + "..."

    return title


def generate_conversation_title(messages: list[dict[str, Any]]) -> str:
    """
    Generate a conversation title with the economical Anthropic model.

    Raises:
        ValueError: If there are no messages
        LLMProviderError: If the provider call fails or returns nothing
    """
    if not messages:
        raise ValueError("No messages provided")

    response = send_message(
        TITLE_SYSTEM_PROMPT,
        [{"role": "user", "content": build_title_prompt(messages)}],
        model=TITLE_MODEL,
        temperature=0.7,
        max_tokens=100,
    )

    if not response.content:
        raise LLMProviderError(response.provider, "Failed to generate title")

    return clean_title(response.content)
