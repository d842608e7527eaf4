# =============================================================================
# core/models/agent.py - Agent Schemas
# =============================================================================
# These models define the API contract for agent operations:
# - AgentCreate: Input for creating an agent (onboarding or API)
# - AgentUpdate: Partial update of an agent the caller owns
# - AgentModelUpdate: Switching the LLM an agent runs on
#
# An agent is a configured chat assistant: a system prompt, a model and
# sampling settings, optionally linked to a sector and business profile.
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .onboarding import AgentType
from .subscription import ModelType

DEFAULT_AGENT_MODEL = ModelType.CLAUDE
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


class AgentCreate(BaseModel):
    """
    Schema for creating a new agent.

    `settings.sectorSlug` is used to resolve the sector when `sector_id`
    is absent. `business_profile` carries the onboarding answers in the
    web client's camelCase form (businessName, mainClients, profileId, ...).

    Example:
        {
            "name": "Assistant Marketing",
            "system_prompt": "Tu es ...",
            "model": "haiku",
            "agent_type": "companion",
            "settings": {"sectorSlug": "marketing"}
        }
    """

    name: str = Field(..., min_length=1, max_length=255)
    system_prompt: str = Field(..., min_length=1)
    description: str | None = None
    sector_id: str | None = None
    model: ModelType | None = None
    agent_type: AgentType | None = None
    settings: dict[str, Any] | None = None
    business_profile: dict[str, Any] | None = None


class AgentUpdate(BaseModel):
    """
    Partial update of an agent. Only fields that are set are written.
    """
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    system_prompt: str | None = None
    model: ModelType | None = None
    temperature: float | None = Field(default=None, ge=0, le=2)
    max_tokens: int | None = Field(default=None, gt=0)
    settings: dict[str, Any] | None = None
    is_active: bool | None = None
    sector_id: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str:
        """An agent always keeps a name; null is rejected."""
        if v is None:
            raise ValueError("name cannot be null")
        return v

    def to_update_dict(self) -> dict[str, Any]:
        """Fields explicitly sent by the client, enums as plain values."""
        return self.model_dump(exclude_unset=True, mode="json")


class AgentModelUpdate(BaseModel):
    """Body of PATCH /agents/{id}/model."""
    model: ModelType
