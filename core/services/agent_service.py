# =============================================================================
# core/services/agent_service.py - Agent Business Logic
# =============================================================================
# Handles agent CRUD operations and business logic.
# Separates HTTP concerns from database/business logic.
#
# Ownership rule shared by every single-agent operation:
#   missing row -> 404 "Agent not found", other owner -> 403
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ForbiddenError, ResourceNotFoundError
from core.models.agent import (
    AgentCreate,
    DEFAULT_AGENT_MODEL,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
)
from core.models.business_profile import BusinessProfileInput
from core.models.onboarding import AgentType
from core.models.subscription import ModelType
from core.services.business_profile_service import BusinessProfileService
from core.services.limits_service import LimitsService
from core.services.sector_service import SectorService
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, page_range, same_owner, utc_now_iso

logger = logging.getLogger(__name__)

TABLE = "agents"
SELECT_WITH_SECTOR = "*, sector:sectors(*)"

UPDATABLE_FIELDS = (
    "name",
    "description",
    "system_prompt",
    "model",
    "temperature",
    "max_tokens",
    "settings",
    "is_active",
    "sector_id",
)


class AgentService:
    """
    Service for agent management operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_agents(
        user_id: UUID | str,
        page: int = 1,
        limit: int = 20,
        search: str | None = None,
        sector_id: str | None = None,
        is_active: bool | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List the caller's agents, newest first.

        Args:
            user_id: Owner
            page: 1-based page number
            limit: Page size
            search: Case-insensitive match on name or description
            sector_id: Only agents of this sector
            is_active: Only active (True) or inactive (False) agents

        Returns:
            (agents, total_count)
        """
        client = SupabaseClient.get_client()

        query = (
            client.table(TABLE)
            .select(SELECT_WITH_SECTOR, count="exact")
            .eq("user_id", normalize_uuid(user_id))
        )
        if sector_id:
            query = query.eq("sector_id", sector_id)
        if is_active is not None:
            query = query.eq("is_active", is_active)
        if search:
            query = query.or_(f"name.ilike.%{search}%,description.ilike.%{search}%")

        start, end = page_range(page, limit)
        try:
            response = (
                query
                .order("created_at", desc=True)
                .range(start, end)
                .execute()
            )
            return response.data or [], response.count or 0

        except Exception as e:
            logger.error(f"Failed to list agents for user {user_id}: {e}")
            raise

    @staticmethod
    def get_agent(agent_id: str | UUID, user_id: UUID | str) -> dict[str, Any]:
        """
        Get an agent the caller owns, with its sector.

        Raises:
            ResourceNotFoundError: If the agent doesn't exist
            ForbiddenError: If another user owns it
        """
        agent = SupabaseClient.fetch_row(TABLE, agent_id, columns=SELECT_WITH_SECTOR)

        if not agent:
            raise ResourceNotFoundError("Agent", str(agent_id))
        if not same_owner(agent, user_id):
            raise ForbiddenError("agent")

        return agent

    @staticmethod
    def _resolve_business_profile_id(
        user_id: UUID | str,
        business_profile: dict[str, Any] | None,
    ) -> str | None:
        """
        Business profile to link to a new agent.

        An explicit profileId is reused as is; otherwise the onboarding
        answers are upserted when they include a business name. Upsert
        failures are logged and the agent is created without a profile.
        """
        if not business_profile:
            return None

        if business_profile.get("profileId"):
            return business_profile["profileId"]

        if not business_profile.get("businessName"):
            return None

        try:
            profile = BusinessProfileService.upsert(
                user_id,
                BusinessProfileInput.model_validate(business_profile),
            )
            return profile.get("id")
        except Exception as e:
            logger.warning(f"Failed to create/update business profile: {e}")
            return None

    @staticmethod
    def create_agent(user_id: UUID | str, payload: AgentCreate) -> dict[str, Any]:
        """
        Create an agent for the caller.

        Raises:
            LimitReachedError: If the plan's agent limit is reached
            Exception: If the insert fails
        """
        LimitsService.enforce(LimitsService.check_can_create_agent(user_id))

        settings = payload.settings or {}
        sector_id = SectorService.resolve_sector_id(payload.sector_id, settings.get("sectorSlug"))
        business_profile_id = AgentService._resolve_business_profile_id(user_id, payload.business_profile)

        data = {
            "user_id": normalize_uuid(user_id),
            "name": payload.name,
            "description": payload.description,
            "sector_id": sector_id,
            "business_profile_id": business_profile_id,
            "system_prompt": payload.system_prompt,
            "model": (payload.model or DEFAULT_AGENT_MODEL).value,
            "agent_type": (payload.agent_type or AgentType.COMPANION).value,
            "temperature": DEFAULT_TEMPERATURE,
            "max_tokens": DEFAULT_MAX_TOKENS,
            "settings": settings,
            "is_active": True,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()

            if response.data:
                agent = response.data[0]
                logger.info(f"Created agent: {agent['id']} for user: {user_id}")
                return agent

            raise Exception("Insert returned no data")

        except Exception as e:
            logger.error(f"Failed to create agent: {e}")
            raise

    @staticmethod
    def update_agent(
        agent_id: str | UUID,
        user_id: UUID | str,
        updates: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Partially update an agent the caller owns.

        Unknown keys are ignored; an empty update returns the agent unchanged.
        """
        agent = AgentService.get_agent(agent_id, user_id)

        update_data = {key: value for key, value in updates.items() if key in UPDATABLE_FIELDS}
        if not update_data:
            return agent

        update_data["updated_at"] = utc_now_iso()

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .update(update_data)
                .eq("id", normalize_uuid(agent_id))
                .execute()
            )

            if response.data:
                logger.info(f"Updated agent: {agent_id}")
                return response.data[0]

            return agent

        except Exception as e:
            logger.error(f"Failed to update agent {agent_id}: {e}")
            raise

    @staticmethod
    def update_model(
        agent_id: str | UUID,
        user_id: UUID | str,
        model: ModelType,
    ) -> dict[str, Any]:
        """
        Switch the LLM of an agent.

        Raises:
            LimitReachedError: If the caller's plan doesn't include the model
        """
        AgentService.get_agent(agent_id, user_id)
        LimitsService.enforce(LimitsService.check_can_use_model(user_id, model))
        return AgentService.update_agent(agent_id, user_id, {"model": model.value})

    @staticmethod
    def delete_agent(agent_id: str | UUID, user_id: UUID | str) -> None:
        """Hard delete an agent the caller owns."""
        AgentService.get_agent(agent_id, user_id)

        client = SupabaseClient.get_client()
        try:
            client.table(TABLE).delete().eq("id", normalize_uuid(agent_id)).execute()
            logger.info(f"Deleted agent: {agent_id}")
        except Exception as e:
            logger.error(f"Failed to delete agent {agent_id}: {e}")
            raise
