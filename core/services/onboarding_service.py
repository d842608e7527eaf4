# =============================================================================
# core/services/onboarding_service.py - Onboarding Completion
# =============================================================================
# Turns the wizard answers into an agent:
#   validate -> sector lookup -> prompt generation -> business profile
#   (companion only) -> agent creation (plan limit enforced)
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import ValidationFailedError
from core.models.agent import AgentCreate
from core.models.business_profile import BusinessProfileInput
from core.models.onboarding import AgentType, OnboardingData, OnboardingWizard, SelectedLLM
from core.models.subscription import ModelType
from core.services.agent_service import AgentService
from core.services.business_profile_service import BusinessProfileService
from core.services.sector_service import SectorService
from lib.prompt_generator import generate_default_agent_name, generate_universal_prompt
from lib.sectors import get_sector_by_slug

logger = logging.getLogger(__name__)

# Wizard LLM choice -> agent model
LLM_MODELS = {
    SelectedLLM.CLAUDE: ModelType.CLAUDE,
    SelectedLLM.GPT: ModelType.GPT,
}


class OnboardingService:
    """
    Service behind the onboarding preview and completion endpoints.
    """

    @staticmethod
    def _validate(data: OnboardingData) -> None:
        missing = OnboardingWizard(data=data).missing_fields()
        if missing:
            raise ValidationFailedError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing_fields": missing},
            )

    @staticmethod
    def _resolve_sector(data: OnboardingData) -> dict[str, Any] | None:
        """Sector row for the answers (by id, else slug), or None."""
        if data.sector_id:
            sector = SectorService.get_by_id(data.sector_id)
            if sector:
                return sector
        if data.sector_slug:
            return SectorService.get_by_slug(data.sector_slug)
        return None

    @staticmethod
    def build_prompt(data: OnboardingData, sector: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Generate the system prompt and default name for the answers.

        Sector name falls back to the catalogue when the answers don't
        carry it.
        """
        slug = data.sector_slug or (sector or {}).get("slug")
        catalogue = get_sector_by_slug(slug)
        sector_name = data.sector_name or (sector or {}).get("name") or (catalogue.name if catalogue else "Autre")

        prepared = data.model_copy(update={"sector_name": sector_name})
        default_name = generate_default_agent_name(sector_name)
        if not prepared.agent_name:
            prepared.agent_name = default_name

        expertise, tasks = SectorService.get_expertise(sector, slug)

        return {
            "agent_name": prepared.agent_name,
            "default_agent_name": default_name,
            "system_prompt": generate_universal_prompt(prepared, expertise, tasks),
        }

    @staticmethod
    def preview(data: OnboardingData) -> dict[str, Any]:
        """
        Prompt preview for the confirmation step.

        Raises:
            ValidationFailedError: If required answers are missing
        """
        OnboardingService._validate(data)
        sector = OnboardingService._resolve_sector(data)
        return OnboardingService.build_prompt(data, sector)

    @staticmethod
    def complete(user_id: UUID | str, data: OnboardingData) -> dict[str, Any]:
        """
        Create the agent described by the answers.

        Returns:
            The created agent row

        Raises:
            ValidationFailedError: If required answers are missing
            LimitReachedError: If the plan's agent limit is reached
        """
        OnboardingService._validate(data)
        sector = OnboardingService._resolve_sector(data)
        generated = OnboardingService.build_prompt(data, sector)

        business_profile = None
        if data.agent_type == AgentType.COMPANION and data.business_name.strip():
            profile_input = BusinessProfileInput.model_validate(
                data.model_dump(include=set(BusinessProfileInput.model_fields), mode="json")
            )
            business_profile = profile_input.model_dump(by_alias=True)

        payload = AgentCreate(
            name=generated["agent_name"],
            system_prompt=generated["system_prompt"],
            sector_id=(sector or {}).get("id") or data.sector_id,
            model=LLM_MODELS.get(data.selected_llm or SelectedLLM.CLAUDE),
            agent_type=data.agent_type,
            settings={
                "sectorSlug": data.sector_slug,
                "communicationStyle": data.communication_style.value if data.communication_style else None,
                "selectedLLM": (data.selected_llm or SelectedLLM.CLAUDE).value,
            },
            business_profile=business_profile,
        )

        agent = AgentService.create_agent(user_id, payload)
        logger.info(f"Onboarding completed for user {user_id}: agent {agent.get('id')}")
        return agent
