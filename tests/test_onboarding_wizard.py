# =============================================================================
# tests/test_onboarding_wizard.py - Onboarding Wizard State Tests
# =============================================================================
# Unit tests for OnboardingData parsing and OnboardingWizard navigation.
#
# Run with: pytest tests/test_onboarding_wizard.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models.onboarding import (
    AgentType,
    BusinessType,
    CommunicationStyle,
    ExperienceLevel,
    OnboardingData,
    OnboardingWizard,
    SelectedLLM,
)


# =============================================================================
# OnboardingData
# =============================================================================

class TestOnboardingData:
    """Tests for the wizard answers model."""

    def test_defaults(self):
        data = OnboardingData()

        assert data.agent_type is None
        assert data.business_name == ""
        assert data.primary_goals == []
        assert data.selected_llm == SelectedLLM.CLAUDE
        assert data.communication_style is None

    def test_accepts_camel_case_keys(self, sample_onboarding_data):
        data = OnboardingData.model_validate(sample_onboarding_data)

        assert data.agent_type == AgentType.COMPANION
        assert data.business_name == "Studio Lumière"
        assert data.business_type == BusinessType.FREELANCE
        assert data.years_experience == ExperienceLevel.INTERMEDIATE
        assert data.primary_goals == ["more_clients", "save_time"]
        assert data.communication_style == CommunicationStyle.ACCESSIBLE

    def test_accepts_snake_case_keys(self):
        data = OnboardingData(business_name="Atelier Bois", sector_slug="artisanat")

        assert data.business_name == "Atelier Bois"
        assert data.sector_slug == "artisanat"

    def test_selected_llm_aliases(self):
        assert OnboardingData.model_validate({"selectedLLM": "gpt"}).selected_llm == SelectedLLM.GPT
        assert OnboardingData.model_validate({"selected_llm": "gpt"}).selected_llm == SelectedLLM.GPT

    def test_invalid_enum_value_rejected(self):
        with pytest.raises(ValidationError):
            OnboardingData.model_validate({"agentType": "robot"})


# =============================================================================
# OnboardingWizard
# =============================================================================

class TestOnboardingWizardSetters:
    """Setters update the answers."""

    def test_set_sector_names_companion_assistant(self):
        wizard = OnboardingWizard()
        wizard.set_agent_type(AgentType.COMPANION)
        wizard.set_sector("sector-1", "Marketing", "marketing")

        assert wizard.data.sector_id == "sector-1"
        assert wizard.data.sector_slug == "marketing"
        assert wizard.data.agent_name == "Assistant Marketing"

    def test_set_sector_names_task_agent(self):
        wizard = OnboardingWizard()
        wizard.set_agent_type("task")
        wizard.set_sector("sector-2", "Immobilier", "immobilier")

        assert wizard.data.agent_name == "Agent Immobilier"

    def test_set_sector_without_type_defaults_to_assistant(self):
        wizard = OnboardingWizard()
        wizard.set_sector("sector-3", "Autre", "autre")

        assert wizard.data.agent_name == "Assistant Autre"

    def test_set_business_identity(self):
        wizard = OnboardingWizard()
        wizard.set_business_identity("Studio Lumière", "tpe", "Lyon", "10+")

        assert wizard.data.business_name == "Studio Lumière"
        assert wizard.data.business_type == BusinessType.TPE
        assert wizard.data.location == "Lyon"
        assert wizard.data.years_experience == ExperienceLevel.EXPERT

    def test_set_business_identity_accepts_empty_choices(self):
        wizard = OnboardingWizard()
        wizard.set_business_identity("Studio", None, "Paris", None)

        assert wizard.data.business_type is None
        assert wizard.data.years_experience is None

    def test_set_detailed_context(self):
        wizard = OnboardingWizard()
        wizard.set_detailed_context("PME", "Vidéo", "medium", "Prospection", "Notion")

        assert wizard.data.main_clients == "PME"
        assert wizard.data.specificities == "Vidéo"
        assert wizard.data.typical_project_size == "medium"
        assert wizard.data.main_challenges == "Prospection"
        assert wizard.data.tools_used == "Notion"

    def test_set_goals_and_values_copies_list(self):
        goals = ["save_time"]
        wizard = OnboardingWizard()
        wizard.set_goals_and_values(goals, "Qualité", "Site vitrine")
        goals.append("find_clients")

        assert wizard.data.primary_goals == ["save_time"]
        assert wizard.data.business_values == "Qualité"
        assert wizard.data.example_projects == "Site vitrine"

    def test_set_task_definition(self):
        wizard = OnboardingWizard()
        wizard.set_task_definition("Rédiger des devis", "Devis en 10 minutes")

        assert wizard.data.task_description == "Rédiger des devis"
        assert wizard.data.task_specific_goal == "Devis en 10 minutes"

    def test_style_llm_and_name(self):
        wizard = OnboardingWizard()
        wizard.set_communication_style("expert")
        wizard.set_selected_llm("gpt")
        wizard.set_agent_name("Mon agent")

        assert wizard.data.communication_style == CommunicationStyle.EXPERT
        assert wizard.data.selected_llm == SelectedLLM.GPT
        assert wizard.data.agent_name == "Mon agent"

    def test_set_business_context_legacy(self):
        wizard = OnboardingWizard()
        wizard.set_business_context("pme", "Grands comptes", "Sur-mesure")

        assert wizard.data.business_type == BusinessType.PME
        assert wizard.data.main_clients == "Grands comptes"
        assert wizard.data.specificities == "Sur-mesure"


class TestOnboardingWizardNavigation:
    """Step counter bounds."""

    def test_max_step_depends_on_agent_type(self):
        wizard = OnboardingWizard()
        assert wizard.max_step == 6

        wizard.set_agent_type(AgentType.COMPANION)
        assert wizard.max_step == 8

        wizard.set_agent_type(AgentType.TASK)
        assert wizard.max_step == 6

    def test_next_step_capped_at_max(self):
        wizard = OnboardingWizard()
        wizard.set_agent_type(AgentType.TASK)

        for _ in range(10):
            wizard.next_step()

        assert wizard.current_step == 6

    def test_prev_step_floored_at_one(self):
        wizard = OnboardingWizard()

        assert wizard.prev_step() == 1
        assert wizard.current_step == 1

    def test_set_current_step(self):
        wizard = OnboardingWizard()
        wizard.set_current_step(4)

        assert wizard.current_step == 4
        assert wizard.next_step() == 5

    def test_reset(self):
        wizard = OnboardingWizard()
        wizard.set_agent_type(AgentType.COMPANION)
        wizard.set_agent_name("Test")
        wizard.set_current_step(5)

        wizard.reset()

        assert wizard.current_step == 1
        assert wizard.data.agent_type is None
        assert wizard.data.agent_name == ""

    def test_is_companion_and_is_task(self):
        wizard = OnboardingWizard()
        assert not wizard.is_companion()
        assert not wizard.is_task()

        wizard.set_agent_type(AgentType.COMPANION)
        assert wizard.is_companion()
        assert not wizard.is_task()


class TestMissingFields:
    """What completion still needs."""

    def test_empty_wizard(self):
        assert OnboardingWizard().missing_fields() == ["agent_type", "sector_slug"]

    def test_complete_companion(self, sample_onboarding_data):
        wizard = OnboardingWizard(data=OnboardingData.model_validate(sample_onboarding_data))

        assert wizard.missing_fields() == []

    def test_companion_missing_business_answers(self):
        wizard = OnboardingWizard()
        wizard.set_agent_type(AgentType.COMPANION)
        wizard.set_sector("s", "Marketing", "marketing")
        wizard.set_business_identity("  ", None, "Lyon", None)

        assert wizard.missing_fields() == ["business_name", "main_clients", "main_challenges"]

    def test_task_missing_definition(self):
        wizard = OnboardingWizard()
        wizard.set_agent_type(AgentType.TASK)
        wizard.set_sector("s", "Marketing", "marketing")
        wizard.set_task_definition("Rédiger des posts", "")

        assert wizard.missing_fields() == ["task_specific_goal"]
