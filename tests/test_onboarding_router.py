# =============================================================================
# tests/test_onboarding_router.py - Onboarding Endpoints and Completion Tests
# =============================================================================

from unittest.mock import patch
from uuid import UUID

import pytest

from app.exceptions import LimitReachedError, ValidationFailedError
from core.models.agent import AgentCreate
from core.models.onboarding import AgentType, OnboardingData
from core.models.subscription import ModelType
from core.services.onboarding_service import OnboardingService
from core.services.sector_service import SectorService

SERVICE = "app.routers.onboarding.OnboardingService"
MODULE = "core.services.onboarding_service"

MARKETING_SECTOR = {
    "id": "sector-1",
    "slug": "marketing",
    "name": "Marketing",
    "base_expertise": None,
    "common_tasks": None,
}


@pytest.fixture
def sector_lookup():
    with patch.object(SectorService, "get_by_id", return_value=MARKETING_SECTOR) as by_id, \
         patch.object(SectorService, "get_by_slug", return_value=MARKETING_SECTOR) as by_slug:
        yield by_id, by_slug


# =============================================================================
# Endpoints
# =============================================================================

class TestOnboardingEndpoints:

    def test_sectors(self, client, auth_headers):
        with patch("app.routers.onboarding.SectorService") as service:
            service.list_sectors.return_value = [MARKETING_SECTOR]

            response = client.get("/api/v1/onboarding/sectors", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": [MARKETING_SECTOR]}

    def test_sectors_require_auth(self, client):
        assert client.get("/api/v1/onboarding/sectors").status_code == 401

    def test_preview(self, client, auth_headers, sample_onboarding_data):
        preview = {"agent_name": "Assistant Marketing", "default_agent_name": "Assistant Marketing", "system_prompt": "..."}
        with patch(SERVICE) as service:
            service.preview.return_value = preview

            response = client.post("/api/v1/onboarding/preview", json=sample_onboarding_data, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == preview
        data = service.preview.call_args.args[0]
        assert data.business_name == "Studio Lumière"
        assert data.agent_type == AgentType.COMPANION

    def test_complete(self, client, user_id, auth_headers, sample_onboarding_data, sample_agent):
        with patch(SERVICE) as service:
            service.complete.return_value = sample_agent

            response = client.post("/api/v1/onboarding/complete", json=sample_onboarding_data, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["data"]["id"] == sample_agent["id"]
        assert service.complete.call_args.args[0] == UUID(user_id)

    def test_complete_incomplete_answers(self, client, auth_headers):
        with patch.object(SectorService, "get_by_slug") as by_slug:
            response = client.post(
                "/api/v1/onboarding/complete",
                json={"agentType": "companion", "sectorSlug": "marketing"},
                headers=auth_headers,
            )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Missing required fields: business_name, location, main_clients, main_challenges"
        assert body["details"]["missing_fields"][0] == "business_name"
        by_slug.assert_not_called()

    def test_unknown_agent_type(self, client, auth_headers):
        response = client.post("/api/v1/onboarding/preview", json={"agentType": "robot"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request: agentType")


# =============================================================================
# OnboardingService
# =============================================================================

class TestPreview:

    def test_default_name_and_prompt(self, sector_lookup, sample_onboarding_data):
        result = OnboardingService.preview(OnboardingData.model_validate(sample_onboarding_data))

        assert result["agent_name"] == "Assistant Marketing"
        assert result["default_agent_name"] == "Assistant Marketing"
        assert "Studio Lumière" in result["system_prompt"]

    def test_chosen_name_kept(self, sector_lookup, sample_onboarding_data):
        data = OnboardingData.model_validate({**sample_onboarding_data, "agentName": "Léa"})

        result = OnboardingService.preview(data)

        assert result["agent_name"] == "Léa"
        assert result["default_agent_name"] == "Assistant Marketing"

    def test_sector_by_slug_when_id_unknown(self, sector_lookup, sample_onboarding_data):
        by_id, by_slug = sector_lookup
        by_id.return_value = None

        OnboardingService.preview(OnboardingData.model_validate(sample_onboarding_data))

        by_slug.assert_called_once_with("marketing")

    def test_task_agent_requires_task_fields(self):
        data = OnboardingData(agent_type=AgentType.TASK, sector_slug="marketing")

        with pytest.raises(ValidationFailedError) as exc_info:
            OnboardingService.preview(data)

        assert exc_info.value.details == {"missing_fields": ["task_description", "task_specific_goal"]}


class TestComplete:

    def test_companion_agent(self, sector_lookup, user_id, sample_onboarding_data, sample_agent):
        with patch(f"{MODULE}.AgentService.create_agent", return_value=sample_agent) as create_agent:
            result = OnboardingService.complete(user_id, OnboardingData.model_validate(sample_onboarding_data))

        assert result == sample_agent

        forwarded_user, payload = create_agent.call_args.args
        assert forwarded_user == user_id
        assert isinstance(payload, AgentCreate)
        assert payload.name == "Assistant Marketing"
        assert payload.sector_id == "sector-1"
        assert payload.model == ModelType.CLAUDE
        assert payload.settings == {
            "sectorSlug": "marketing",
            "communicationStyle": "accessible",
            "selectedLLM": "claude",
        }
        assert payload.business_profile["businessName"] == "Studio Lumière"
        assert payload.business_profile["primaryGoals"] == ["more_clients", "save_time"]

    def test_gpt_choice(self, sector_lookup, user_id, sample_onboarding_data, sample_agent):
        data = OnboardingData.model_validate({**sample_onboarding_data, "selectedLLM": "gpt"})

        with patch(f"{MODULE}.AgentService.create_agent", return_value=sample_agent) as create_agent:
            OnboardingService.complete(user_id, data)

        assert create_agent.call_args.args[1].model == ModelType.GPT

    def test_task_agent_has_no_business_profile(self, sector_lookup, user_id, sample_agent):
        data = OnboardingData(
            agent_type=AgentType.TASK,
            sector_slug="marketing",
            task_description="Rédiger les posts LinkedIn",
            task_specific_goal="3 posts par semaine",
        )

        with patch(f"{MODULE}.AgentService.create_agent", return_value=sample_agent) as create_agent:
            OnboardingService.complete(user_id, data)

        assert create_agent.call_args.args[1].business_profile is None

    def test_agent_limit_propagates(self, sector_lookup, user_id, sample_onboarding_data):
        with patch(f"{MODULE}.AgentService.create_agent", side_effect=LimitReachedError("Limite", 1, 1)):
            with pytest.raises(LimitReachedError):
                OnboardingService.complete(user_id, OnboardingData.model_validate(sample_onboarding_data))
