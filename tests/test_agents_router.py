# =============================================================================
# tests/test_agents_router.py - Agent Endpoint Contract Tests
# =============================================================================
# The service layer is patched; these tests pin the HTTP contract:
# status codes, envelope and the arguments forwarded to AgentService.
# =============================================================================

from unittest.mock import patch
from uuid import UUID

import pytest

from app.exceptions import ForbiddenError, LimitReachedError, ResourceNotFoundError
from core.models.agent import AgentCreate
from core.models.subscription import ModelType

SERVICE = "app.routers.agents.AgentService"


class TestListAgents:

    def test_requires_auth(self, client):
        assert client.get("/api/v1/agents").status_code == 401

    def test_forwards_filters_and_paginates(self, client, user_id, auth_headers, sample_agent):
        with patch(SERVICE) as service:
            service.list_agents.return_value = ([sample_agent], 41)

            response = client.get(
                "/api/v1/agents?page=2&limit=20&search=market&is_active=true",
                headers=auth_headers,
            )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == [sample_agent]
        assert body["pagination"] == {"page": 2, "limit": 20, "total": 41, "total_pages": 3}

        service.list_agents.assert_called_once_with(
            user_id=UUID(user_id),
            page=2,
            limit=20,
            search="market",
            sector_id=None,
            is_active=True,
        )

    def test_invalid_page_is_400(self, client, auth_headers):
        response = client.get("/api/v1/agents?page=0", headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_service_failure_is_500_with_message(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.list_agents.side_effect = Exception("connection reset")

            response = client.get("/api/v1/agents", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "connection reset", "code": "INTERNAL_ERROR"}


class TestCreateAgent:

    @pytest.mark.parametrize("path", ["/api/v1/agents", "/api/v1/agents/create"])
    def test_creates_agent(self, client, user_id, auth_headers, sample_agent, path):
        body = {
            "name": "Assistant Marketing",
            "system_prompt": "Tu es un assistant.",
            "model": "sonnet",
            "settings": {"sectorSlug": "marketing"},
            "business_profile": {"businessName": "Studio"},
        }
        with patch(SERVICE) as service:
            service.create_agent.return_value = sample_agent

            response = client.post(path, json=body, headers=auth_headers)

        assert response.status_code == 201
        assert response.json() == {"success": True, "data": sample_agent}

        forwarded_user, payload = service.create_agent.call_args.args
        assert forwarded_user == UUID(user_id)
        assert isinstance(payload, AgentCreate)
        assert payload.model == ModelType.SONNET
        assert payload.settings == {"sectorSlug": "marketing"}
        assert payload.business_profile == {"businessName": "Studio"}

    def test_missing_required_fields(self, client, auth_headers):
        response = client.post("/api/v1/agents", json={"description": "x"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: name, system_prompt"

    def test_empty_name_counts_as_missing(self, client, auth_headers):
        response = client.post(
            "/api/v1/agents",
            json={"name": "", "system_prompt": "ok"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: name"

    def test_limit_reached(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.create_agent.side_effect = LimitReachedError("Limite d'agents atteinte (1/1)", 1, 1)

            response = client.post(
                "/api/v1/agents",
                json={"name": "A", "system_prompt": "B"},
                headers=auth_headers,
            )

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "LIMIT_REACHED"
        assert body["details"] == {"current_usage": 1, "limit": 1}


class TestSingleAgent:

    def test_get_agent(self, client, user_id, auth_headers, sample_agent):
        with patch(SERVICE) as service:
            service.get_agent.return_value = sample_agent

            response = client.get(f"/api/v1/agents/{sample_agent['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["id"] == sample_agent["id"]
        service.get_agent.assert_called_once_with(sample_agent["id"], UUID(user_id))

    def test_get_missing_agent(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.get_agent.side_effect = ResourceNotFoundError("Agent", "abc")

            response = client.get("/api/v1/agents/abc", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Agent not found"

    def test_get_other_users_agent(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.get_agent.side_effect = ForbiddenError("agent")

            response = client.get("/api/v1/agents/abc", headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_patch_forwards_only_sent_fields(self, client, user_id, auth_headers, sample_agent):
        with patch(SERVICE) as service:
            service.update_agent.return_value = sample_agent

            response = client.patch(
                "/api/v1/agents/abc",
                json={"name": "Nouveau nom", "temperature": 0.3},
                headers=auth_headers,
            )

        assert response.status_code == 200
        service.update_agent.assert_called_once_with(
            "abc",
            UUID(user_id),
            {"name": "Nouveau nom", "temperature": 0.3},
        )

    def test_patch_null_name_rejected(self, client, auth_headers):
        with patch(SERVICE) as service:
            response = client.patch("/api/v1/agents/abc", json={"name": None}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["error"].startswith("Invalid request: name:")
        service.update_agent.assert_not_called()

    def test_patch_null_description_allowed(self, client, user_id, auth_headers, sample_agent):
        with patch(SERVICE) as service:
            service.update_agent.return_value = sample_agent

            response = client.patch("/api/v1/agents/abc", json={"description": None}, headers=auth_headers)

        assert response.status_code == 200
        service.update_agent.assert_called_once_with("abc", UUID(user_id), {"description": None})

    def test_delete(self, client, user_id, auth_headers):
        with patch(SERVICE) as service:
            response = client.delete("/api/v1/agents/abc", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Agent deleted successfully"}
        service.delete_agent.assert_called_once_with("abc", UUID(user_id))


class TestUpdateModel:

    def test_switch_model(self, client, user_id, auth_headers, sample_agent):
        with patch(SERVICE) as service:
            service.update_model.return_value = {**sample_agent, "model": "gpt-4o"}

            response = client.patch("/api/v1/agents/abc/model", json={"model": "gpt-4o"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"]["model"] == "gpt-4o"
        service.update_model.assert_called_once_with("abc", UUID(user_id), ModelType.GPT_4O)

    def test_missing_model(self, client, auth_headers):
        response = client.patch("/api/v1/agents/abc/model", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields: model"

    def test_invalid_model(self, client, auth_headers):
        response = client.patch("/api/v1/agents/abc/model", json={"model": "llama"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request: model")

    def test_model_not_in_plan(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.update_model.side_effect = LimitReachedError("Le modèle opus n'est pas disponible")

            response = client.patch("/api/v1/agents/abc/model", json={"model": "opus"}, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "LIMIT_REACHED"
