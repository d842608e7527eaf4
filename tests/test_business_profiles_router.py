# =============================================================================
# tests/test_business_profiles_router.py - Business Profile Tests
# =============================================================================

from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest

from app.exceptions import ForbiddenError, ValidationFailedError
from core.models.business_profile import BusinessProfileInput
from core.services.business_profile_service import BusinessProfileService

SERVICE = "app.routers.business_profiles.BusinessProfileService"
MODULE = "core.services.business_profile_service"


@pytest.fixture
def sample_profile(user_id):
    return {
        "id": "bp-1",
        "user_id": user_id,
        "business_name": "Studio Lumière",
        "location": "Lyon",
        "primary_goals": ["more_clients"],
    }


class TestBusinessProfileEndpoints:

    def test_requires_auth(self, client):
        assert client.get("/api/v1/business-profiles").status_code == 401

    def test_get_existing(self, client, auth_headers, sample_profile):
        with patch(SERVICE) as service:
            service.get_for_user.return_value = sample_profile

            response = client.get("/api/v1/business-profiles", headers=auth_headers)

        assert response.json() == {"success": True, "data": sample_profile, "exists": True}

    def test_get_missing(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.get_for_user.return_value = None

            response = client.get("/api/v1/business-profiles", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "data": None, "exists": False}

    def test_upsert_accepts_camel_case(self, client, user_id, auth_headers, sample_profile):
        with patch(SERVICE) as service:
            service.upsert.return_value = sample_profile

            response = client.post(
                "/api/v1/business-profiles",
                json={"businessName": "Studio Lumière", "primaryGoals": ["more_clients"]},
                headers=auth_headers,
            )

        assert response.status_code == 200
        forwarded_user, profile = service.upsert.call_args.args
        assert forwarded_user == UUID(user_id)
        assert profile.business_name == "Studio Lumière"
        assert profile.primary_goals == ["more_clients"]

    def test_upsert_blank_name(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.upsert.side_effect = ValidationFailedError("business_name is required")

            response = client.post("/api/v1/business-profiles", json={"businessName": "  "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "business_name is required"

    def test_patch_forwards_sent_fields(self, client, user_id, auth_headers, sample_profile):
        with patch(SERVICE) as service:
            service.update.return_value = sample_profile

            response = client.patch(
                "/api/v1/business-profiles/bp-1",
                json={"location": "Paris"},
                headers=auth_headers,
            )

        assert response.status_code == 200
        service.update.assert_called_once_with("bp-1", UUID(user_id), {"location": "Paris"})

    def test_delete_other_users_profile(self, client, auth_headers):
        with patch(SERVICE) as service:
            service.delete.side_effect = ForbiddenError("profile")

            response = client.delete("/api/v1/business-profiles/bp-1", headers=auth_headers)

        assert response.status_code == 403

    def test_delete(self, client, user_id, auth_headers):
        with patch(SERVICE) as service:
            response = client.delete("/api/v1/business-profiles/bp-1", headers=auth_headers)

        assert response.json() == {"success": True, "message": "Profile deleted successfully"}
        service.delete.assert_called_once_with("bp-1", UUID(user_id))


class TestBusinessProfileService:

    def test_to_row_stores_blanks_as_null(self):
        row = BusinessProfileInput(business_name="  Studio  ", location="", tools_used="Figma").to_row()

        assert row["business_name"] == "Studio"
        assert row["location"] is None
        assert row["tools_used"] == "Figma"

    def test_upsert_on_user_id(self, user_id, sample_profile):
        db = MagicMock()
        db.table.return_value.upsert.return_value.execute.return_value = MagicMock(data=[sample_profile])

        with patch(f"{MODULE}.SupabaseClient.get_client", return_value=db):
            saved = BusinessProfileService.upsert(user_id, BusinessProfileInput(business_name="Studio Lumière"))

        assert saved == sample_profile
        row = db.table.return_value.upsert.call_args.args[0]
        assert row["user_id"] == user_id
        assert db.table.return_value.upsert.call_args.kwargs == {"on_conflict": "user_id"}

    def test_upsert_blank_name_rejected(self, user_id):
        with patch(f"{MODULE}.SupabaseClient.get_client") as get_client:
            with pytest.raises(ValidationFailedError):
                BusinessProfileService.upsert(user_id, BusinessProfileInput(business_name="   "))

        get_client.assert_not_called()

    def test_update_trims_name(self, user_id, sample_profile):
        db = MagicMock()
        db.table.return_value.update.return_value.eq.return_value.execute.return_value = MagicMock(data=[sample_profile])

        with patch.object(BusinessProfileService, "get_owned", return_value=sample_profile), \
             patch(f"{MODULE}.SupabaseClient.get_client", return_value=db):
            BusinessProfileService.update("bp-1", user_id, {"business_name": "  Atelier  "})

        updates = db.table.return_value.update.call_args.args[0]
        assert updates["business_name"] == "Atelier"
        assert "updated_at" in updates

    def test_empty_update_returns_current(self, user_id, sample_profile):
        with patch.object(BusinessProfileService, "get_owned", return_value=sample_profile), \
             patch(f"{MODULE}.SupabaseClient.get_client") as get_client:
            assert BusinessProfileService.update("bp-1", user_id, {}) == sample_profile

        get_client.assert_not_called()
