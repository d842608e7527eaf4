# =============================================================================
# tests/test_services.py - Ownership Checks and Agent Creation
# =============================================================================
# Runs the real services against a mocked Supabase client, so the
# fetch_row -> same_owner path is exercised end to end.
# =============================================================================

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from app.exceptions import ForbiddenError, LimitReachedError, ResourceNotFoundError
from core.models.agent import AgentCreate
from core.models.subscription import LimitCheckResult
from core.services.agent_service import AgentService
from core.services.attachment_service import AttachmentService
from core.services.business_profile_service import BusinessProfileService
from core.services.conversation_service import ConversationService
from core.services.limits_service import LimitsService
from core.services.sector_service import SectorService
from lib.supabase_client import SupabaseClient


class PostgrestError(Exception):
    """Error shaped like postgrest's APIError (code attribute)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


def _query(data=None, error=None):
    """Chainable PostgREST query whose execute() returns data or raises."""
    query = MagicMock()
    for name in ("select", "eq", "single", "insert", "update", "upsert", "order", "limit", "range"):
        getattr(query, name).return_value = query
    if error:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=data, count=None)
    return query


@pytest.fixture
def db():
    """Supabase client whose table() returns the query set by the test."""
    client = MagicMock()
    with patch.object(SupabaseClient, "get_client", return_value=client):
        yield client


# =============================================================================
# Ownership
# =============================================================================

OWNED_LOOKUPS = [
    (AgentService.get_agent, "Agent not found"),
    (ConversationService.get_conversation, "Conversation not found"),
    (AttachmentService.get_owned, "Attachment not found"),
    (BusinessProfileService.get_owned, "Profile not found"),
]


class TestOwnership:

    @pytest.mark.parametrize("lookup,message", OWNED_LOOKUPS)
    def test_missing_row(self, db, user_id, lookup, message):
        db.table.return_value = _query(error=PostgrestError("PGRST116", "JSON object requested, 0 rows"))

        with pytest.raises(ResourceNotFoundError) as exc_info:
            lookup(str(uuid4()), user_id)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == message

    @pytest.mark.parametrize("lookup,message", OWNED_LOOKUPS)
    def test_malformed_id(self, db, user_id, lookup, message):
        db.table.return_value = _query(
            error=PostgrestError("22P02", 'invalid input syntax for type uuid: "abc"')
        )

        with pytest.raises(ResourceNotFoundError) as exc_info:
            lookup("abc", user_id)

        assert exc_info.value.message == message

    @pytest.mark.parametrize("lookup,message", OWNED_LOOKUPS)
    def test_row_of_other_user(self, db, user_id, lookup, message):
        db.table.return_value = _query(data={"id": "row-1", "user_id": str(uuid4())})

        with pytest.raises(ForbiddenError) as exc_info:
            lookup("row-1", user_id)

        assert exc_info.value.status_code == 403

    @pytest.mark.parametrize("lookup,message", OWNED_LOOKUPS)
    def test_own_row_returned(self, db, user_id, lookup, message):
        row = {"id": "row-1", "user_id": user_id}
        db.table.return_value = _query(data=row)

        assert lookup("row-1", user_id) == row

    def test_other_database_errors_propagate(self, db, user_id):
        db.table.return_value = _query(error=PostgrestError("57014", "statement timeout"))

        with pytest.raises(Exception) as exc_info:
            AgentService.get_agent(str(uuid4()), user_id)

        assert not isinstance(exc_info.value, ResourceNotFoundError)


class TestMalformedIdEndpoint:

    def test_get_agent_with_non_uuid_id(self, client, auth_headers, db):
        db.table.return_value = _query(
            error=PostgrestError("22P02", 'invalid input syntax for type uuid: "abc"')
        )

        response = client.get("/api/v1/agents/abc", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "Agent not found"


# =============================================================================
# AgentService.create_agent
# =============================================================================

@pytest.fixture
def allowed():
    with patch.object(LimitsService, "check_can_create_agent", return_value=LimitCheckResult(allowed=True)) as mock:
        yield mock


def _inserted_row(db):
    return db.table.return_value.insert.call_args.args[0]


class TestCreateAgent:

    def test_inserted_row_defaults(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        agent = AgentService.create_agent(
            user_id,
            AgentCreate(name="Assistant Marketing", system_prompt="Tu es un assistant."),
        )

        assert agent == {"id": "agent-1"}
        db.table.assert_called_with("agents")
        assert _inserted_row(db) == {
            "user_id": user_id,
            "name": "Assistant Marketing",
            "description": None,
            "sector_id": None,
            "business_profile_id": None,
            "system_prompt": "Tu es un assistant.",
            "model": "claude",
            "agent_type": "companion",
            "temperature": 0.7,
            "max_tokens": 2000,
            "settings": {},
            "is_active": True,
        }

    def test_explicit_fields_kept(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        AgentService.create_agent(user_id, AgentCreate(
            name="Relances",
            system_prompt="Tu relances les clients.",
            sector_id="sector-9",
            model="sonnet",
            agent_type="task",
        ))

        row = _inserted_row(db)
        assert row["sector_id"] == "sector-9"
        assert row["model"] == "sonnet"
        assert row["agent_type"] == "task"

    def test_sector_from_slug(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        with patch.object(SectorService, "get_by_slug", return_value={"id": "sector-marketing"}) as by_slug:
            AgentService.create_agent(user_id, AgentCreate(
                name="A", system_prompt="P", settings={"sectorSlug": "marketing"},
            ))

        by_slug.assert_called_once_with("marketing")
        assert _inserted_row(db)["sector_id"] == "sector-marketing"

    def test_unknown_slug_falls_back_to_first_sector(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        with patch.object(SectorService, "get_by_slug", return_value=None), \
             patch.object(SectorService, "get_first_sector_id", return_value="sector-first"):
            AgentService.create_agent(user_id, AgentCreate(
                name="A", system_prompt="P", settings={"sectorSlug": "inconnu"},
            ))

        assert _inserted_row(db)["sector_id"] == "sector-first"

    def test_existing_profile_id_reused(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        with patch.object(BusinessProfileService, "upsert") as upsert:
            AgentService.create_agent(user_id, AgentCreate(
                name="A", system_prompt="P", business_profile={"profileId": "profile-1", "businessName": "Studio"},
            ))

        upsert.assert_not_called()
        assert _inserted_row(db)["business_profile_id"] == "profile-1"

    def test_profile_upserted_from_answers(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        with patch.object(BusinessProfileService, "upsert", return_value={"id": "profile-2"}) as upsert:
            AgentService.create_agent(user_id, AgentCreate(
                name="A", system_prompt="P", business_profile={"businessName": "Studio Lumière", "location": "Lyon"},
            ))

        profile = upsert.call_args.args[1]
        assert profile.business_name == "Studio Lumière"
        assert profile.location == "Lyon"
        assert _inserted_row(db)["business_profile_id"] == "profile-2"

    def test_profile_failure_does_not_block_creation(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        with patch.object(BusinessProfileService, "upsert", side_effect=Exception("upsert failed")):
            agent = AgentService.create_agent(user_id, AgentCreate(
                name="A", system_prompt="P", business_profile={"businessName": "Studio"},
            ))

        assert agent == {"id": "agent-1"}
        assert _inserted_row(db)["business_profile_id"] is None

    def test_answers_without_business_name_skip_profile(self, db, user_id, allowed):
        db.table.return_value = _query(data=[{"id": "agent-1"}])

        with patch.object(BusinessProfileService, "upsert") as upsert:
            AgentService.create_agent(user_id, AgentCreate(
                name="A", system_prompt="P", business_profile={"location": "Lyon"},
            ))

        upsert.assert_not_called()

    def test_limit_reached(self, db, user_id):
        refusal = LimitCheckResult(
            allowed=False,
            reason="Limite de 1 agent atteinte",
            current_usage=1,
            limit=1,
        )

        with patch.object(LimitsService, "check_can_create_agent", return_value=refusal):
            with pytest.raises(LimitReachedError) as exc_info:
                AgentService.create_agent(user_id, AgentCreate(name="A", system_prompt="P"))

        assert exc_info.value.status_code == 403
        db.table.assert_not_called()

    def test_empty_insert_raises(self, db, user_id, allowed):
        db.table.return_value = _query(data=[])

        with pytest.raises(Exception, match="Insert returned no data"):
            AgentService.create_agent(user_id, AgentCreate(name="A", system_prompt="P"))
