# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Real HS256 access tokens signed with the test JWT secret
# - A TestClient that turns unhandled errors into 500 responses
# =============================================================================

import os
import time
from uuid import uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("APP_URL", "http://localhost:3000")

import pytest
from fastapi.testclient import TestClient
from jose import jwt


def make_token(
    user_id: str | None = None,
    email: str = "marie@example.com",
    expires_in: int = 3600,
    **claims,
) -> str:
    """Supabase-style access token signed with the test secret."""
    payload = {
        "sub": user_id or str(uuid4()),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def client():
    """API client; unhandled exceptions come back as 500 responses."""
    from app.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def user_id():
    return str(uuid4())


@pytest.fixture
def token(user_id):
    return make_token(user_id)


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_agent(user_id):
    """Agent row as returned by Supabase."""
    return {
        "id": str(uuid4()),
        "user_id": user_id,
        "sector_id": str(uuid4()),
        "name": "Assistant Marketing",
        "description": None,
        "system_prompt": "Tu es un assistant marketing.",
        "model": "haiku",
        "agent_type": "companion",
        "temperature": 0.7,
        "max_tokens": 2000,
        "settings": {"sectorSlug": "marketing"},
        "business_profile_id": None,
        "is_active": True,
        "created_at": "2025-01-15T10:00:00+00:00",
        "updated_at": "2025-01-15T10:00:00+00:00",
    }


@pytest.fixture
def sample_conversation(user_id, sample_agent):
    return {
        "id": str(uuid4()),
        "user_id": user_id,
        "agent_id": sample_agent["id"],
        "title": None,
        "summary": None,
        "status": "active",
        "metadata": {},
        "created_at": "2025-01-15T10:05:00+00:00",
        "updated_at": "2025-01-15T10:05:00+00:00",
    }


@pytest.fixture
def sample_onboarding_data():
    """Companion wizard answers in the web client's camelCase form."""
    return {
        "agentType": "companion",
        "sectorId": "sector-1",
        "sectorName": "Marketing",
        "sectorSlug": "marketing",
        "businessName": "Studio Lumière",
        "businessType": "freelance",
        "location": "Lyon",
        "yearsExperience": "3-5",
        "mainClients": "PME locales",
        "specificities": "Identité visuelle",
        "typicalProjectSize": "2000-5000€",
        "mainChallenges": "Trouver des clients",
        "toolsUsed": "Figma, Notion",
        "primaryGoals": ["more_clients", "save_time"],
        "businessValues": "Créativité",
        "exampleProjects": "Refonte de marque",
        "communicationStyle": "accessible",
        "selectedLLM": "claude",
    }
