# =============================================================================
# tests/test_middleware.py - Page Gateway Tests
# =============================================================================

import pytest

from app.middleware import resolve_redirect
from tests.conftest import make_token


class TestResolveRedirect:

    @pytest.mark.parametrize("path", ["/chat", "/chat/abc", "/agents", "/settings", "/onboarding/step-2"])
    def test_anonymous_sent_to_login(self, path):
        target = resolve_redirect(path, authenticated=False)

        assert target.startswith("/login?redirect=")

    def test_redirect_param_is_encoded(self):
        assert resolve_redirect("/chat/123", False) == "/login?redirect=%2Fchat%2F123"

    @pytest.mark.parametrize("path", ["/", "/login", "/signup"])
    def test_signed_in_user_sent_to_chat(self, path):
        assert resolve_redirect(path, authenticated=True) == "/chat"

    @pytest.mark.parametrize("path", ["/", "/login", "/signup", "/pricing", "/api/v1/agents", "/auth/callback"])
    def test_anonymous_public_paths_pass(self, path):
        assert resolve_redirect(path, authenticated=False) is None

    @pytest.mark.parametrize("path", ["/chat", "/agents/1", "/login/help", "/api/v1/health"])
    def test_signed_in_other_paths_pass(self, path):
        assert resolve_redirect(path, authenticated=True) is None


class TestGatewayMiddleware:

    def test_anonymous_page_request_redirected(self, client):
        response = client.get("/settings", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/login?redirect=%2Fsettings"

    def test_invalid_cookie_counts_as_anonymous(self, client):
        response = client.get("/chat", headers={"Cookie": "sb-access-token=expired"}, follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"].startswith("/login")

    def test_signed_in_root_redirected_to_chat(self, client):
        response = client.get(
            "/",
            headers={"Cookie": f"sb-access-token={make_token()}"},
            follow_redirects=False,
        )

        assert response.status_code == 307
        assert response.headers["location"] == "/chat"

    def test_anonymous_root_served(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "yaya API"

    def test_api_routes_untouched(self, client):
        response = client.get("/api/v1/health", follow_redirects=False)

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
