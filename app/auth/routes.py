# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication, plus the
# browser callback that turns an OAuth / magic-link code into cookies.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from app.config import settings
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# Mounted at the root (not under /api/v1): Supabase redirects browsers here
callback_router = APIRouter(tags=["Auth"])

DEFAULT_NEXT_PATH = "/chat"
CALLBACK_FAILED_PATH = "/login?error=auth_callback_failed"
CODE_VERIFIER_COOKIE_SUFFIX = "-auth-token-code-verifier"


@router.get("/me")
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Get the current authenticated user's profile.

    Falls back to the token claims when the profile row doesn't exist yet
    (the signup trigger may not have run).

    Raises:
        401: If not authenticated
    """
    try:
        profile = SupabaseClient.fetch_row("profiles", user.id)
        if profile:
            return {"success": True, "data": UserResponse(**profile).model_dump(mode="json")}

    except Exception as e:
        logger.warning(f"Could not fetch user profile: {e}")

    return {
        "success": True,
        "data": UserResponse(id=user.id, email=user.email).model_dump(mode="json"),
    }


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "success": True,
        "data": {
            "valid": True,
            "user_id": str(user.id),
            "email": user.email,
        },
    }


# =============================================================================
# Browser Callback
# =============================================================================

def safe_next_path(next_path: str | None) -> str:
    """
    Relative same-site path to continue to after sign in.

    Absolute URLs and protocol-relative "//host" paths fall back to /chat.
    """
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return DEFAULT_NEXT_PATH
    if "\\" in next_path:
        return DEFAULT_NEXT_PATH
    return next_path


def _code_verifier(request: Request) -> str | None:
    for name, value in request.cookies.items():
        if name.endswith(CODE_VERIFIER_COOKIE_SUFFIX):
            return value
    return None


def _set_session_cookies(response: RedirectResponse, session) -> None:
    cookie_options = {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "lax",
        "path": "/",
    }
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        session.access_token,
        max_age=getattr(session, "expires_in", None) or 3600,
        **cookie_options,
    )
    if getattr(session, "refresh_token", None):
        response.set_cookie(
            settings.AUTH_REFRESH_COOKIE_NAME,
            session.refresh_token,
            max_age=60 * 60 * 24 * 30,
            **cookie_options,
        )


@callback_router.get("/auth/callback")
async def auth_callback(
    request: Request,
    code: str | None = None,
    next: str | None = None,
) -> RedirectResponse:
    """
    Exchange an authorization code for a session and continue.

    Sets the access and refresh tokens as HTTP-only cookies, then
    redirects to `next` (default /chat). A failed exchange redirects to
    the login page with an error flag.
    """
    next_path = safe_next_path(next)

    if not code:
        return RedirectResponse(next_path, status_code=307)

    params = {"auth_code": code}
    verifier = _code_verifier(request)
    if verifier:
        params["code_verifier"] = verifier

    try:
        client = SupabaseClient.create_auth_client()
        auth_response = client.auth.exchange_code_for_session(params)
        session = auth_response.session
        if session is None:
            raise ValueError("Code exchange returned no session")

    except Exception as e:
        logger.warning(f"Auth code exchange failed: {e}")
        return RedirectResponse(CALLBACK_FAILED_PATH, status_code=307)

    response = RedirectResponse(next_path, status_code=307)
    _set_session_cookies(response, session)
    logger.info(f"Auth callback completed, redirecting to {next_path}")
    return response
