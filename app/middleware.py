# =============================================================================
# app/middleware.py - Page Gateway Middleware
# =============================================================================
# Redirects browser navigation based on the session cookie:
# - anonymous visitors of app pages (/chat, /agents, ...) -> /login?redirect=<path>
# - signed-in users on landing/login/signup pages -> /chat
#
# API routes, the auth callback, docs and health checks pass through.
# The decision itself is the pure function resolve_redirect().
# =============================================================================

import logging
from typing import Callable
from urllib.parse import urlencode

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

from app.auth.dependencies import decode_access_token
from app.config import settings
from app.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/chat", "/agents", "/settings", "/onboarding")
PUBLIC_ONLY_PATHS = ("/", "/login", "/signup")

LOGIN_PATH = "/login"
HOME_PATH = "/chat"


def resolve_redirect(path: str, authenticated: bool) -> str | None:
    """
    Where to send a request, or None to let it through.

    Example:
        resolve_redirect("/chat/123", False) -> "/login?redirect=%2Fchat%2F123"
        resolve_redirect("/login", True) -> "/chat"
        resolve_redirect("/api/v1/agents", False) -> None
    """
    if authenticated and path in PUBLIC_ONLY_PATHS:
        return HOME_PATH

    if not authenticated and path.startswith(PROTECTED_PREFIXES):
        return f"{LOGIN_PATH}?{urlencode({'redirect': path})}"

    return None


def _needs_identity(path: str) -> bool:
    return path in PUBLIC_ONLY_PATHS or path.startswith(PROTECTED_PREFIXES)


class GatewayMiddleware(BaseHTTPMiddleware):
    """
    Session-based redirects for page routes.

    Identity comes from the auth cookie, else the bearer header. Invalid
    or expired tokens count as anonymous.
    """

    def _is_authenticated(self, request: Request) -> bool:
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)
        if not token:
            authorization = request.headers.get("Authorization", "")
            if authorization.lower().startswith("bearer "):
                token = authorization[7:].strip()

        if not token:
            return False

        try:
            decode_access_token(token)
            return True
        except AuthenticationError:
            return False

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if not _needs_identity(path):
            return await call_next(request)

        target = resolve_redirect(path, self._is_authenticated(request))
        if target:
            logger.debug(f"Gateway redirect {path} -> {target}")
            return RedirectResponse(target, status_code=307)

        return await call_next(request)
