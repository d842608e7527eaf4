# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error leaves the API in the same envelope:
#   {"success": false, "error": "<message>", "code": "<CODE>", ...}
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class YayaException(Exception):
    """
    Base exception for the yaya API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "YAYA_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the API error envelope."""
        result = {
            "success": False,
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Auth Exceptions
# =============================================================================

class AuthenticationError(YayaException):
    """Raised when the request carries no valid Supabase session."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Sign in again to obtain a fresh access token",
        )


class ForbiddenError(YayaException):
    """Raised when the caller does not own the requested resource."""

    def __init__(self, resource: str = "resource", message: str | None = None):
        super().__init__(
            message=message or f"Forbidden: You do not own this {resource}",
            code="FORBIDDEN",
            status_code=403,
        )


class LimitReachedError(YayaException):
    """Raised when the caller's subscription plan does not allow an action."""

    def __init__(
        self,
        reason: str,
        current_usage: int | None = None,
        limit: int | None = None,
    ):
        details = {}
        if current_usage is not None:
            details["current_usage"] = current_usage
        if limit is not None:
            details["limit"] = limit
        super().__init__(
            message=reason,
            code="LIMIT_REACHED",
            status_code=403,
            suggestion="Upgrade your plan from the settings page",
            details=details,
        )


# =============================================================================
# Resource Exceptions
# =============================================================================

class ResourceNotFoundError(YayaException):
    """Raised when a record doesn't exist."""

    def __init__(self, resource: str, resource_id: str | None = None):
        details = {"id": resource_id} if resource_id else {}
        super().__init__(
            message=f"{resource} not found",
            code=f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            status_code=404,
            details=details,
        )


class ValidationFailedError(YayaException):
    """Raised when a payload is missing a required field or holds a bad value."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            details=details,
        )


# =============================================================================
# Attachment Exceptions
# =============================================================================

class InvalidFileTypeError(YayaException):
    """Raised when an uploaded file's MIME type is not allowed."""

    def __init__(self, content_type: str, allowed: list[str]):
        super().__init__(
            message="File type not allowed",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"content_type": content_type, "allowed_types": allowed},
        )


class FileTooLargeError(YayaException):
    """Raised when an uploaded file exceeds the size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large. Max size is {max_mb}MB",
            code="FILE_TOO_LARGE",
            status_code=400,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class StorageUploadError(YayaException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
        )


class SignedUrlError(YayaException):
    """Raised when storage refuses to sign a URL for a stored file."""

    def __init__(self, path: str):
        super().__init__(
            message="Failed to generate file URL",
            code="SIGNED_URL_ERROR",
            status_code=500,
            details={"path": path},
        )


# =============================================================================
# External Service Exceptions
# =============================================================================

class LLMProviderError(YayaException):
    """Raised when the LLM provider call fails."""

    def __init__(self, provider: str, error: str):
        super().__init__(
            message=error or "Failed to get response from AI",
            code="LLM_PROVIDER_ERROR",
            status_code=500,
            details={"provider": provider},
        )


class PaymentsNotConfiguredError(YayaException):
    """Raised when Stripe keys are absent."""

    def __init__(self):
        super().__init__(
            message="Payment system is not configured",
            code="PAYMENTS_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set STRIPE_SECRET_KEY and the STRIPE_PRICE_* variables",
        )


class PaymentProviderError(YayaException):
    """Raised when Stripe rejects a request or is misconfigured."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="PAYMENT_PROVIDER_ERROR",
            status_code=500,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def extract_error_message(exc: Exception) -> str:
    """Best-effort human readable message for an arbitrary exception."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or "Internal server error"


async def yaya_exception_handler(
    request: Request,
    exc: YayaException
) -> JSONResponse:
    """Handle custom exceptions with structured response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors as 400.

    Missing or empty fields are grouped into a single
    "Missing required fields: ..." message.
    """
    missing = []
    problems = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        field = ".".join(loc) or "body"
        if error.get("type") in ("missing", "string_too_short", "too_short"):
            missing.append(field)
        else:
            problems.append(f"{field}: {error.get('msg')}")

    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    elif problems:
        message = f"Invalid request: {problems[0]}"
    else:
        message = "Invalid request"

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": message,
            "code": "VALIDATION_ERROR",
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework HTTP errors (404 route, 405 method) in the envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": str(exc.detail),
            "code": "HTTP_ERROR",
        },
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions as 500, keeping the upstream message."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": extract_error_message(exc),
            "code": "INTERNAL_ERROR",
        }
    )
