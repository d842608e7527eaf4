# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Database, auth and storage all live in Supabase

    SUPABASE_URL: str = Field(
        ...,  # ... means required (no default)
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key (used for the auth code exchange)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # LLM Providers
    # -------------------------------------------------------------------------

    OPENAI_API_KEY: str = Field(
        default="",
        description="OpenAI API key (gpt-4o, gpt-4o-mini)"
    )

    ANTHROPIC_API_KEY: str = Field(
        default="",
        description="Anthropic API key (haiku, sonnet, opus)"
    )

    DEFAULT_LLM_MODEL: str = Field(
        default="haiku",
        description="Model used when an agent does not specify one"
    )

    CHAT_HISTORY_LIMIT: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Max conversation messages sent to the LLM as context"
    )

    # -------------------------------------------------------------------------
    # Stripe Billing
    # -------------------------------------------------------------------------
    # Empty or "placeholder" keys disable the payment endpoints (503)

    STRIPE_SECRET_KEY: str = Field(
        default="",
        description="Stripe secret API key"
    )

    STRIPE_WEBHOOK_SECRET: str = Field(
        default="",
        description="Signing secret for the Stripe webhook endpoint"
    )

    STRIPE_PRICE_PRO_MONTHLY: str = Field(default="", description="Stripe price id: Pro monthly")
    STRIPE_PRICE_PRO_YEARLY: str = Field(default="", description="Stripe price id: Pro yearly")
    STRIPE_PRICE_ENTERPRISE_MONTHLY: str = Field(default="", description="Stripe price id: Enterprise monthly")
    STRIPE_PRICE_ENTERPRISE_YEARLY: str = Field(default="", description="Stripe price id: Enterprise yearly")

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    APP_URL: str = Field(
        default="http://localhost:3000",
        description="Public base URL of the web app (redirects, Stripe return URLs)"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    AUTH_COOKIE_NAME: str = Field(
        default="sb-access-token",
        description="Cookie holding the Supabase access token"
    )

    AUTH_REFRESH_COOKIE_NAME: str = Field(
        default="sb-refresh-token",
        description="Cookie holding the Supabase refresh token"
    )

    # -------------------------------------------------------------------------
    # Attachment Settings
    # -------------------------------------------------------------------------

    ATTACHMENTS_BUCKET: str = Field(
        default="conversation-attachments",
        description="Supabase Storage bucket for chat attachments"
    )

    MAX_ATTACHMENT_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum attachment size in MB"
    )

    SIGNED_URL_EXPIRES_IN: int = Field(
        default=3600,
        ge=60,
        description="Lifetime of storage signed URLs, in seconds"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        # Load from .env file in project root
        env_file=".env",
        env_file_encoding="utf-8",
        # Treat empty env vars as unset so defaults apply
        env_ignore_empty=True,
        # Case-sensitive environment variable names
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://yaya.app" -> ["http://localhost:3000", "https://yaya.app"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def max_attachment_size_bytes(self) -> int:
        """Convert MB to bytes for attachment size validation."""
        return self.MAX_ATTACHMENT_SIZE_MB * 1024 * 1024

    @property
    def stripe_configured(self) -> bool:
        """True when a real Stripe secret key is present."""
        return bool(self.STRIPE_SECRET_KEY) and "placeholder" not in self.STRIPE_SECRET_KEY

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
