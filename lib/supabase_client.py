# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper around the Supabase Python client.
# It implements the singleton pattern to reuse a single service-role client
# and provides small helpers shared by every service:
# - Fetching a single row by id (None when it doesn't exist)
# - Detecting PostgREST "no rows" errors
# - Creating a throwaway anon client for the auth code exchange
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   agent = SupabaseClient.fetch_row("agents", agent_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST error code returned by .single() when zero rows match
NOT_FOUND_CODE = "PGRST116"
# Postgres invalid_text_representation, e.g. "abc" compared to a uuid column
INVALID_TEXT_CODE = "22P02"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_not_found_error(error: Exception) -> bool:
    """True when a PostgREST error means no row can match (none found, or a malformed id)."""
    code = getattr(error, "code", None)
    return any(code == c or c in str(error) for c in (NOT_FOUND_CODE, INVALID_TEXT_CODE))


class SupabaseClient:
    """
    Typed wrapper for Supabase operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        client = SupabaseClient.get_client()
        rows = client.table("agents").select("*").eq("user_id", uid).execute().data

        agent = SupabaseClient.fetch_row("agents", agent_id)
        if agent is None:
            ...
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Ownership is therefore checked explicitly in the service layer.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def create_auth_client(cls) -> Client:
        """
        Create a fresh client with the anon key.

        Used for the OAuth / magic-link code exchange, which stores session
        state on the client and so must not share the service singleton.
        """
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Row Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_row(
        cls,
        table: str,
        row_id: str | UUID,
        columns: str = "*",
        id_column: str = "id",
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by primary key.

        Args:
            table: Table name
            row_id: Value of the id column
            columns: PostgREST select expression (joins allowed)
            id_column: Column to match on (default "id")

        Returns:
            Row dict, or None if no row matches

        Raises:
            SupabaseClientError: If the query fails for another reason
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(id_column, row_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found_error(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="FETCH_ROW_FAILED",
                details={"table": table, id_column: row_id_str}
            )

    @classmethod
    def count_rows(cls, table: str, **filters: Any) -> int:
        """
        Count rows in a table matching equality filters.

        Example:
            SupabaseClient.count_rows("agents", user_id=uid, is_active=True)
        """
        client = cls.get_client()
        query = client.table(table).select("id", count="exact", head=True)
        for column, value in filters.items():
            query = query.eq(column, cls._normalize_uuid(value) if isinstance(value, UUID) else value)

        response = query.execute()
        return response.count or 0
