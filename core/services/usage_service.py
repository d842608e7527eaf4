# =============================================================================
# core/services/usage_service.py - Usage Tracking & Monthly Budget
# =============================================================================
# Writes `usage_logs` rows after each LLM call and reads the monthly
# spend aggregated by the `get_user_monthly_budget` database function.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from lib.pricing import calculate_cost
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)

BUDGET_RPC = "get_user_monthly_budget"

EMPTY_BUDGET = {
    "total_cost_usd": 0,
    "total_tokens": 0,
    "total_conversations": 0,
    "budget_limit_usd": 0,
    "budget_used_percent": 0,
}


class UsageService:
    """
    Service for usage logging and budget queries.
    """

    @staticmethod
    def get_monthly_budget(user_id: UUID | str) -> dict[str, Any]:
        """
        Current month's spend for a user.

        Returns:
            The RPC's single row, or a zeroed budget when it returns none

        Raises:
            Exception: If the RPC call fails
        """
        client = SupabaseClient.get_client()

        try:
            response = client.rpc(BUDGET_RPC, {"p_user_id": normalize_uuid(user_id)}).execute()
        except Exception as e:
            logger.error(f"Failed to fetch monthly budget for user {user_id}: {e}")
            raise

        rows = response.data or []
        if isinstance(rows, dict):
            return rows
        return rows[0] if rows else dict(EMPTY_BUDGET)

    @staticmethod
    def get_monthly_spend_usd(user_id: UUID | str) -> float:
        budget = UsageService.get_monthly_budget(user_id)
        return float(budget.get("total_cost_usd") or 0)

    @staticmethod
    def track_usage(
        user_id: UUID | str,
        model: str,
        input_tokens: int,
        output_tokens: int,
        agent_id: str | None = None,
        conversation_id: str | None = None,
        event_type: str = "message",
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Insert a usage log row. Best effort: failures are logged, never raised.

        cost_usd is computed from the model's list price.
        """
        client = SupabaseClient.get_client()

        row = {
            "user_id": normalize_uuid(user_id),
            "agent_id": agent_id,
            "conversation_id": conversation_id,
            "event_type": event_type,
            "model_used": model,
            "tokens_used": input_tokens + output_tokens,
            "cost_usd": calculate_cost(model, input_tokens, output_tokens),
            "metadata": {
                "input_tokens": input_tokens,
                "output_tokens": output_tokens,
                **(metadata or {}),
            },
        }

        try:
            response = client.table("usage_logs").insert(row).execute()
            return response.data[0] if response.data else None
        except Exception as e:
            logger.warning(f"Failed to log usage for user {user_id}: {e}")
            return None
