# =============================================================================
# core/services/limits_service.py - Subscription Limit Checks
# =============================================================================
# Checks a user's current usage against the limits of their plan:
# - agents: active agents vs max_agents
# - Doggos: this month's token spend vs max_doggo_monthly
# - models: plan's allowed models and monthly premium quotas
#
# Each check returns a LimitCheckResult; `enforce()` turns a refusal into
# LimitReachedError (403 LIMIT_REACHED) for the HTTP layer.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import LimitReachedError
from core.models.subscription import (
    LimitCheckResult,
    ModelType,
    PREMIUM_MODELS,
    SubscriptionTier,
)
from core.services.usage_service import UsageService
from lib.llm_client import resolve_model_id
from lib.pricing import get_plan_limits, is_model_allowed, usd_to_doggo
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid, start_of_month_iso

logger = logging.getLogger(__name__)


class LimitsService:
    """
    Plan limit checks backed by the `profiles`, `agents` and `messages` tables.
    """

    @staticmethod
    def get_user_tier(user_id: UUID | str) -> SubscriptionTier:
        """
        Subscription tier stored on the user's profile.

        Users without a profile row (or with an unknown tier) are on FREE.
        """
        profile = SupabaseClient.fetch_row("profiles", user_id, columns="subscription_tier")
        if not profile or not profile.get("subscription_tier"):
            return SubscriptionTier.FREE
        try:
            return SubscriptionTier(profile["subscription_tier"])
        except ValueError:
            logger.warning(f"Unknown subscription tier '{profile['subscription_tier']}' for user {user_id}")
            return SubscriptionTier.FREE

    @staticmethod
    def count_active_agents(user_id: UUID | str) -> int:
        return SupabaseClient.count_rows("agents", user_id=normalize_uuid(user_id), is_active=True)

    @staticmethod
    def count_model_usage_this_month(user_id: UUID | str, model: ModelType | str) -> int:
        """
        Assistant messages produced by `model` since the 1st of the month.

        Messages store the provider model id, so both the short name and
        the resolved id are counted.
        """
        client = SupabaseClient.get_client()
        name = model.value if isinstance(model, ModelType) else model

        conversations = (
            client.table("conversations")
            .select("id")
            .eq("user_id", normalize_uuid(user_id))
            .execute()
        )
        conversation_ids = [row["id"] for row in conversations.data or []]
        if not conversation_ids:
            return 0

        response = (
            client.table("messages")
            .select("id", count="exact", head=True)
            .in_("model_used", list({name, resolve_model_id(name)}))
            .gte("created_at", start_of_month_iso())
            .in_("conversation_id", conversation_ids)
            .execute()
        )
        return response.count or 0

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    @staticmethod
    def check_can_create_agent(user_id: UUID | str) -> LimitCheckResult:
        tier = LimitsService.get_user_tier(user_id)
        limits = get_plan_limits(tier)
        current = LimitsService.count_active_agents(user_id)

        if current >= limits.max_agents:
            return LimitCheckResult(
                allowed=False,
                reason=(
                    f"Limite d'agents atteinte ({current}/{limits.max_agents}). "
                    "Passez à un plan supérieur."
                ),
                current_usage=current,
                limit=limits.max_agents,
            )

        return LimitCheckResult(allowed=True, current_usage=current, limit=limits.max_agents)

    @staticmethod
    def check_can_use_model(user_id: UUID | str, model: ModelType | str) -> LimitCheckResult:
        tier = LimitsService.get_user_tier(user_id)
        name = model.value if isinstance(model, ModelType) else model

        if not is_model_allowed(tier, name):
            return LimitCheckResult(
                allowed=False,
                reason=(
                    f"Le modèle {name} n'est pas disponible dans votre plan. "
                    "Passez à un plan supérieur."
                ),
            )

        if name not in [premium.value for premium in PREMIUM_MODELS]:
            return LimitCheckResult(allowed=True)

        quota = get_plan_limits(tier).premium_models_quota.get(name)
        if quota is None:
            return LimitCheckResult(allowed=True)

        try:
            current = LimitsService.count_model_usage_this_month(user_id, name)
        except Exception as e:
            logger.error(f"Failed to count {name} usage for user {user_id}: {e}")
            current = 0

        if current >= quota:
            return LimitCheckResult(
                allowed=False,
                reason=(
                    f"Quota mensuel de {name} atteint ({current}/{quota}). "
                    "Renouvellement le 1er du mois."
                ),
                current_usage=current,
                limit=quota,
            )

        return LimitCheckResult(allowed=True, current_usage=current, limit=quota)

    @staticmethod
    def check_can_send_message(user_id: UUID | str) -> LimitCheckResult:
        tier = LimitsService.get_user_tier(user_id)
        limits = get_plan_limits(tier)
        used_doggo = round(usd_to_doggo(UsageService.get_monthly_spend_usd(user_id)))

        if used_doggo >= limits.max_doggo_monthly:
            return LimitCheckResult(
                allowed=False,
                reason=(
                    f"Limite mensuelle de Doggos atteinte ({used_doggo}/{limits.max_doggo_monthly}). "
                    "Passez à un plan supérieur ou attendez le renouvellement."
                ),
                current_usage=used_doggo,
                limit=limits.max_doggo_monthly,
            )

        return LimitCheckResult(allowed=True, current_usage=used_doggo, limit=limits.max_doggo_monthly)

    @staticmethod
    def check_all_limits_for_message(user_id: UUID | str, model: ModelType | str) -> LimitCheckResult:
        """Doggo budget first, then model access and premium quota."""
        doggo_check = LimitsService.check_can_send_message(user_id)
        if not doggo_check.allowed:
            return doggo_check

        model_check = LimitsService.check_can_use_model(user_id, model)
        if not model_check.allowed:
            return model_check

        return LimitCheckResult(allowed=True)

    @staticmethod
    def enforce(result: LimitCheckResult) -> None:
        """
        Raise when a check refused the action.

        Raises:
            LimitReachedError: If result.allowed is False
        """
        if not result.allowed:
            raise LimitReachedError(
                result.reason or "Limite atteinte",
                current_usage=result.current_usage,
                limit=result.limit,
            )

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    @staticmethod
    def get_user_limits_summary(user_id: UUID | str) -> dict[str, Any]:
        """
        Usage vs limits for the settings page.

        Returns:
            {"tier", "agents": {current, limit, percentage},
             "doggo": {current, limit, percentage}, "allowed_models", "premium_quotas"}
        """
        tier = LimitsService.get_user_tier(user_id)
        limits = get_plan_limits(tier)
        agent_count = LimitsService.count_active_agents(user_id)
        used_doggo = usd_to_doggo(UsageService.get_monthly_spend_usd(user_id))

        return {
            "tier": tier.value,
            "agents": {
                "current": agent_count,
                "limit": limits.max_agents,
                "percentage": (agent_count / limits.max_agents) * 100,
            },
            "doggo": {
                "current": round(used_doggo),
                "limit": limits.max_doggo_monthly,
                "percentage": (used_doggo / limits.max_doggo_monthly) * 100,
            },
            "allowed_models": [model.value for model in limits.allowed_models],
            "premium_quotas": dict(limits.premium_models_quota),
        }
