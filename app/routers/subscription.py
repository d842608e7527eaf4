# =============================================================================
# app/routers/subscription.py - Plan, Limits and Budget Endpoints
# =============================================================================
# Read-only views used by the settings page:
# - /subscription/limits: usage vs the caller's plan limits
# - /subscription/plans: public plan catalogue
# - /budget/monthly: current month's spend (Supabase RPC)
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth import AuthUser, get_current_user
from core.services.limits_service import LimitsService
from core.services.usage_service import UsageService
from lib.pricing import get_all_plans

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/subscription/limits")
async def get_subscription_limits(user: AuthUser = Depends(get_current_user)):
    """
    Usage summary for the caller's plan.

    Returns tier, agent and Doggo usage with percentages, allowed models
    and premium model quotas.
    """
    summary = LimitsService.get_user_limits_summary(user.id)
    return {"success": True, "data": summary}


@router.get("/subscription/plans")
async def list_plans():
    """Public plan catalogue (no authentication)."""
    plans = [
        plan.model_dump(mode="json", exclude={"stripe_price_id_monthly", "stripe_price_id_yearly"})
        for plan in get_all_plans()
    ]
    return {"success": True, "data": plans}


@router.get("/budget/monthly")
async def get_monthly_budget(user: AuthUser = Depends(get_current_user)):
    """Current month's LLM spend for the caller."""
    budget = UsageService.get_monthly_budget(user.id)
    return {"success": True, "data": budget}
