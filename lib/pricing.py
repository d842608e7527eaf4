# =============================================================================
# lib/pricing.py - Plans, Model Pricing and Doggo Currency
# =============================================================================
# Static pricing knowledge used by the limits checker and billing:
# - get_plan(): free / pro / enterprise with limits
# - MODEL_PRICING: USD per million tokens for each provider model
# - Doggo conversion: the in-app unit shown to users
#   (1 Doggo = 0.000526 USD of token spend)
#
# Stripe price ids are read from settings at call time so they follow
# the environment.
# =============================================================================

from dataclasses import dataclass

from app.config import settings
from lib.llm_client import resolve_model_id
from core.models.subscription import (
    ModelType,
    PlanLimits,
    SubscriptionPlan,
    SubscriptionTier,
)


# =============================================================================
# Doggo Currency
# =============================================================================

DOGGO_VALUE_USD = 0.000526
DEFAULT_DOGGO_LIMIT = 10000


def usd_to_doggo(usd: float) -> float:
    """Convert a USD token spend into Doggos."""
    return usd / DOGGO_VALUE_USD


def doggo_to_usd(doggo: float) -> float:
    """Convert Doggos back into USD."""
    return doggo * DOGGO_VALUE_USD


def doggo_usage_percent(used_doggo: float, limit_doggo: float = DEFAULT_DOGGO_LIMIT) -> float:
    if limit_doggo == 0:
        return 0
    return (used_doggo / limit_doggo) * 100


# =============================================================================
# Model Pricing
# =============================================================================

@dataclass(frozen=True)
class ModelPricing:
    """Provider list price for one model, USD per 1M tokens."""
    id: str
    name: str
    provider: str
    display_name: str
    input_price_per_million: float
    output_price_per_million: float
    context_window: int


MODEL_PRICING: dict[str, ModelPricing] = {
    "claude-3-haiku-20240307": ModelPricing(
        id="claude-3-haiku-20240307",
        name="haiku",
        provider="anthropic",
        display_name="Claude 3 Haiku",
        input_price_per_million=0.25,
        output_price_per_million=1.25,
        context_window=200000,
    ),
    "claude-3-sonnet-20240229": ModelPricing(
        id="claude-3-sonnet-20240229",
        name="sonnet",
        provider="anthropic",
        display_name="Claude 3 Sonnet",
        input_price_per_million=3.0,
        output_price_per_million=15.0,
        context_window=200000,
    ),
    "claude-3-opus-20240229": ModelPricing(
        id="claude-3-opus-20240229",
        name="opus",
        provider="anthropic",
        display_name="Claude 3 Opus",
        input_price_per_million=15.0,
        output_price_per_million=75.0,
        context_window=200000,
    ),
    "gpt-4o-mini": ModelPricing(
        id="gpt-4o-mini",
        name="gpt-4o-mini",
        provider="openai",
        display_name="GPT-4o Mini",
        input_price_per_million=0.15,
        output_price_per_million=0.60,
        context_window=128000,
    ),
    "gpt-4o": ModelPricing(
        id="gpt-4o",
        name="gpt-4o",
        provider="openai",
        display_name="GPT-4o",
        input_price_per_million=2.50,
        output_price_per_million=10.0,
        context_window=128000,
    ),
}


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """
    Cost of one LLM call in USD.

    Accepts a full model id or a short name ("sonnet"). Unknown models
    cost 0 so usage logging never fails on a new model.
    """
    pricing = MODEL_PRICING.get(model) or MODEL_PRICING.get(resolve_model_id(model))
    if pricing is None:
        return 0.0

    input_cost = (input_tokens / 1_000_000) * pricing.input_price_per_million
    output_cost = (output_tokens / 1_000_000) * pricing.output_price_per_million
    return input_cost + output_cost


# =============================================================================
# Subscription Plans
# =============================================================================

_ECONOMY_MODELS = [ModelType.HAIKU, ModelType.GPT_4O_MINI, ModelType.CLAUDE, ModelType.GPT]


def _build_plans() -> dict[SubscriptionTier, SubscriptionPlan]:
    return {
        SubscriptionTier.FREE: SubscriptionPlan(
            id=SubscriptionTier.FREE,
            name="Gratuit",
            description="Parfait pour découvrir yaya.ia",
            price_monthly=0,
            price_yearly=0,
            limits=PlanLimits(
                max_agents=1,
                max_doggo_monthly=1000,
                max_conversations_monthly=50,
                allowed_models=list(_ECONOMY_MODELS),
                premium_models_quota={},
                features=[
                    "1 agent IA personnalisé",
                    "1000 Doggos/mois (~50 conversations)",
                    "Modèles économiques (Haiku, GPT-4o-mini)",
                    "Support communautaire",
                ],
                support="community",
            ),
        ),
        SubscriptionTier.PRO: SubscriptionPlan(
            id=SubscriptionTier.PRO,
            name="Pro",
            description="Pour les professionnels exigeants",
            price_monthly=10,
            price_yearly=96,
            stripe_price_id_monthly=settings.STRIPE_PRICE_PRO_MONTHLY,
            stripe_price_id_yearly=settings.STRIPE_PRICE_PRO_YEARLY,
            popular=True,
            limits=PlanLimits(
                max_agents=3,
                max_doggo_monthly=10000,
                max_conversations_monthly=300,
                allowed_models=[*_ECONOMY_MODELS, ModelType.GPT_4O, ModelType.SONNET],
                premium_models_quota={"gpt-4o": 20, "sonnet": 50},
                features=[
                    "3 agents IA personnalisés",
                    "10 000 Doggos/mois (~300 conversations)",
                    "50 requêtes Sonnet/mois",
                    "20 requêtes GPT-4o/mois",
                    "Support prioritaire email",
                ],
                support="priority",
            ),
        ),
        SubscriptionTier.ENTERPRISE: SubscriptionPlan(
            id=SubscriptionTier.ENTERPRISE,
            name="Enterprise",
            description="Pour les équipes et grandes organisations",
            price_monthly=30,
            price_yearly=288,
            stripe_price_id_monthly=settings.STRIPE_PRICE_ENTERPRISE_MONTHLY,
            stripe_price_id_yearly=settings.STRIPE_PRICE_ENTERPRISE_YEARLY,
            limits=PlanLimits(
                max_agents=10,
                max_doggo_monthly=30000,
                max_conversations_monthly=800,
                allowed_models=[*_ECONOMY_MODELS, ModelType.GPT_4O, ModelType.SONNET, ModelType.OPUS],
                premium_models_quota={"gpt-4o": 50, "sonnet": 150, "opus": 10},
                features=[
                    "10 agents IA personnalisés",
                    "30 000 Doggos/mois (~800 conversations)",
                    "Tous les modèles disponibles",
                    "10 requêtes Opus/mois",
                    "Support premium 24/7",
                ],
                support="premium",
            ),
        ),
    }


def get_plan(tier: SubscriptionTier | str) -> SubscriptionPlan:
    """
    Plan for a tier.

    Raises:
        ValueError: If the tier is unknown
    """
    return _build_plans()[SubscriptionTier(tier)]


def find_plan(plan_id: str) -> SubscriptionPlan | None:
    """Plan for a tier name, or None for unknown names."""
    try:
        return get_plan(plan_id)
    except ValueError:
        return None


def get_plan_limits(tier: SubscriptionTier | str) -> PlanLimits:
    return get_plan(tier).limits


def get_all_plans() -> list[SubscriptionPlan]:
    """All plans, cheapest first."""
    return sorted(_build_plans().values(), key=lambda plan: plan.price_monthly)


def get_paid_plans() -> list[SubscriptionPlan]:
    return [plan for plan in get_all_plans() if plan.price_monthly > 0]


def is_model_allowed(tier: SubscriptionTier | str, model: ModelType | str) -> bool:
    try:
        return ModelType(model) in get_plan_limits(tier).allowed_models
    except ValueError:
        return False


def can_create_agent(tier: SubscriptionTier | str, current_agent_count: int) -> bool:
    return current_agent_count < get_plan_limits(tier).max_agents


def get_premium_model_quota(tier: SubscriptionTier | str, model: ModelType | str) -> int | None:
    """Monthly quota for a premium model, None when the plan has no quota for it."""
    key = model.value if isinstance(model, ModelType) else model
    return get_plan_limits(tier).premium_models_quota.get(key)


def compare_plans(tier_a: SubscriptionTier | str, tier_b: SubscriptionTier | str) -> float:
    """Negative when tier_a is cheaper than tier_b."""
    return get_plan(tier_a).price_monthly - get_plan(tier_b).price_monthly


def can_upgrade(current_tier: SubscriptionTier | str, target_tier: SubscriptionTier | str) -> bool:
    return compare_plans(current_tier, target_tier) < 0


def can_downgrade(current_tier: SubscriptionTier | str, target_tier: SubscriptionTier | str) -> bool:
    return compare_plans(current_tier, target_tier) > 0


def tier_for_price_id(price_id: str | None) -> SubscriptionTier:
    """
    Map a Stripe price id back to a tier.

    Unknown or missing price ids map to FREE.
    """
    if not price_id:
        return SubscriptionTier.FREE
    for plan in get_paid_plans():
        if price_id in (plan.stripe_price_id_monthly, plan.stripe_price_id_yearly):
            return plan.id
    return SubscriptionTier.FREE
