# =============================================================================
# core/models/subscription.py - Subscription & Billing Schemas
# =============================================================================
# These models describe subscription plans and their limits:
# - SubscriptionTier / SubscriptionStatus: values stored on profiles
# - ModelType: short model names users pick for their agents
# - PlanLimits / SubscriptionPlan: catalogue entries (see lib/pricing.py)
# - Checkout / portal request bodies
# =============================================================================

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SubscriptionTier(str, Enum):
    """Plan a user is subscribed to."""
    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    """
    Billing state mirrored from Stripe.

    Stripe statuses outside this set are stored as "active".
    """
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    TRIALING = "trialing"


class BillingPeriod(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ModelType(str, Enum):
    """
    Model names an agent can be configured with.

    "claude" and "gpt" are legacy aliases for the economical models.
    """
    HAIKU = "haiku"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"
    SONNET = "sonnet"
    OPUS = "opus"
    CLAUDE = "claude"
    GPT = "gpt"


# Models counted against a monthly per-model quota
PREMIUM_MODELS = (ModelType.GPT_4O, ModelType.SONNET, ModelType.OPUS)


class PlanLimits(BaseModel):
    """Quantitative limits attached to a plan."""
    max_agents: int
    max_doggo_monthly: int
    max_conversations_monthly: int
    allowed_models: list[ModelType]
    premium_models_quota: dict[str, int] = Field(default_factory=dict)
    features: list[str] = Field(default_factory=list)
    support: str = "community"


class SubscriptionPlan(BaseModel):
    """A purchasable plan. Prices are in EUR."""
    id: SubscriptionTier
    name: str
    description: str
    price_monthly: float
    price_yearly: float
    stripe_price_id_monthly: str | None = None
    stripe_price_id_yearly: str | None = None
    limits: PlanLimits
    popular: bool = False

    def price_id_for(self, period: BillingPeriod) -> str | None:
        """Stripe price id for a billing period (None or "" when unset)."""
        if period == BillingPeriod.YEARLY:
            return self.stripe_price_id_yearly
        return self.stripe_price_id_monthly


class CheckoutRequest(BaseModel):
    """
    Body of POST /stripe/checkout.

    Accepts both snake_case and camelCase keys:
        {"plan_id": "pro", "billing_period": "yearly"}
        {"planId": "pro", "billingPeriod": "yearly"}
    """
    plan_id: str = Field(..., min_length=1, examples=["pro"])
    billing_period: BillingPeriod = Field(default=BillingPeriod.MONTHLY)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LimitCheckResult(BaseModel):
    """Outcome of a plan limit check."""
    allowed: bool
    reason: str | None = None
    current_usage: int | None = None
    limit: int | None = None
