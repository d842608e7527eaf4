# =============================================================================
# tests/test_pricing.py - Plans, Model Pricing and Doggo Tests
# =============================================================================

import pytest

from core.models.subscription import BillingPeriod, ModelType, SubscriptionTier
from lib import pricing


class TestPlans:

    def test_plan_limits(self):
        assert pricing.get_plan_limits("free").max_agents == 1
        assert pricing.get_plan_limits("pro").max_agents == 3
        assert pricing.get_plan_limits("enterprise").max_agents == 10

        assert pricing.get_plan_limits("free").max_doggo_monthly == 1000
        assert pricing.get_plan_limits("pro").max_doggo_monthly == 10000
        assert pricing.get_plan_limits("enterprise").max_doggo_monthly == 30000

    def test_prices(self):
        pro = pricing.get_plan(SubscriptionTier.PRO)

        assert pro.price_monthly == 10
        assert pro.price_yearly == 96
        assert pricing.get_plan("enterprise").price_yearly == 288

    def test_premium_quotas(self):
        assert pricing.get_plan_limits("pro").premium_models_quota == {"gpt-4o": 20, "sonnet": 50}
        assert pricing.get_premium_model_quota("enterprise", ModelType.OPUS) == 10
        assert pricing.get_premium_model_quota("free", "sonnet") is None

    def test_unknown_tier_raises(self):
        with pytest.raises(ValueError):
            pricing.get_plan("platinum")

    def test_find_plan_returns_none_for_unknown(self):
        assert pricing.find_plan("platinum") is None
        assert pricing.find_plan("pro").id == SubscriptionTier.PRO

    def test_all_plans_cheapest_first(self):
        assert [plan.id for plan in pricing.get_all_plans()] == [
            SubscriptionTier.FREE,
            SubscriptionTier.PRO,
            SubscriptionTier.ENTERPRISE,
        ]

    def test_paid_plans_exclude_free(self):
        assert SubscriptionTier.FREE not in [plan.id for plan in pricing.get_paid_plans()]

    def test_price_id_for_period(self):
        plan = pricing.get_plan("pro").model_copy(
            update={"stripe_price_id_monthly": "price_m", "stripe_price_id_yearly": "price_y"}
        )

        assert plan.price_id_for(BillingPeriod.MONTHLY) == "price_m"
        assert plan.price_id_for(BillingPeriod.YEARLY) == "price_y"


class TestModelAccess:

    @pytest.mark.parametrize("model", ["haiku", "gpt-4o-mini", "claude", "gpt"])
    def test_economy_models_on_every_plan(self, model):
        assert pricing.is_model_allowed("free", model)
        assert pricing.is_model_allowed("enterprise", model)

    def test_premium_models_by_plan(self):
        assert not pricing.is_model_allowed("free", "sonnet")
        assert pricing.is_model_allowed("pro", "sonnet")
        assert not pricing.is_model_allowed("pro", "opus")
        assert pricing.is_model_allowed("enterprise", ModelType.OPUS)

    def test_unknown_model_not_allowed(self):
        assert not pricing.is_model_allowed("enterprise", "llama")

    def test_can_create_agent(self):
        assert pricing.can_create_agent("free", 0)
        assert not pricing.can_create_agent("free", 1)
        assert pricing.can_create_agent("pro", 2)
        assert not pricing.can_create_agent("pro", 3)


class TestPlanComparison:

    def test_upgrade_and_downgrade(self):
        assert pricing.can_upgrade("free", "pro")
        assert not pricing.can_upgrade("enterprise", "pro")
        assert pricing.can_downgrade("enterprise", "free")
        assert not pricing.can_downgrade("pro", "pro")

    def test_compare_plans_sign(self):
        assert pricing.compare_plans("free", "enterprise") < 0
        assert pricing.compare_plans("pro", "pro") == 0


class TestTierForPriceId:

    def test_missing_price_is_free(self):
        assert pricing.tier_for_price_id(None) == SubscriptionTier.FREE
        assert pricing.tier_for_price_id("") == SubscriptionTier.FREE

    def test_known_price_ids(self, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "STRIPE_PRICE_PRO_MONTHLY", "price_pro_m")
        monkeypatch.setattr(settings, "STRIPE_PRICE_ENTERPRISE_YEARLY", "price_ent_y")

        assert pricing.tier_for_price_id("price_pro_m") == SubscriptionTier.PRO
        assert pricing.tier_for_price_id("price_ent_y") == SubscriptionTier.ENTERPRISE
        assert pricing.tier_for_price_id("price_unknown") == SubscriptionTier.FREE


class TestModelCost:

    def test_cost_per_million(self):
        assert pricing.calculate_cost("claude-3-haiku-20240307", 1_000_000, 0) == pytest.approx(0.25)
        assert pricing.calculate_cost("gpt-4o", 0, 1_000_000) == pytest.approx(10.0)

    def test_short_names_resolved(self):
        assert pricing.calculate_cost("sonnet", 1_000_000, 1_000_000) == pytest.approx(18.0)
        assert pricing.calculate_cost("gpt", 1_000_000, 0) == pytest.approx(0.15)

    def test_unknown_model_is_free(self):
        assert pricing.calculate_cost("llama-3", 5000, 5000) == 0.0


class TestDoggo:

    def test_round_trip(self):
        assert pricing.usd_to_doggo(0.000526) == pytest.approx(1.0)
        assert pricing.doggo_to_usd(1000) == pytest.approx(0.526)

    def test_usage_percent(self):
        assert pricing.doggo_usage_percent(500, 1000) == pytest.approx(50.0)
        assert pricing.doggo_usage_percent(10, 0) == 0
