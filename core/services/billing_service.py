# =============================================================================
# core/services/billing_service.py - Stripe Billing
# =============================================================================
# Hosted Stripe Checkout / Customer Portal sessions, and the webhook that
# keeps `profiles.subscription_*` in sync with Stripe.
#
# Subscription state lives in Stripe; this service only mirrors the tier,
# status, ids and trial end onto the user's profile row.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import stripe

from app.config import settings
from app.exceptions import (
    PaymentProviderError,
    PaymentsNotConfiguredError,
    ResourceNotFoundError,
    ValidationFailedError,
)
from core.models.subscription import (
    BillingPeriod,
    SubscriptionStatus,
    SubscriptionTier,
)
from lib.pricing import find_plan, tier_for_price_id
from lib.supabase_client import SupabaseClient, is_not_found_error
from lib.utils import normalize_uuid, utc_now_iso

logger = logging.getLogger(__name__)

PROFILES = "profiles"


def _field(obj: Any, key: str, default: Any = None) -> Any:
    """Read a key from a Stripe object or a plain dict."""
    try:
        value = obj[key]
    except (KeyError, TypeError, IndexError):
        return default
    return default if value is None else value


def _timestamp_to_iso(timestamp: int | None) -> str | None:
    if not timestamp:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _configure_stripe() -> None:
    """
    Raises:
        PaymentsNotConfiguredError: If no usable secret key is set
    """
    if not settings.stripe_configured:
        raise PaymentsNotConfiguredError()
    stripe.api_key = settings.STRIPE_SECRET_KEY


class BillingService:
    """
    Service for Stripe checkout, portal and webhook handling.
    """

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @staticmethod
    def _update_profile(user_id: str, updates: dict[str, Any]) -> None:
        client = SupabaseClient.get_client()
        updates["updated_at"] = utc_now_iso()

        try:
            client.table(PROFILES).update(updates).eq("id", user_id).execute()
        except Exception as e:
            logger.error(f"Failed to update billing fields for user {user_id}: {e}")
            raise

    @staticmethod
    def _find_profile_by_customer(customer_id: str) -> dict[str, Any] | None:
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(PROFILES)
                .select("id")
                .eq("stripe_customer_id", customer_id)
                .single()
                .execute()
            )
            return response.data
        except Exception as e:
            if is_not_found_error(e):
                return None
            raise

    # -------------------------------------------------------------------------
    # Checkout & Portal
    # -------------------------------------------------------------------------

    @staticmethod
    def create_checkout_session(
        user_id: UUID | str,
        email: str | None,
        plan_id: str,
        billing_period: BillingPeriod = BillingPeriod.MONTHLY,
    ) -> dict[str, Any]:
        """
        Start a Stripe Checkout session for a paid plan.

        The Stripe customer is created on first checkout and stored on
        the profile.

        Returns:
            {"session_id": ..., "url": ...}

        Raises:
            PaymentsNotConfiguredError: Stripe keys absent (503)
            ValidationFailedError: Unknown plan or free plan (400)
            ResourceNotFoundError: No profile row (404)
            PaymentProviderError: Missing price id or Stripe error (500)
        """
        _configure_stripe()
        user_id = normalize_uuid(user_id)

        plan = find_plan(plan_id)
        if plan is None:
            raise ValidationFailedError("Invalid plan", details={"plan_id": plan_id})
        if plan.id == SubscriptionTier.FREE:
            raise ValidationFailedError("The free plan does not require payment")

        profile = SupabaseClient.fetch_row(
            PROFILES, user_id, columns="stripe_customer_id, email, full_name"
        )
        if not profile:
            raise ResourceNotFoundError("Profile", user_id)

        price_id = plan.price_id_for(billing_period)
        if not price_id:
            raise PaymentProviderError("Price ID not configured for this plan")

        try:
            customer_id = profile.get("stripe_customer_id")
            if not customer_id:
                customer = stripe.Customer.create(
                    email=profile.get("email") or email,
                    name=profile.get("full_name") or None,
                    metadata={"supabase_user_id": user_id},
                )
                customer_id = customer["id"]
                BillingService._update_profile(user_id, {"stripe_customer_id": customer_id})
                logger.info(f"Created Stripe customer {customer_id} for user {user_id}")

            metadata = {
                "user_id": user_id,
                "plan_id": plan.id.value,
                "billing_period": billing_period.value,
            }
            session = stripe.checkout.Session.create(
                customer=customer_id,
                mode="subscription",
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                success_url=f"{settings.APP_URL}/settings?session_id={{CHECKOUT_SESSION_ID}}&success=true",
                cancel_url=f"{settings.APP_URL}/settings?canceled=true",
                metadata=metadata,
                allow_promotion_codes=True,
                billing_address_collection="required",
                subscription_data={"metadata": metadata},
            )

        except stripe.StripeError as e:
            logger.error(f"Stripe checkout failed for user {user_id}: {e}")
            raise PaymentProviderError(getattr(e, "user_message", None) or str(e))

        logger.info(f"Checkout session {session['id']} created for user {user_id} ({plan.id.value})")
        return {"session_id": session["id"], "url": session["url"]}

    @staticmethod
    def create_portal_session(user_id: UUID | str) -> dict[str, Any]:
        """
        Customer Portal session for managing an existing subscription.

        Raises:
            PaymentsNotConfiguredError: Stripe keys absent (503)
            ResourceNotFoundError: No profile row (404)
            ValidationFailedError: User never subscribed (400)
        """
        _configure_stripe()
        user_id = normalize_uuid(user_id)

        profile = SupabaseClient.fetch_row(PROFILES, user_id, columns="stripe_customer_id")
        if not profile:
            raise ResourceNotFoundError("Profile", user_id)
        if not profile.get("stripe_customer_id"):
            raise ValidationFailedError("No Stripe subscription found")

        try:
            session = stripe.billing_portal.Session.create(
                customer=profile["stripe_customer_id"],
                return_url=f"{settings.APP_URL}/settings",
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe portal failed for user {user_id}: {e}")
            raise PaymentProviderError(getattr(e, "user_message", None) or str(e))

        return {"url": session["url"]}

    # -------------------------------------------------------------------------
    # Webhook
    # -------------------------------------------------------------------------

    @staticmethod
    def construct_event(payload: bytes, signature: str | None) -> Any:
        """
        Verify and parse a webhook payload.

        Raises:
            ValidationFailedError: Missing or invalid signature (400)
            PaymentProviderError: Webhook secret not configured (500)
        """
        if not signature:
            raise ValidationFailedError("Missing stripe-signature header")
        if not settings.STRIPE_WEBHOOK_SECRET:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured")
            raise PaymentProviderError("Webhook secret not configured")

        try:
            return stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.warning(f"Webhook signature verification failed: {e}")
            raise ValidationFailedError("Invalid signature")

    @staticmethod
    def handle_event(event: Any) -> None:
        """Dispatch a verified event. Unknown types are logged and ignored."""
        event_type = _field(event, "type")
        obj = _field(_field(event, "data", {}), "object", {})

        handlers = {
            "checkout.session.completed": BillingService.handle_checkout_completed,
            "customer.subscription.created": BillingService.handle_subscription_updated,
            "customer.subscription.updated": BillingService.handle_subscription_updated,
            "customer.subscription.deleted": BillingService.handle_subscription_deleted,
            "invoice.payment_succeeded": BillingService.handle_invoice_paid,
            "invoice.payment_failed": BillingService.handle_invoice_failed,
        }

        handler = handlers.get(event_type)
        if handler is None:
            logger.info(f"Unhandled Stripe event type: {event_type}")
            return

        handler(obj)

    @staticmethod
    def handle_checkout_completed(session: Any) -> None:
        metadata = _field(session, "metadata", {})
        user_id = _field(metadata, "user_id")
        plan_id = _field(metadata, "plan_id")

        if not user_id or not plan_id:
            logger.error("Missing metadata in checkout session")
            return

        _configure_stripe()
        subscription_id = _field(session, "subscription")
        subscription = stripe.Subscription.retrieve(subscription_id)

        BillingService._update_profile(user_id, {
            "subscription_tier": plan_id,
            "subscription_status": SubscriptionStatus.ACTIVE.value,
            "stripe_customer_id": _field(session, "customer"),
            "stripe_subscription_id": subscription_id,
            "trial_ends_at": _timestamp_to_iso(_field(subscription, "trial_end")),
        })
        logger.info(f"Subscription activated for user {user_id} - Plan: {plan_id}")

    @staticmethod
    def handle_subscription_updated(subscription: Any) -> None:
        user_id = _field(_field(subscription, "metadata", {}), "user_id")
        if not user_id:
            logger.error("Missing user_id in subscription metadata")
            return

        try:
            status = SubscriptionStatus(_field(subscription, "status"))
        except ValueError:
            status = SubscriptionStatus.ACTIVE

        items = _field(_field(subscription, "items", {}), "data", [])
        price_id = _field(_field(items[0], "price", {}), "id") if items else None
        tier = tier_for_price_id(price_id)

        BillingService._update_profile(user_id, {
            "subscription_tier": tier.value,
            "subscription_status": status.value,
            "stripe_subscription_id": _field(subscription, "id"),
            "trial_ends_at": _timestamp_to_iso(_field(subscription, "trial_end")),
        })
        logger.info(f"Subscription updated for user {user_id} - Status: {status.value}")

    @staticmethod
    def handle_subscription_deleted(subscription: Any) -> None:
        user_id = _field(_field(subscription, "metadata", {}), "user_id")
        if not user_id:
            logger.error("Missing user_id in subscription metadata")
            return

        BillingService._update_profile(user_id, {
            "subscription_tier": SubscriptionTier.FREE.value,
            "subscription_status": SubscriptionStatus.CANCELED.value,
            "stripe_subscription_id": None,
            "trial_ends_at": None,
        })
        logger.info(f"Subscription canceled for user {user_id} - Reverted to free plan")

    @staticmethod
    def handle_invoice_paid(invoice: Any) -> None:
        subscription_id = _field(invoice, "subscription")
        if not subscription_id:
            return

        _configure_stripe()
        subscription = stripe.Subscription.retrieve(subscription_id)
        BillingService.handle_subscription_updated(subscription)
        logger.info(f"Invoice payment succeeded for subscription {subscription_id}")

    @staticmethod
    def handle_invoice_failed(invoice: Any) -> None:
        subscription_id = _field(invoice, "subscription")
        customer_id = _field(invoice, "customer")
        if not subscription_id:
            return

        profile = BillingService._find_profile_by_customer(customer_id)
        if not profile:
            logger.error(f"User not found for customer: {customer_id}")
            return

        BillingService._update_profile(profile["id"], {
            "subscription_status": SubscriptionStatus.PAST_DUE.value,
        })
        logger.warning(f"Invoice payment failed for subscription {subscription_id}")
