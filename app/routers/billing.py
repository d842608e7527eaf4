# =============================================================================
# app/routers/billing.py - Stripe Billing Endpoints
# =============================================================================
# - POST /stripe/checkout: start a subscription checkout
# - POST /stripe/portal: open the Stripe customer portal
# - POST /stripe/webhook: Stripe event callback (no user auth, signed body)
#
# Endpoints answer 503 while Stripe keys are not configured.
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Header, Request

from app.auth import AuthUser, get_current_user
from core.models.subscription import CheckoutRequest
from core.services.billing_service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/checkout")
async def create_checkout_session(
    request: CheckoutRequest,
    user: AuthUser = Depends(get_current_user),
):
    """
    Create a Checkout session for a paid plan.

    Returns the session id and the hosted checkout URL to redirect to.
    """
    session = BillingService.create_checkout_session(
        user_id=user.id,
        email=user.email,
        plan_id=request.plan_id,
        billing_period=request.billing_period,
    )
    return {"success": True, "data": session}


@router.post("/portal")
async def create_portal_session(user: AuthUser = Depends(get_current_user)):
    """Customer portal URL for managing the current subscription."""
    session = BillingService.create_portal_session(user.id)
    return {"success": True, "data": session}


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="stripe-signature"),
):
    """
    Receive a Stripe event.

    The raw body is verified against the webhook signing secret before
    any handler runs.
    """
    payload = await request.body()

    event = BillingService.construct_event(payload, stripe_signature)
    BillingService.handle_event(event)

    return {"received": True}
