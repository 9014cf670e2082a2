"""Billing router - FastAPI endpoints for billing operations"""

import logging

import stripe
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...cache import mark_webhook_processed, webhook_already_processed
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import (
    CheckoutRequest,
    CurrentPlanResponse,
    UrlResponse,
    UsageStatsResponse,
    WebhookAck,
)
from .stripe_service import WebhookNotConfiguredError, stripe_service
from .subscription_service import SubscriptionService
from .webhook_service import SubscriptionSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/billing", tags=["Billing"])

# Rate limiter for payment webhooks - 100 requests per minute
rate_limit_billing_webhook = create_rate_limiter(
    limit=100,
    window_seconds=60,
    key_prefix="webhook_billing",
    use_ip=False,  # Global limit for all webhooks
    fail_open=True,  # Stripe deliveries must still be applied when Redis is down
)


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    """Dependency injection for SubscriptionService"""
    return SubscriptionService(db)


# ============================================================================
# SUBSCRIPTION MANAGEMENT
# ============================================================================


@router.get("/current-plan", response_model=CurrentPlanResponse)
async def get_current_plan(
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.get_current_plan(user)


@router.get("/usage", response_model=UsageStatsResponse)
async def get_usage_stats(
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Appointment usage against the plan's monthly allowance"""
    return service.get_usage_stats(user)


@router.post("/checkout", response_model=UrlResponse)
async def create_checkout_session(
    body: CheckoutRequest,
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Create a Stripe Checkout session for the given price ID"""
    return service.create_checkout_session(body, user)


@router.post("/portal", response_model=UrlResponse)
async def create_portal_session(
    user: User = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.create_portal_session(user)


# ============================================================================
# WEBHOOKS
# ============================================================================


@router.post("/webhook", response_model=WebhookAck)
async def handle_stripe_webhook(
    request: Request,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_billing_webhook),
):
    """
    Verify signature and process subscription lifecycle events - Rate limited to 100 requests per minute.

    Security:
      - Stripe-Signature verified against the raw body with STRIPE_WEBHOOK_SECRET
      - Stripe's timestamp tolerance rejects replayed deliveries
      - Event IDs remembered for 24 hours so retries are applied once
    """
    raw_body = await request.body()
    sig_header = request.headers.get("stripe-signature")

    if not sig_header:
        logger.warning("❌ Stripe webhook received without signature header")
        raise HTTPException(status_code=400, detail="Webhook Error: Missing Stripe-Signature header")

    try:
        event = stripe_service.construct_event(raw_body, sig_header)
    except WebhookNotConfiguredError as e:
        logger.error("❌ STRIPE_WEBHOOK_SECRET not configured")
        raise HTTPException(status_code=500, detail="Webhook not configured") from e
    except stripe.SignatureVerificationError as e:
        logger.warning(f"❌ Stripe webhook signature verification failed: {e}")
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}") from e
    except ValueError as e:
        logger.warning(f"❌ Stripe webhook payload is not valid JSON: {e}")
        raise HTTPException(status_code=400, detail="Webhook Error: Invalid payload") from e

    event_id = event.get("id")
    if event_id and webhook_already_processed(event_id):
        logger.info(f"🔄 Webhook {event_id} already processed, skipping (idempotency)")
        return {"received": True}

    SubscriptionSyncService(db).handle_event(event)

    # Marked only after the event was applied so failed deliveries are retried
    if event_id:
        mark_webhook_processed(event_id)

    return {"received": True}
