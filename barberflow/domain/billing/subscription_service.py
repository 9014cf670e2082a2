"""Subscription service - Business logic for subscription management"""

import logging
from datetime import datetime

import stripe
from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import STRIPE_BUSINESS_PRICE_ID, STRIPE_PRO_PRICE_ID
from ...models import User
from ...plan_limits import count_monthly_appointments, get_plan_limits, month_bounds
from .repository import BillingRepository
from .schemas import CheckoutRequest
from .stripe_service import stripe_service

logger = logging.getLogger(__name__)

# Stripe price ID -> plan granted by that price
PRICE_TO_PLAN = {
    STRIPE_PRO_PRICE_ID: "pro",
    STRIPE_BUSINESS_PRICE_ID: "business",
}


def plan_for_price(price_id: str, default: str = "pro") -> str:
    return PRICE_TO_PLAN.get(price_id, default)


class SubscriptionService:
    """Service for subscription management"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()

    def get_current_plan(self, user: User) -> dict:
        return {
            "plan": user.plan,
            "subscriptionStatus": user.subscription_status,
            "stripeCustomerId": user.stripe_customer_id,
            "hasActiveSubscription": user.subscription_status in ("active", "trialing"),
        }

    def get_usage_stats(self, user: User) -> dict:
        """Appointment usage for the current calendar month"""
        now = datetime.utcnow()
        period_start, period_end = month_bounds(now)
        limits = get_plan_limits(user.plan)
        used = count_monthly_appointments(self.db, user.id, now)
        limit = limits["appointments"]

        return {
            "plan": user.plan,
            "periodStart": period_start,
            "periodEnd": period_end,
            "appointmentsThisMonth": used,
            "appointmentLimit": limit,
            "appointmentsRemaining": None if limit is None else max(0, limit - used),
            "advancedAnalytics": limits["advanced_analytics"],
        }

    def create_checkout_session(self, request: CheckoutRequest, user: User) -> dict:
        """Create a Stripe Checkout session for the requested price"""
        plan = PRICE_TO_PLAN.get(request.planId)
        if not plan:
            logger.warning(f"⚠️ User {user.id} requested checkout for unknown price {request.planId}")
            raise HTTPException(status_code=400, detail="Invalid plan selected")

        if not stripe_service.is_available():
            raise HTTPException(status_code=503, detail="Billing service temporarily unavailable")

        try:
            customer_id = user.stripe_customer_id
            if not customer_id:
                customer_id = stripe_service.create_customer(user.email, user.name, user.id)
                self.repo.update_user_plan(self.db, user, stripe_customer_id=customer_id)

            url = stripe_service.create_checkout_session(customer_id, request.planId, user.id, plan)
        except stripe.StripeError as e:
            logger.error(f"Failed to create checkout session for user {user.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create checkout session") from e

        return {"url": url}

    def create_portal_session(self, user: User) -> dict:
        """Open the Stripe customer portal for an existing customer"""
        if not user.stripe_customer_id:
            raise HTTPException(status_code=400, detail="No active subscription found")

        if not stripe_service.is_available():
            raise HTTPException(status_code=503, detail="Billing service temporarily unavailable")

        try:
            url = stripe_service.create_portal_session(user.stripe_customer_id)
        except stripe.StripeError as e:
            logger.error(f"Failed to create portal session for user {user.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to open billing portal") from e

        return {"url": url}
