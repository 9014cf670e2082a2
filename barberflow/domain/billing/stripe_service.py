"""Stripe service - Integration with the Stripe API"""

import json
import logging
from typing import Optional

import stripe

from ...config import CLIENT_URL, STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET

logger = logging.getLogger(__name__)


class WebhookNotConfiguredError(Exception):
    """Raised when STRIPE_WEBHOOK_SECRET is missing"""


class StripeService:
    """Service for Stripe API operations"""

    def __init__(self):
        self.api_key = STRIPE_SECRET_KEY
        self.webhook_secret = STRIPE_WEBHOOK_SECRET

        if not self.api_key:
            logger.warning("STRIPE_SECRET_KEY not set; billing endpoints will fail until configured")
        else:
            stripe.api_key = self.api_key
            logger.info("Stripe client initialized")

    def is_available(self) -> bool:
        """Check if Stripe credentials are configured"""
        return bool(self.api_key)

    def create_customer(self, email: str, name: Optional[str], user_id: int) -> str:
        """Create a Stripe customer and return its ID"""
        customer = stripe.Customer.create(
            email=email,
            name=name,
            metadata={"userId": str(user_id)},
        )
        logger.info(f"✅ Created Stripe customer {customer.id} for user {user_id}")
        return customer.id

    def create_checkout_session(self, customer_id: str, price_id: str, user_id: int, plan: str) -> str:
        """Create a subscription-mode Checkout session and return its hosted URL"""
        session = stripe.checkout.Session.create(
            customer=customer_id,
            mode="subscription",
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=f"{CLIENT_URL}/dashboard?session_id={{CHECKOUT_SESSION_ID}}&success=true",
            cancel_url=f"{CLIENT_URL}/billing",
            metadata={"userId": str(user_id), "plan": plan},
        )
        logger.info(f"✅ Created checkout session {session.id} for user {user_id} ({plan})")
        return session.url

    def create_portal_session(self, customer_id: str) -> str:
        """Create a customer portal session and return its URL"""
        portal_session = stripe.billing_portal.Session.create(
            customer=customer_id,
            return_url=f"{CLIENT_URL}/billing",
        )
        return portal_session.url

    def construct_event(self, payload: bytes, sig_header: str) -> dict:
        """
        Verify the Stripe-Signature header against the raw body and return the event.

        Raises:
            WebhookNotConfiguredError: no webhook secret configured
            stripe.SignatureVerificationError: signature mismatch or stale timestamp
            ValueError: body is not valid JSON
        """
        if not self.webhook_secret:
            raise WebhookNotConfiguredError("STRIPE_WEBHOOK_SECRET not configured")

        stripe.Webhook.construct_event(payload, sig_header, self.webhook_secret)
        # Work with plain dicts downstream rather than StripeObject
        return json.loads(payload)


stripe_service = StripeService()
