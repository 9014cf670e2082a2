"""Webhook service - Applies verified Stripe events to users' plan and subscription status"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import PLANS, User
from .repository import BillingRepository
from .subscription_service import plan_for_price

logger = logging.getLogger(__name__)

# Subscription statuses that drop the account back to the free plan
DOWNGRADE_STATUSES = ("canceled", "unpaid", "past_due")


class SubscriptionSyncService:
    """Maps Stripe subscription lifecycle events onto User rows"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BillingRepository()

    def handle_event(self, event: dict) -> None:
        event_type = event.get("type")
        obj = (event.get("data") or {}).get("object") or {}
        logger.info(f"🔔 Stripe webhook received id={event.get('id')} type={event_type}")

        if event_type == "checkout.session.completed":
            self._handle_checkout_completed(obj)
        elif event_type == "customer.subscription.updated":
            self._handle_subscription_updated(obj)
        elif event_type == "customer.subscription.deleted":
            self._handle_subscription_deleted(obj)
        else:
            logger.info(f"Ignoring unhandled Stripe event type: {event_type}")

    def _user_for_customer(self, customer_id: Optional[str]) -> Optional[User]:
        if not customer_id:
            return None
        return self.repo.get_user_by_stripe_customer_id(self.db, customer_id)

    def _handle_checkout_completed(self, session: dict) -> None:
        metadata = session.get("metadata") or {}
        user_id = metadata.get("userId")

        user = None
        if user_id and str(user_id).isdigit():
            user = self.repo.get_user_by_id(self.db, int(user_id))
        if not user:
            logger.warning(f"❌ checkout.session.completed for unknown user {user_id!r}; skipping")
            return

        plan = metadata.get("plan")
        if plan not in PLANS or plan == "free":
            plan = "pro"

        customer_id = session.get("customer")
        self.repo.update_user_plan(
            self.db,
            user,
            plan=plan,
            subscription_status="active",
            stripe_customer_id=customer_id if customer_id and not user.stripe_customer_id else None,
        )
        logger.info(f"✅ User {user.id} subscribed to {plan}")

    def _handle_subscription_updated(self, subscription: dict) -> None:
        user = self._user_for_customer(subscription.get("customer"))
        if not user:
            logger.warning(
                f"❌ Subscription update for unknown customer {subscription.get('customer')!r}; skipping"
            )
            return

        status = subscription.get("status")
        items = (subscription.get("items") or {}).get("data") or []
        price_id = ((items[0] if items else {}).get("price") or {}).get("id")
        mapped_plan = plan_for_price(price_id)

        plan = None
        if status == "active":
            plan = mapped_plan
        elif status in DOWNGRADE_STATUSES:
            plan = "free"

        self.repo.update_user_plan(self.db, user, plan=plan, subscription_status=status)
        logger.info(f"🔄 User {user.id} subscription {status}, plan now {user.plan}")

    def _handle_subscription_deleted(self, subscription: dict) -> None:
        user = self._user_for_customer(subscription.get("customer"))
        if not user:
            logger.warning(
                f"❌ Subscription deletion for unknown customer {subscription.get('customer')!r}; skipping"
            )
            return

        self.repo.update_user_plan(self.db, user, plan="free", subscription_status="none")
        logger.info(f"🛑 User {user.id} subscription deleted, reverted to free")
