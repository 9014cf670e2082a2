"""Billing repository - Database operations for billing"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class BillingRepository:
    """Repository for billing database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_stripe_customer_id(db: Session, customer_id: str) -> Optional[User]:
        return db.query(User).filter(User.stripe_customer_id == customer_id).first()

    @staticmethod
    def update_user_plan(
        db: Session,
        user: User,
        plan: Optional[str] = None,
        subscription_status: Optional[str] = None,
        stripe_customer_id: Optional[str] = None,
    ) -> User:
        """Update user billing information"""
        if plan is not None:
            user.plan = plan
        if subscription_status is not None:
            user.subscription_status = subscription_status
        if stripe_customer_id is not None:
            user.stripe_customer_id = stripe_customer_id

        db.commit()
        db.refresh(user)
        return user
