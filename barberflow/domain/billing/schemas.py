"""Billing domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class CheckoutRequest(BaseModel):
    """Schema for creating checkout session"""

    planId: str  # Stripe price ID

    @field_validator("planId")
    @classmethod
    def validate_plan_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("planId is required")
        return v


class UrlResponse(BaseModel):
    """Hosted Stripe page the client should navigate to"""

    url: str


class CurrentPlanResponse(BaseModel):
    plan: str
    subscriptionStatus: str
    stripeCustomerId: Optional[str] = None
    hasActiveSubscription: bool


class UsageStatsResponse(BaseModel):
    plan: str
    periodStart: datetime
    periodEnd: datetime
    appointmentsThisMonth: int
    appointmentLimit: Optional[int] = None  # None means unlimited
    appointmentsRemaining: Optional[int] = None
    advancedAnalytics: bool


class WebhookAck(BaseModel):
    received: bool
