"""Billing domain - Stripe checkout, customer portal and webhook state sync"""

from .router import router

__all__ = ["router"]
