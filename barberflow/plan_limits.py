"""
Plan limits and utilities for subscription-based booking restrictions.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from .models import Appointment, User

# Monthly appointment allowance per plan; None means unlimited
PLAN_LIMITS = {
    "free": {"appointments": 50, "advanced_analytics": False},
    "pro": {"appointments": None, "advanced_analytics": True},
    "business": {"appointments": None, "advanced_analytics": True},
}


def get_plan_limits(plan: Optional[str]) -> dict:
    """Unknown or missing plans get the free tier"""
    return PLAN_LIMITS.get((plan or "free").lower(), PLAN_LIMITS["free"])


def get_appointment_limit(plan: Optional[str]) -> Optional[int]:
    return get_plan_limits(plan)["appointments"]


def has_advanced_analytics(plan: Optional[str]) -> bool:
    return get_plan_limits(plan)["advanced_analytics"]


def month_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """First instant of the calendar month containing `moment` and of the month after"""
    start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def count_monthly_appointments(db: Session, user_id: int, moment: datetime) -> int:
    """Non-cancelled appointments starting in the calendar month of `moment`"""
    start, end = month_bounds(moment)
    return (
        db.query(Appointment)
        .filter(
            Appointment.barber_id == user_id,
            Appointment.status != "cancelled",
            Appointment.start_time >= start,
            Appointment.start_time < end,
        )
        .count()
    )


def can_book_appointment(user: User, db: Session, start_time: datetime) -> tuple:
    """
    Check if user can book another appointment in the month of `start_time`.
    Returns (can_book, error_message).
    """
    limit = get_appointment_limit(user.plan)

    # Unlimited plan
    if limit is None:
        return (True, None)

    booked = count_monthly_appointments(db, user.id, start_time)
    if booked >= limit:
        return (
            False,
            f"You've reached your monthly limit of {limit} appointments on the "
            f"{user.plan} plan. Upgrade to Pro for unlimited bookings.",
        )

    return (True, None)
