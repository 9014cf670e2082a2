"""Appointments domain - calendar bookings and the double-booking check"""

from .router import router

__all__ = ["router"]
