"""Analytics domain schemas - response models"""

from pydantic import BaseModel


class DashboardStatsResponse(BaseModel):
    totalRevenue: float
    bookingCount: int
    averageTicket: float
    clientCount: int


class RevenueTrendPoint(BaseModel):
    date: str  # YYYY-MM-DD
    revenue: float
    bookings: int


class ServiceShare(BaseModel):
    name: str
    value: int  # Completed bookings
    revenue: float
