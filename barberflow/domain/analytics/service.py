"""Analytics service - Dashboard stats, revenue trends and service mix"""

import logging
from collections import OrderedDict
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from ...models import User
from .repository import AnalyticsRepository

logger = logging.getLogger(__name__)


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AnalyticsRepository()

    def get_dashboard_stats(self, user: User) -> dict:
        totals = self.repo.get_completed_totals(self.db, user.id)
        return {
            "totalRevenue": totals["total_revenue"],
            "bookingCount": totals["booking_count"],
            "averageTicket": totals["average_ticket"],
            "clientCount": self.repo.get_distinct_client_count(self.db, user.id),
        }

    def get_revenue_trends(self, user: User, days: int = 7) -> list[dict]:
        """Completed revenue and bookings per UTC day over the last `days` days"""
        since = datetime.utcnow() - timedelta(days=days)
        rows = self.repo.get_completed_since(self.db, user.id, since)

        # Rows arrive ordered by start time, so days are inserted in order
        buckets: "OrderedDict[str, dict]" = OrderedDict()
        for start_time, price in rows:
            day = start_time.strftime("%Y-%m-%d")
            bucket = buckets.setdefault(day, {"date": day, "revenue": 0.0, "bookings": 0})
            bucket["revenue"] += price or 0.0
            bucket["bookings"] += 1

        return list(buckets.values())

    def get_service_distribution(self, user: User) -> list[dict]:
        return [
            {"name": name, "value": int(count), "revenue": float(revenue or 0)}
            for name, count, revenue in self.repo.get_service_distribution(self.db, user.id)
        ]
