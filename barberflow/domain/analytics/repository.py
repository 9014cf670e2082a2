"""Analytics repository - Aggregate queries over a barber's appointments"""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Appointment, Service


class AnalyticsRepository:
    """Repository for analytics aggregates"""

    @staticmethod
    def get_completed_totals(db: Session, barber_id: int) -> dict:
        """Revenue, count and average ticket over completed appointments"""
        total_revenue, booking_count, average_ticket = (
            db.query(
                func.sum(Appointment.price),
                func.count(Appointment.id),
                func.avg(Appointment.price),
            )
            .filter(Appointment.barber_id == barber_id, Appointment.status == "completed")
            .one()
        )
        return {
            "total_revenue": float(total_revenue or 0),
            "booking_count": int(booking_count or 0),
            "average_ticket": float(average_ticket or 0),
        }

    @staticmethod
    def get_distinct_client_count(db: Session, barber_id: int) -> int:
        """Distinct client emails across all of the barber's appointments"""
        return (
            db.query(func.count(func.distinct(Appointment.client_email)))
            .filter(Appointment.barber_id == barber_id)
            .scalar()
            or 0
        )

    @staticmethod
    def get_completed_since(db: Session, barber_id: int, since: datetime) -> list[tuple]:
        """(start_time, price) of completed appointments starting at or after `since`"""
        return (
            db.query(Appointment.start_time, Appointment.price)
            .filter(
                Appointment.barber_id == barber_id,
                Appointment.status == "completed",
                Appointment.start_time >= since,
            )
            .order_by(Appointment.start_time.asc())
            .all()
        )

    @staticmethod
    def get_service_distribution(db: Session, barber_id: int) -> list[tuple]:
        """(service name, completed count, revenue), most booked first"""
        booking_count = func.count(Appointment.id)
        return (
            db.query(Service.name, booking_count, func.sum(Appointment.price))
            .join(Service, Appointment.service_id == Service.id)
            .filter(Appointment.barber_id == barber_id, Appointment.status == "completed")
            .group_by(Service.name)
            .order_by(booking_count.desc(), Service.name.asc())
            .all()
        )
