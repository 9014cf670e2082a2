"""Appointment repository - Database operations for the booking calendar"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, User


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointments(
        db: Session,
        barber_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Appointment]:
        """Appointments whose start falls in [start, end], earliest first"""
        query = (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(Appointment.barber_id == barber_id)
        )

        if start:
            query = query.filter(Appointment.start_time >= start)
        if end:
            query = query.filter(Appointment.start_time <= end)

        return query.order_by(Appointment.start_time.asc(), Appointment.id.asc()).all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int, barber_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.service))
            .filter(Appointment.id == appointment_id, Appointment.barber_id == barber_id)
            .first()
        )

    @staticmethod
    def lock_barber_calendar(db: Session, barber_id: int) -> None:
        """
        Take a row lock on the barber so concurrent bookings for the same calendar
        run their conflict check one at a time. SQLite has no row locks and skips FOR UPDATE.
        """
        db.query(User.id).filter(User.id == barber_id).with_for_update().first()

    @staticmethod
    def find_conflict(
        db: Session,
        barber_id: int,
        start: datetime,
        end: datetime,
        exclude_id: Optional[int] = None,
    ) -> Optional[Appointment]:
        """
        First non-cancelled appointment overlapping [start, end).

        Two intervals overlap when each starts before the other ends, so
        back-to-back slots (existing.end == start) do not conflict.
        """
        query = db.query(Appointment).filter(
            Appointment.barber_id == barber_id,
            Appointment.status != "cancelled",
            Appointment.start_time < end,
            Appointment.end_time > start,
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.first()

    @staticmethod
    def create_appointment(db: Session, barber_id: int, **appointment_data) -> Appointment:
        """Add an appointment to the session; the caller commits"""
        appointment = Appointment(barber_id=barber_id, **appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
