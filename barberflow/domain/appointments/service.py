"""Appointment service - Booking rules, the double-booking check and client stat sync"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, User
from ...plan_limits import can_book_appointment
from ..clients.repository import ClientRepository
from ..services.repository import ServiceRepository
from .repository import AppointmentRepository
from .schemas import AppointmentCreate

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "Time slot is already booked"


class AppointmentService:
    """Service layer for the booking calendar"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.service_repo = ServiceRepository()
        self.client_repo = ClientRepository()

    def get_appointments(
        self, user: User, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> list[Appointment]:
        return self.repo.get_appointments(self.db, user.id, start, end)

    def get_appointment(self, appointment_id: int, user: User) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id, user.id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    # ========================================================================
    # BOOKING
    # ========================================================================

    def _ensure_slot_available(
        self,
        user: User,
        start: datetime,
        end: datetime,
        exclude_id: Optional[int] = None,
    ) -> None:
        """Serialize on the barber's calendar, then enforce plan limits and the no-overlap rule"""
        self.repo.lock_barber_calendar(self.db, user.id)

        can_book, error_message = can_book_appointment(user, self.db, start)
        if not can_book:
            logger.warning(f"⚠️ User {user.id} reached appointment limit: {error_message}")
            raise HTTPException(status_code=403, detail=error_message)

        conflict = self.repo.find_conflict(self.db, user.id, start, end, exclude_id)
        if conflict:
            logger.info(
                f"⛔ Booking for user {user.id} {start:%Y-%m-%d %H:%M}-{end:%H:%M} "
                f"overlaps appointment {conflict.id}"
            )
            raise HTTPException(status_code=400, detail=SLOT_TAKEN_MESSAGE)

    def create_appointment(self, data: AppointmentCreate, user: User) -> Appointment:
        service = self.service_repo.get_service_by_id(self.db, data.serviceId, user.id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")

        start_time = data.startTime
        end_time = start_time + timedelta(minutes=service.duration)

        try:
            self._ensure_slot_available(user, start_time, end_time)

            appointment = self.repo.create_appointment(
                self.db,
                user.id,
                service_id=service.id,
                client_name=data.clientName,
                client_email=data.clientEmail,
                start_time=start_time,
                end_time=end_time,
                status=data.status or "confirmed",
                price=service.price,
                notes=data.notes,
            )
            self._record_booking(user, appointment)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(
            f"📅 Appointment {appointment.id} booked for user {user.id}: "
            f"{service.name} at {start_time:%Y-%m-%d %H:%M}"
        )
        return appointment

    def update_status(self, appointment_id: int, status: str, user: User) -> Appointment:
        appointment = self.get_appointment(appointment_id, user)
        previous = appointment.status

        if previous == status:
            return appointment

        try:
            # A cancelled slot may have been rebooked since; reactivating must not double-book
            if previous == "cancelled":
                self._ensure_slot_available(
                    user, appointment.start_time, appointment.end_time, exclude_id=appointment.id
                )

            appointment.status = status
            self._sync_completion(user, appointment, previous)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(f"🔄 Appointment {appointment.id} status {previous} -> {status}")
        return appointment

    def delete_appointment(self, appointment_id: int, user: User) -> dict:
        appointment = self.get_appointment(appointment_id, user)
        self._forget_booking(user, appointment)
        self.repo.delete_appointment(self.db, appointment)
        return {"message": "Appointment removed"}

    # ========================================================================
    # CLIENT STATS
    # ========================================================================

    def _record_booking(self, user: User, appointment: Appointment) -> None:
        """Upsert the shop's client for this email and count the booking"""
        client = self.client_repo.get_client_by_email(self.db, appointment.client_email, user.id)
        if client is None:
            client = self.client_repo.create_client(
                self.db,
                user.id,
                commit=False,
                name=appointment.client_name,
                email=appointment.client_email,
                total_bookings=0,
                total_spent=0.0,
            )
            logger.info(f"👤 New client {appointment.client_email} added from booking")

        client.total_bookings = (client.total_bookings or 0) + 1

    def _forget_booking(self, user: User, appointment: Appointment) -> None:
        """Take a deleted appointment back out of its client's totals"""
        client = self.client_repo.get_client_by_email(self.db, appointment.client_email, user.id)
        if client is None:
            return

        client.total_bookings = max(0, (client.total_bookings or 0) - 1)
        if appointment.status == "completed":
            client.total_spent = max(0.0, (client.total_spent or 0.0) - appointment.price)

    def _sync_completion(self, user: User, appointment: Appointment, previous: str) -> None:
        """Keep total_spent and last_visit in line with completed appointments"""
        entering = appointment.status == "completed" and previous != "completed"
        leaving = previous == "completed" and appointment.status != "completed"
        if not (entering or leaving):
            return

        client = self.client_repo.get_client_by_email(self.db, appointment.client_email, user.id)
        if client is None:
            return

        if entering:
            client.total_spent = (client.total_spent or 0.0) + appointment.price
            if client.last_visit is None or appointment.start_time > client.last_visit:
                client.last_visit = appointment.start_time
        else:
            client.total_spent = max(0.0, (client.total_spent or 0.0) - appointment.price)
