"""Appointments router - FastAPI endpoints for the booking calendar"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Appointment, User
from ...schemas import MessageResponse
from ...shared.validators import to_naive_utc
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ServiceSummary,
)
from .service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def appointment_to_response(a: Appointment) -> AppointmentResponse:
    service = None
    if a.service is not None:
        service = ServiceSummary(
            id=a.service.id,
            name=a.service.name,
            duration=a.service.duration,
            price=a.service.price,
            category=a.service.category,
        )
    return AppointmentResponse(
        id=a.id,
        clientName=a.client_name,
        clientEmail=a.client_email,
        service=service,
        startTime=a.start_time,
        endTime=a.end_time,
        status=a.status,
        price=a.price,
        notes=a.notes,
        createdAt=a.created_at,
    )


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
    start: Optional[datetime] = Query(None, description="Only appointments starting at or after"),
    end: Optional[datetime] = Query(None, description="Only appointments starting at or before"),
):
    appointments = service.get_appointments(current_user, to_naive_utc(start), to_naive_utc(end))
    return [appointment_to_response(a) for a in appointments]


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book an appointment; rejected with 400 when it overlaps a non-cancelled booking"""
    return appointment_to_response(service.create_appointment(data, current_user))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return appointment_to_response(
        service.update_status(appointment_id, data.status, current_user)
    )


@router.delete("/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id, current_user)
