"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import APPOINTMENT_STATUSES
from ...shared.validators import to_naive_utc, validate_email, validate_not_blank

BOOKABLE_STATUSES = ("pending", "confirmed")


class AppointmentCreate(BaseModel):
    """Schema for booking a new appointment; the end time comes from the service duration"""

    clientName: str = Field(..., max_length=255)
    clientEmail: str
    serviceId: int
    startTime: datetime
    notes: Optional[str] = None
    status: Optional[str] = None

    @field_validator("clientName")
    @classmethod
    def validate_client_name(cls, v):
        return validate_not_blank(v, "Client name")

    @field_validator("clientEmail")
    @classmethod
    def normalize_client_email(cls, v):
        return validate_email(validate_not_blank(v, "Client email"))

    @field_validator("startTime")
    @classmethod
    def normalize_start_time(cls, v):
        return to_naive_utc(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in BOOKABLE_STATUSES:
            raise ValueError(f"New appointments must be one of: {', '.join(BOOKABLE_STATUSES)}")
        return v


class AppointmentStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in APPOINTMENT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(APPOINTMENT_STATUSES)}")
        return v


class ServiceSummary(BaseModel):
    """Service summary embedded in appointment responses"""

    id: int
    name: str
    duration: int
    price: float
    category: str


class AppointmentResponse(BaseModel):
    id: int
    clientName: str
    clientEmail: str
    service: Optional[ServiceSummary] = None
    startTime: datetime
    endTime: datetime
    status: str
    price: float
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
