"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import CLIENT_STATUSES
from ...shared.validators import validate_email, validate_not_blank, validate_phone


def _validate_status(v):
    if v is not None and v not in CLIENT_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(CLIENT_STATUSES)}")
    return v


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    name: str = Field(..., max_length=255)
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_not_blank(v, "Name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(validate_not_blank(v, "Email"))

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v):
        return validate_phone(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)


class ClientUpdate(BaseModel):
    """Schema for updating an existing client"""

    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_not_blank(v, "Name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v):
        return validate_phone(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _validate_status(v)


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: int
    name: str
    email: str
    phone: Optional[str]
    notes: Optional[str]
    status: str
    totalBookings: int
    totalSpent: float
    lastVisit: Optional[datetime] = None
    createdAt: Optional[datetime] = None
