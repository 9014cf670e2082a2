"""Service domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_not_blank


class ServiceCreate(BaseModel):
    """Schema for creating a new service"""

    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    duration: int = Field(..., gt=0, le=24 * 60, description="Duration in minutes")
    price: float = Field(..., ge=0)
    category: Optional[str] = Field(None, max_length=100)
    isActive: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_not_blank(v, "Name")


class ServiceUpdate(BaseModel):
    """Schema for partially updating a service"""

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=100)
    isActive: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_not_blank(v, "Name")


class ServiceResponse(BaseModel):
    """Schema for service response"""

    id: int
    name: str
    description: Optional[str]
    duration: int
    price: float
    category: str
    isActive: bool
    createdAt: Optional[datetime] = None
