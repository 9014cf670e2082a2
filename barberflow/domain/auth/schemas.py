"""Auth domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import USER_ROLES
from ...shared.validators import validate_email, validate_not_blank


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str
    password: str = Field(..., min_length=6, max_length=128)
    barberShop: Optional[str] = Field(None, max_length=255)
    role: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_not_blank(v, "Name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(validate_not_blank(v, "Email"))

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        if v is None:
            return v
        v = v.strip().upper()
        if v not in USER_ROLES:
            raise ValueError(f"Role must be one of: {', '.join(USER_ROLES)}")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = None
    barberShop: Optional[str] = Field(None, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_not_blank(v, "Name")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)


class PasswordUpdateRequest(BaseModel):
    currentPassword: str
    newPassword: str = Field(..., min_length=6, max_length=128)


class ForgotPasswordRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)
