from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    barberShop: Optional[str] = None
    status: str
    plan: str
    subscriptionStatus: str
    createdAt: Optional[datetime] = None


class AuthResponse(UserResponse):
    token: str


class MessageResponse(BaseModel):
    message: str


def user_to_response(user) -> dict:
    """Public view of a User row, shared by auth and billing endpoints"""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "barberShop": user.barber_shop,
        "status": user.status,
        "plan": user.plan,
        "subscriptionStatus": user.subscription_status,
        "createdAt": user.created_at,
    }
