"""Auth router - FastAPI endpoints for accounts and sessions"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ...schemas import AuthResponse, MessageResponse, UserResponse, user_to_response
from .schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from .service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

rate_limit_login = create_rate_limiter(
    limit=10, window_seconds=900, key_prefix="login", use_ip=True
)
rate_limit_password_reset = create_rate_limiter(
    limit=5, window_seconds=3600, key_prefix="password_reset", use_ip=True
)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


# ============================================================================
# REGISTRATION & LOGIN
# ============================================================================


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user, token = service.register(data)
    return AuthResponse(**user_to_response(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    _: None = Depends(rate_limit_login),
):
    """Exchange email and password for a bearer token - Rate limited to 10 per 15 minutes"""
    user, token = service.login(data)
    return AuthResponse(**user_to_response(user), token=token)


# ============================================================================
# CURRENT USER
# ============================================================================


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return user_to_response(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    user = service.update_profile(current_user, data)
    return user_to_response(user)


@router.put("/password", response_model=MessageResponse)
async def update_password(
    data: PasswordUpdateRequest,
    current_user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    return service.update_password(current_user, data)


# ============================================================================
# PASSWORD RESET
# ============================================================================


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    service: AuthService = Depends(get_auth_service),
    _: None = Depends(rate_limit_password_reset),
):
    """Email a single-use reset link valid for 10 minutes - Rate limited to 5 per hour"""
    return await service.forgot_password(data.email)


@router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(
    token: str,
    data: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_service),
):
    return service.reset_password(token, data.password)
