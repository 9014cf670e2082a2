"""Auth service - Business logic for accounts, sessions and password resets"""

import logging
from datetime import datetime

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import email_service
from ...config import CLIENT_URL
from ...models import User
from ...security_utils import (
    create_access_token,
    generate_password_reset_token,
    hash_password_bcrypt,
    hash_reset_token,
    verify_password_bcrypt,
)
from .repository import UserRepository
from .schemas import (
    LoginRequest,
    PasswordUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for authentication"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        """Create an account and issue its first session token"""
        if self.repo.get_user_by_email(self.db, data.email):
            logger.info(f"⚠️ Registration rejected, email already in use: {data.email}")
            raise HTTPException(status_code=400, detail="User already exists")

        try:
            user = self.repo.create_user(
                self.db,
                name=data.name,
                email=data.email,
                password_hash=hash_password_bcrypt(data.password),
                role=data.role or "BARBER",
                barber_shop=data.barberShop,
            )
        except IntegrityError as e:
            # Email was taken between the check and the insert
            self.db.rollback()
            raise HTTPException(status_code=400, detail="User already exists") from e

        logger.info(f"🆕 New user registered: {user.email} (id={user.id})")
        return user, create_access_token(user.id)

    def login(self, data: LoginRequest) -> tuple[User, str]:
        user = self.repo.get_user_by_email(self.db, data.email)
        if not user or not verify_password_bcrypt(data.password, user.password_hash):
            logger.warning(f"🔒 Failed login attempt for {data.email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if user.status != "active":
            raise HTTPException(status_code=401, detail="Account is inactive")

        logger.info(f"✅ User logged in: {user.email}")
        return user, create_access_token(user.id)

    def update_profile(self, user: User, data: ProfileUpdateRequest) -> User:
        updates = {}
        if data.name:
            updates["name"] = data.name
        if data.email and data.email != user.email:
            existing = self.repo.get_user_by_email(self.db, data.email)
            if existing and existing.id != user.id:
                raise HTTPException(status_code=400, detail="Email is already in use")
            updates["email"] = data.email
        if data.barberShop:
            updates["barber_shop"] = data.barberShop

        try:
            return self.repo.update_user(self.db, user, **updates)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="Email is already in use") from e

    def update_password(self, user: User, data: PasswordUpdateRequest) -> dict:
        if not verify_password_bcrypt(data.currentPassword, user.password_hash):
            raise HTTPException(status_code=400, detail="Invalid current password")

        self.repo.update_user(self.db, user, password_hash=hash_password_bcrypt(data.newPassword))
        logger.info(f"🔑 Password updated for user {user.id}")
        return {"message": "Password updated successfully"}

    async def forgot_password(self, email: str) -> dict:
        """Store a hashed single-use token and email the raw token as a reset link"""
        user = self.repo.get_user_by_email(self.db, email)
        if not user:
            logger.info(f"Forgot password failed: no user found with email {email}")
            raise HTTPException(status_code=404, detail="User not found")

        raw_token, token_hash, expires_at = generate_password_reset_token()
        self.repo.update_user(
            self.db, user, password_reset_token=token_hash, password_reset_expires=expires_at
        )

        reset_link = f"{CLIENT_URL}/reset-password/{raw_token}"

        try:
            await email_service.send_password_reset_email(user.email, reset_link)
        except email_service.EmailNotConfiguredError:
            # Local development: surface the link in the server log instead
            logger.warning(f"📧 Email not configured. Password reset link for {user.email}: {reset_link}")
        except Exception as e:
            logger.error(f"❌ Failed to send password reset email to {user.email}: {e}")
            self.repo.update_user(
                self.db, user, password_reset_token=None, password_reset_expires=None
            )
            raise HTTPException(
                status_code=500, detail="Failed to send password reset email. Please try again."
            ) from e

        return {"message": "Password reset link sent to email"}

    def reset_password(self, token: str, new_password: str) -> dict:
        user = self.repo.get_user_by_reset_token(
            self.db, hash_reset_token(token), datetime.utcnow()
        )
        if not user:
            raise HTTPException(status_code=400, detail="Token is invalid or has expired")

        self.repo.update_user(
            self.db,
            user,
            password_hash=hash_password_bcrypt(new_password),
            password_reset_token=None,
            password_reset_expires=None,
        )
        logger.info(f"🔑 Password reset completed for user {user.id}")
        return {"message": "Password reset successful"}
