"""Auth repository - Database operations for user accounts"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_user_by_reset_token(db: Session, token_hash: str, now: datetime) -> Optional[User]:
        """Find the user holding an unexpired reset token digest"""
        return (
            db.query(User)
            .filter(User.password_reset_token == token_hash, User.password_reset_expires > now)
            .first()
        )

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user; None values are written so reset fields can be cleared"""
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user
