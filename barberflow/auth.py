import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import User
from .plan_limits import has_advanced_analytics
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is answered with our own 401
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer JWT to an active user"""

    if not credentials:
        logger.warning("❌ No credentials provided")
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    token = credentials.credentials

    # Basic token format validation before processing
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, length: {len(token)}")
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    payload = verify_jwt_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    user_id = payload.get("sub")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        logger.warning(f"❌ Token missing user ID claim. Available claims: {list(payload.keys())}")
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"❌ Token references unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Not authorized, user not found")

    if user.status != "active":
        logger.warning(f"⚠️ Inactive user {user.email} attempted to authenticate")
        raise HTTPException(status_code=401, detail="Account is inactive")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def get_current_user_with_paid_plan(
    user: User = Depends(get_current_user),
) -> User:
    """
    Get current user and verify their plan includes advanced analytics.
    Use this dependency for routes behind the pro/business paywall.
    """
    if not has_advanced_analytics(user.plan):
        logger.warning(f"⚠️ User {user.email} on plan '{user.plan}' attempted to access a paid feature")
        raise HTTPException(
            status_code=403,
            detail="This feature requires a Pro or Business plan.",
            headers={"X-Plan-Required": "pro"},
        )

    logger.debug(f"✅ User {user.email} has plan: {user.plan}")
    return user
