import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .errors import AuthenticationError, PermissionDeniedError
from .models import User, UserRole
from .security_utils import verify_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

STAFF_ROLES = (UserRole.ADMIN, UserRole.MANAGER, UserRole.STAFF)
MANAGEMENT_ROLES = (UserRole.ADMIN, UserRole.MANAGER)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user from the ``Authorization: Bearer <token>`` header"""
    if not credentials or not credentials.credentials:
        raise AuthenticationError(
            "Not authenticated. Please provide a valid Bearer token in the Authorization header."
        )

    payload = verify_access_token(credentials.credentials)
    if not payload or not payload.get("userId"):
        raise AuthenticationError("Invalid token")

    user = db.query(User).filter(User.id == payload["userId"]).first()
    if not user:
        logger.warning(f"⚠️ Token for unknown user {payload['userId']}")
        raise AuthenticationError("Invalid token")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def require_roles(*roles: UserRole):
    """
    Dependency factory: only users holding one of ``roles`` may pass.

    Usage: ``user: User = Depends(require_roles(UserRole.ADMIN))``
    """
    allowed = {role.value for role in roles}

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            logger.warning(f"⚠️ User {user.email} ({user.role}) denied, requires one of {sorted(allowed)}")
            raise PermissionDeniedError()
        return user

    return role_checker
