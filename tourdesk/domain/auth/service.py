"""Auth service - registration and credential checks"""

import logging

from sqlalchemy.orm import Session

from ...errors import AuthenticationError, ConflictError, PermissionDeniedError
from ...models import User, UserRole
from ...security_utils import create_access_token, hash_password_bcrypt, verify_password_bcrypt
from ..users.repository import UserRepository
from .schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: RegisterRequest) -> User:
        """
        Self-service sign up.

        Staff roles can only be claimed this way until the first ADMIN exists;
        after that, staff accounts are created through ``POST /users``.
        """
        if self.repo.get_user_by_email(self.db, data.email):
            logger.warning(f"⚠️ Registration with existing email: {data.email}")
            raise ConflictError("User with this email already exists")

        if data.role != UserRole.MEMBER and self.repo.count_by_role(self.db, UserRole.ADMIN.value) > 0:
            logger.warning(f"⚠️ Registration as {data.role.value} refused for {data.email}")
            raise PermissionDeniedError("Only administrators can create staff accounts")

        user = self.repo.create_user(
            self.db,
            name=data.name,
            email=data.email,
            password_hash=hash_password_bcrypt(data.password),
            role=data.role.value,
        )
        logger.info(f"✅ Registered {user.email} as {user.role}")
        return user

    def login(self, data: LoginRequest) -> tuple[str, User]:
        user = self.repo.get_user_by_email(self.db, data.email)
        if not user or not verify_password_bcrypt(data.password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise AuthenticationError("Invalid email or password")

        token = create_access_token(user.id, user.role)
        logger.info(f"🔐 User logged in: {user.email}")
        return token, user
