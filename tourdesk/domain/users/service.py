"""User service - Business logic for user administration"""

import csv
import logging
from datetime import datetime
from io import StringIO
from typing import Optional

from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ...errors import ConflictError, NotFoundError, ValidationFailedError
from ...models import User
from ...security_utils import hash_password_bcrypt
from ...shared.schemas import build_page, paginate
from .repository import UserRepository
from .schemas import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def list_users(self, page: int, limit: int, search: Optional[str] = None, role: Optional[str] = None) -> dict:
        query = self.repo.search_users(self.db, search, role)
        users, total = paginate(query, page, limit)
        return build_page([UserResponse.model_validate(u) for u in users], total, page, limit)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User")
        return user

    def create_user(self, data: UserCreate) -> User:
        """Create a user account; emails are unique"""
        if self.repo.get_user_by_email(self.db, data.email):
            logger.warning(f"⚠️ Attempt to create user with existing email: {data.email}")
            raise ConflictError("User with this email already exists")

        user = self.repo.create_user(
            self.db,
            name=data.name,
            email=data.email,
            password_hash=hash_password_bcrypt(data.password),
            role=data.role.value,
        )
        logger.info(f"✅ User created: {user.email} ({user.role})")
        return user

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        user = self.get_user(user_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if not updates:
            raise ValidationFailedError("No fields to update")

        if updates.get("email") and updates["email"] != user.email:
            existing = self.repo.get_user_by_email(self.db, updates["email"])
            if existing and existing.id != user.id:
                raise ConflictError("Email already in use by another user")

        if updates.get("role") is not None:
            updates["role"] = updates["role"].value

        user = self.repo.update_user(self.db, user, **updates)
        logger.info(f"✏️ User {user.id} updated: {sorted(updates)}")
        return user

    def delete_user(self, user_id: str, acting_user: User) -> None:
        if user_id == acting_user.id:
            logger.warning(f"⚠️ User {acting_user.email} attempted to delete their own account")
            raise ValidationFailedError("You cannot delete your own account")

        user = self.get_user(user_id)
        self.repo.delete_user(self.db, user)
        logger.info(f"🗑️ User {user_id} deleted by {acting_user.email}")

    def reset_password(self, user_id: str, new_password: str) -> None:
        user = self.get_user(user_id)
        self.repo.update_user(self.db, user, password_hash=hash_password_bcrypt(new_password))
        logger.info(f"🔑 Password reset for user {user_id}")

    def export_users_csv(self, search: Optional[str] = None, role: Optional[str] = None) -> StreamingResponse:
        """Export users as CSV"""
        users = self.repo.search_users(self.db, search, role).all()
        logger.info(f"📊 Exporting {len(users)} users to CSV")

        output = StringIO()
        writer = csv.writer(output)
        writer.writerow(["ID", "Name", "Email", "Role", "Created At", "Updated At"])

        for user in users:
            writer.writerow(
                [
                    user.id,
                    user.name or "",
                    user.email,
                    user.role,
                    user.created_at.strftime("%Y-%m-%d %H:%M:%S") if user.created_at else "",
                    user.updated_at.strftime("%Y-%m-%d %H:%M:%S") if user.updated_at else "",
                ]
            )

        output.seek(0)
        filename = f"users_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={
                "Content-Disposition": f"attachment; filename={filename}",
                "Cache-Control": "no-cache",
            },
        )
