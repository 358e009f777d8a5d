"""User router - FastAPI endpoints for user administration"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import MANAGEMENT_ROLES, require_roles
from ...database import get_db
from ...models import User, UserRole
from ...responses import success_response
from ...shared.schemas import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .schemas import ResetPasswordRequest, UserCreate, UserResponse, UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: UserService = Depends(get_user_service),
):
    result = service.list_users(page, limit, search, role.value if role else None)
    return success_response("Users retrieved successfully", result)


@router.get("/export")
async def export_users_csv(
    search: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: UserService = Depends(get_user_service),
):
    """Export users as CSV with optional filters"""
    return service.export_users_csv(search, role.value if role else None)


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: UserService = Depends(get_user_service),
):
    user = service.get_user(user_id)
    return success_response("User retrieved successfully", UserResponse.model_validate(user))


@router.post("")
async def create_user(
    data: UserCreate,
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: UserService = Depends(get_user_service),
):
    user = service.create_user(data)
    return success_response("User created successfully", UserResponse.model_validate(user), 201)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: UserService = Depends(get_user_service),
):
    user = service.update_user(user_id, data)
    return success_response("User updated successfully", UserResponse.model_validate(user))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    service: UserService = Depends(get_user_service),
):
    """Delete a user (admins only, never their own account)"""
    service.delete_user(user_id, current_user)
    return success_response("User deleted successfully")


@router.post("/{user_id}/reset-password")
async def reset_password(
    user_id: str,
    data: ResetPasswordRequest,
    current_user: User = Depends(require_roles(*MANAGEMENT_ROLES)),
    service: UserService = Depends(get_user_service),
):
    service.reset_password(user_id, data.new_password)
    return success_response("Password reset successfully")
