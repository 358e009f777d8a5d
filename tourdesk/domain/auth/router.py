"""Auth router - register, login, and current user"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...responses import success_response
from ..users.schemas import UserResponse
from .schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
from .service import AuthService

router = APIRouter(tags=["Auth"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency injection for AuthService"""
    return AuthService(db)


@router.post("/register")
async def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user = service.register(data)
    return success_response("User registered successfully", RegisterResponse.model_validate(user), 201)


@router.post("/login")
async def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    token, user = service.login(data)
    return success_response(
        "Login successful",
        LoginResponse(token=token, user=UserResponse.model_validate(user)),
    )


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return success_response("User retrieved successfully", UserResponse.model_validate(current_user))
