"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ...models import UserRole
from ...shared.schemas import CamelModel
from ...shared.validators import validate_email, validate_password_strength


class UserCreate(CamelModel):
    """Schema for creating a new user"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: str = Field(..., min_length=1)
    password: str
    role: UserRole = UserRole.MEMBER

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return validate_password_strength(v)


class UserUpdate(CamelModel):
    """Schema for updating a user; only supplied fields change"""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    role: Optional[UserRole] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class ResetPasswordRequest(CamelModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def check_password(cls, v):
        return validate_password_strength(v)


class UserResponse(CamelModel):
    """Schema for user response"""

    id: str
    name: Optional[str] = None
    email: str
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
