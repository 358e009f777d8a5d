"""Auth schemas - registration and login payloads"""

from typing import Optional

from pydantic import Field, field_validator

from ...models import UserRole
from ...shared.schemas import CamelModel
from ...shared.validators import validate_email, validate_password_strength
from ..users.schemas import UserResponse


class RegisterRequest(CamelModel):
    email: str
    password: str
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: UserRole = UserRole.MEMBER

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def check_password(cls, v):
        return validate_password_strength(v)


class LoginRequest(CamelModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class RegisterResponse(CamelModel):
    id: str
    email: str
    role: str


class LoginResponse(CamelModel):
    token: str
    user: UserResponse
