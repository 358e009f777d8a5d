"""Shared validation utilities"""

import json
import re
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import ValidationFailedError

ModelT = TypeVar("ModelT", bound=BaseModel)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
MOBILE_PATTERN = re.compile(r"^[0-9]{10}$")
ENQUIRY_PHONE_PATTERN = re.compile(r"^[0-9+\-\s()]+$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if len(email) > 255:
        raise ValueError("Email must be less than 255 characters")

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def validate_mobile_no(mobile_no: Optional[str]) -> Optional[str]:
    """Member mobile numbers are exactly 10 digits"""
    if mobile_no is None:
        return mobile_no

    mobile_no = mobile_no.strip()
    if not MOBILE_PATTERN.match(mobile_no):
        raise ValueError("Mobile number must be exactly 10 digits")
    return mobile_no


def validate_enquiry_phone(phone: Optional[str]) -> Optional[str]:
    """Enquiry phones are free-form: digits, spaces, +, -, and parentheses"""
    if phone is None:
        return phone

    phone = phone.strip()
    if not ENQUIRY_PHONE_PATTERN.match(phone):
        raise ValueError("Invalid phone number format")
    return phone


def validate_password_strength(password: str) -> str:
    """
    Passwords need 8-100 characters with an uppercase letter, a lowercase
    letter, and a number.
    """
    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters")
    if len(password) > 100:
        raise ValueError("Password must be less than 100 characters")
    if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return password


def format_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic/FastAPI error dicts into ``[{field, message}]``"""
    formatted = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        message = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        formatted.append({"field": ".".join(loc), "message": message})
    return formatted


def parse_form(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """
    Validate multipart form fields with a pydantic model.

    Fields the client did not send are dropped so partial-update models only
    see what was supplied.

    Raises:
        ValidationFailedError: with field-level errors
    """
    supplied = {key: value for key, value in data.items() if value is not None}
    try:
        return model.model_validate(supplied)
    except ValidationError as e:
        raise ValidationFailedError(errors=format_validation_errors(e.errors())) from e


def parse_json_object(value: Any) -> Any:
    """Multipart forms carry JSON objects (``extra``) as strings"""
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError("must be a valid JSON object") from e
    if value is not None and not isinstance(value, dict):
        raise ValueError("must be a JSON object")
    return value
