"""
Application error types.

Services raise these instead of HTTP exceptions; ``main.py`` maps each one to
the JSON error envelope with its ``status_code``.
"""

from typing import Any, Optional


class AppError(Exception):
    """Unclassified failure (500)"""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, errors: Optional[list[dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailedError(AppError):
    status_code = 400
    default_message = "Validation failed"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class PermissionDeniedError(AppError):
    status_code = 403
    default_message = "Forbidden: insufficient role"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"

    def __init__(self, entity: str, message: Optional[str] = None):
        self.entity = entity
        super().__init__(message or f"{entity} not found")


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class SMSGatewayError(AppError):
    """The SMS provider could not be reached or rejected the request"""

    status_code = 502
    default_message = "Failed to send SMS"
