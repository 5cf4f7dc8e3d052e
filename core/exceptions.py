"""
Application error taxonomy.

Services raise these; the handlers registered in ``main.py`` turn them into
``{"ok": false, "error": ...}`` responses with the matching status code.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for errors that map onto a single HTTP response."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message, **self.extra}


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    """Server-side failure, including a failed call to an external provider."""

    status_code = 500
    default_message = "Internal server error"
