"""
core/errors.py -- Error taxonomy shared by stores, auth dependencies and routes.

Each error carries the HTTP status it maps to and a message that is safe to
show to clients. api/main.py registers one exception handler for ApiError that
renders {"message": ...}; nothing else needs to know about status codes.

Layer rule: core/ is the kernel. No imports from api/, auth/ or characters/.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base class for errors that become a JSON error response."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, detail: Any = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ApiError):
    """Malformed or schema-invalid request body."""

    status_code = 400
    default_message = "Bad Request"


class AuthenticationError(ApiError):
    """Bearer token problem.

    401 when no token was presented at all. Revoked, expired or tampered
    tokens are raised with status_code=403 and the "Forbidden" message.
    """

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Endpoint Not Found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Conflict"


class InternalError(ApiError):
    status_code = 500
    default_message = "Internal Server Error"
