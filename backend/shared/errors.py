"""
Service error taxonomy shared by every module.

Each error carries the HTTP status it maps to and a stable ``error_code`` so
the API layer can render it without inspecting the exception type.
"""

from typing import Any


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BadRequestError(ServiceError):
    """Raised for malformed input such as an undecodable image payload."""

    status_code = 400
    error_code = "bad_request"


class UnauthorizedError(ServiceError):
    """Raised when credentials are missing or invalid."""

    status_code = 401
    error_code = "unauthorized"


class ForbiddenError(ServiceError):
    """Raised for ownership mismatches and denied public access."""

    status_code = 403
    error_code = "forbidden"


class NotFoundError(ServiceError):
    """Raised when the requested entity does not exist."""

    status_code = 404
    error_code = "not_found"


class ConflictError(ServiceError):
    """Raised when a unique field is already taken."""

    status_code = 409
    error_code = "conflict"
