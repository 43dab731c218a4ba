"""Application error types.

Route handlers raise these and never format error bodies themselves; the
exception handlers registered in ``main`` turn them into the JSON envelope
``{"error": {"message": ..., "status": ...}}``.
"""
from typing import Any, Optional


class ApiError(Exception):
    """Base error carrying an HTTP status code."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Any = None, status_code: Optional[int] = None):
        self.message = message if message is not None else self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(str(self.message))


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not Found"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Bad Request"


class DataAccessError(ApiError):
    """Opaque database failure (connectivity, constraint violation, ...)."""

    status_code = 500
    default_message = "Database error"
