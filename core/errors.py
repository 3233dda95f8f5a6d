"""
Error taxonomy surfaced by the services and rendered by `main.py` as

    {"error": <code>, "details": <str | list>}

`code` is the stable, machine-readable kind; `details` is for humans.
"""
from __future__ import annotations

from typing import Any


class ApiError(Exception):
    status: int = 500
    default_code: str = "SERVER_ERROR"

    def __init__(self, code: str | None = None, details: Any = None) -> None:
        self.code = code or self.default_code
        self.details = details
        super().__init__(f"{self.code}: {details}" if details else self.code)


class ValidationError(ApiError):
    status = 400
    default_code = "INVALID_INPUT"


class UnauthorizedError(ApiError):
    status = 401
    default_code = "UNAUTHORIZED"


class NotFoundError(ApiError):
    """Absent *or* owned by somebody else; the two are never distinguished."""

    status = 404
    default_code = "NOT_FOUND"


class ConflictError(ApiError):
    status = 409
    default_code = "CONFLICT"


class ServiceUnavailableError(ApiError):
    status = 503
    default_code = "SERVICE_UNAVAILABLE"


class ServerError(ApiError):
    status = 500
    default_code = "SERVER_ERROR"
