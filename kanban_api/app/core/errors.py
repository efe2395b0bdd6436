"""
Service error hierarchy and HTTP translation.

Services raise subclasses of ``ServiceError``; endpoints run service
calls inside ``http_errors()`` which converts them into
``HTTPException`` with the matching status code.  Errors that are not
``ServiceError`` (including unexpected platform failures) propagate
and FastAPI answers them with a 500.
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException, status


# PostgREST code returned by ``.single()`` when zero or several rows match.
NO_ROWS_CODE = "PGRST116"
# Postgres unique_violation.
UNIQUE_VIOLATION_CODE = "23505"


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDeniedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class PayloadTooLargeError(ServiceError):
    status_code = 413


def error_code(exc: Exception) -> str:
    """Return the PostgREST/Postgres error code carried by ``exc`` (or ``""``)."""
    return str(getattr(exc, "code", "") or "")


def is_no_rows(exc: Exception) -> bool:
    return error_code(exc) == NO_ROWS_CODE


def is_unique_violation(exc: Exception) -> bool:
    return error_code(exc) == UNIQUE_VIOLATION_CODE


@contextmanager
def http_errors() -> Iterator[None]:
    """Context manager translating ``ServiceError`` into ``HTTPException``."""
    try:
        yield
    except ServiceError as exc:
        headers = None
        if isinstance(exc, AuthenticationError):
            headers = {"WWW-Authenticate": "Bearer"}
        raise HTTPException(status_code=exc.status_code, detail=exc.message, headers=headers) from exc
