# app/core/exceptions.py
from fastapi import HTTPException, status


class DomainError(Exception):
    """Base exception for staff-roster failures."""


class ValidationError(DomainError):
    """Raised when input is missing, malformed or outside its allowed range."""


class NotFoundError(DomainError):
    """Raised when the addressed entity does not exist."""


class StoreError(DomainError):
    """Raised when the backing store fails (connectivity, constraint, driver)."""


class DuplicateValueError(StoreError):
    """Raised when a write collides with a unique index."""


class StoreTimeoutError(StoreError):
    """Raised when a store call exceeds DB_TIMEOUT_SECONDS."""


def to_http_exception(exc: DomainError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status.HTTP_400_BAD_REQUEST, str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, str(exc))
    if isinstance(exc, DuplicateValueError):
        return HTTPException(status.HTTP_409_CONFLICT, str(exc))
    if isinstance(exc, StoreTimeoutError):
        return HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))
    return HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Server error")


def validation_error_from(e) -> ValidationError:
    """Collapse a pydantic error into our ValidationError with its first message."""
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    msg = err.get("msg", "Invalid payload")
    return ValidationError(f"{loc}: {msg}" if loc else msg)
