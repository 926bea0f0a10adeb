from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials or a worker PIN are rejected."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ApiError(Exception):
    """Raised when the backend API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        path: str = "",
        payload: Optional[dict] = None,
        is_auth_endpoint: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.path = path
        self.payload = payload or {}
        self.is_auth_endpoint = is_auth_endpoint


class ApiConnectionError(ApiError):
    """Raised when the backend could not be reached at all."""


class UnauthorizedError(ApiError):
    """HTTP 401 from the backend."""


class NotFoundError(ApiError):
    """HTTP 404 from the backend."""


DEFAULT_ERROR_MESSAGE = "Ein Fehler ist aufgetreten"


def get_error_message(error: BaseException, default: str = DEFAULT_ERROR_MESSAGE) -> str:
    if isinstance(error, ApiError):
        return error.message or default
    if isinstance(error, DomainError):
        return str(error) or default
    return default


def is_not_found(error: BaseException) -> bool:
    return isinstance(error, NotFoundError)


def is_unauthorized(error: BaseException) -> bool:
    return isinstance(error, UnauthorizedError)
