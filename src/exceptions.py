"""Domain exception hierarchy shared by services and the HTTP boundary."""

from __future__ import annotations


class AppException(Exception):
    """Base exception for all domain errors.

    Subclasses set ``code`` and ``status_code`` at the class level; callers
    provide ``message`` and an optional ``details`` list.
    """

    code: str = "APP_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class NotFoundException(AppException):
    code = "NOT_FOUND"
    status_code = 404


class ConflictException(AppException):
    code = "CONFLICT"
    status_code = 409


class UnauthorizedException(AppException):
    """Caller is anonymous or does not own the resource.

    ``reason`` records why access was refused (``anonymous``, ``missing`` or
    ``not_owner``) for logging only; it never reaches the caller.
    """

    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.reason = reason


class ValidationException(AppException):
    code = "VALIDATION_ERROR"
    status_code = 422


class StoreFailureException(AppException):
    """The relational store rejected or failed a call; carries the store's message."""

    code = "STORE_FAILURE"
    status_code = 503
