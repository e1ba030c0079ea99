from typing import Optional

from fastapi import HTTPException


class AppError(Exception):
    """Base for errors that map onto a caller-facing status and message."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[dict] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_detail(self):
        if not self.details:
            return self.message
        return {"error": self.message, **self.details}


class ValidationError(AppError):
    status_code = 400


class InvalidCodeError(AppError):
    # Wrong, already used and expired codes all land here
    status_code = 400

    def __init__(self, message: str = "Invalid or expired verification code"):
        super().__init__(message)


class AuthorizationError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class AccountExistsError(ConflictError):
    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


class UpstreamError(AppError):
    """The provider answered with a non-success status."""

    def __init__(self, message: str, status_code: int, details: Optional[dict] = None):
        super().__init__(message, status_code=status_code, details=details)


class UpstreamUnavailableError(AppError):
    """The provider could not be reached at all."""

    status_code = 500


class InternalError(AppError):
    status_code = 500


def to_http_exception(error: AppError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())
