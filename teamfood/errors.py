from fastapi import status


class AppError(Exception):
    """Base class for failures that end a request with a JSON error body."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(AppError):
    """Missing, malformed, expired or tampered session token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(AppError):
    """A role, country or ownership rule rejected the request."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(AppError):
    """The order is not in a state that allows the requested transition."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


__all__ = ["AppError", "Forbidden", "InvalidState", "NotFound", "Unauthenticated", "ValidationFailed"]
