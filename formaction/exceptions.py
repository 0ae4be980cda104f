"""Custom exceptions shared across services."""

from dataclasses import dataclass

INTERNAL_ERROR_MESSAGE = "Internal Server Error"


@dataclass(eq=False)
class ServiceError(Exception):
    """Base exception for service layer failures."""

    message: str
    code: str = "service_error"
    status_code: int | None = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(eq=False)
class InternalServerError(ServiceError):
    """Generic, detail-free failure raised across the action boundary."""

    message: str = INTERNAL_ERROR_MESSAGE
    code: str = "internal_error"
    status_code: int | None = 500


@dataclass(eq=False)
class UserServiceError(ServiceError):
    """Raised when UserService cannot persist a user."""

    code: str = "user_error"


@dataclass(eq=False)
class ActionClientError(ServiceError):
    """Raised when FormClient cannot obtain a usable action response."""

    code: str = "client_error"
