"""
Error taxonomy for the Home Assistant REST client.

Every failure surfaced to callers is a ``HomeAssistantError`` carrying a
``kind``, an optional ``http_status`` and a human-readable ``message``.
"""

from enum import Enum
from typing import Dict, Optional, Type


class ErrorKind(Enum):
    """Classification of a failed operation."""

    INVALID_INPUT = "InvalidInput"
    NOT_CONNECTED = "NotConnected"
    CONNECTION_FAILED = "ConnectionFailed"
    SERVER_UNREACHABLE = "ServerUnreachable"
    BAD_REQUEST = "BadRequest"
    UNAUTHORIZED = "Unauthorized"
    NOT_FOUND = "NotFound"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    UNKNOWN = "Unknown"


class HomeAssistantError(Exception):
    """Base error for all client failures."""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.http_status = http_status

    def __str__(self) -> str:
        if self.http_status is not None:
            return f"{self.kind.value} (HTTP {self.http_status}): {self.message}"
        return f"{self.kind.value}: {self.message}"


class InvalidInputError(HomeAssistantError):
    """Raised for bad parameters, before any network call."""

    kind = ErrorKind.INVALID_INPUT


class NotConnectedError(HomeAssistantError):
    """Raised when an operation is attempted without a connected session."""

    kind = ErrorKind.NOT_CONNECTED


class ConnectionFailedError(HomeAssistantError):
    kind = ErrorKind.CONNECTION_FAILED


class ServerUnreachableError(HomeAssistantError):
    """Raised when the health check itself fails after a request failure."""

    kind = ErrorKind.SERVER_UNREACHABLE


class BadRequestError(HomeAssistantError):
    kind = ErrorKind.BAD_REQUEST


class UnauthorizedError(HomeAssistantError):
    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(HomeAssistantError):
    kind = ErrorKind.NOT_FOUND


class MethodNotAllowedError(HomeAssistantError):
    kind = ErrorKind.METHOD_NOT_ALLOWED


class UnknownError(HomeAssistantError):
    kind = ErrorKind.UNKNOWN


# Classification of a failed request once the server is known to be alive
STATUS_ERRORS: Dict[int, Type[HomeAssistantError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    404: NotFoundError,
    405: MethodNotAllowedError,
}

STATUS_MESSAGES: Dict[int, str] = {
    400: "The request was malformed or contained invalid data.",
    401: "Authentication failed. Check your Long-Lived Access Token.",
    404: "The requested resource was not found.",
    405: "The HTTP method is not allowed for this endpoint.",
}


def error_for_status(status: Optional[int], detail: str = "") -> HomeAssistantError:
    """Build the classified error for a failed request against a live server.

    Args:
        status: HTTP status of the failed response, or None when the request
            failed without a response.
        detail: Server-provided or transport error text.

    Returns:
        The matching ``HomeAssistantError`` subclass instance.
    """
    if status in STATUS_ERRORS:
        message = STATUS_MESSAGES[status]
        if detail:
            message = f"{message} {detail}"
        return STATUS_ERRORS[status](message, http_status=status)
    if status is None:
        return UnknownError(f"Request failed: {detail}")
    return UnknownError(
        f"Unexpected response status {status}: {detail}", http_status=status
    )


def truncate_error(message: str, max_length: int = 200) -> str:
    """Truncate an error message if it exceeds *max_length*."""
    if len(message) <= max_length:
        return message
    return message[: max_length - 3] + "..."
