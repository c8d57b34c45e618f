"""Application error taxonomy and user-facing notices."""

from dataclasses import dataclass

UNKNOWN_ERROR = "UNKNOWN_ERROR"
UNKNOWN_MESSAGE = "An unexpected error occurred."


class CalorieLensError(Exception):
    """Base error carrying a stable code and a user-facing message."""

    code = UNKNOWN_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NetworkError(CalorieLensError):
    """Connectivity failure talking to the recognizer or the store."""

    code = "NETWORK_ERROR"


class ConfigError(CalorieLensError):
    """Required configuration is missing or invalid."""

    code = "CONFIG_ERROR"


class ParseError(CalorieLensError):
    """Recognizer output could not be extracted or decoded."""

    code = "PARSE_ERROR"


class ValidationError(CalorieLensError):
    """User input is outside its accepted range."""

    code = "VALIDATION_ERROR"


class StorageError(CalorieLensError):
    """A store insert, query or delete failed."""

    code = "STORAGE_ERROR"


@dataclass(frozen=True)
class ErrorNotice:
    """Uniform error shape surfaced to the client as a transient notification."""

    message: str
    code: str


def to_notice(exc: BaseException, context: str | None = None) -> ErrorNotice:
    """Convert any exception into an `ErrorNotice`.

    Known application errors keep their message and code. Anything else is
    reported with a generic message so internals do not leak to the client.
    """
    if isinstance(exc, CalorieLensError):
        message, code = exc.message, exc.code
    else:
        message, code = UNKNOWN_MESSAGE, UNKNOWN_ERROR
    if context:
        message = f"{context}: {message}"
    return ErrorNotice(message=message, code=code)
