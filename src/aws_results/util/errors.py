from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    OK = 0
    CONFIG_ERROR = 2
    TRANSPORT_ERROR = 4
    RUNTIME_ERROR = 5


class ResultsError(Exception):
    """Base error for the client library."""


class ConfigError(ResultsError):
    """Raised for configuration or argument issues."""


class ConfigurationError(ResultsError):
    """
    Raised when a result object is missing the client or the originating input
    needed to fetch its pages. Only reachable when a result is built outside of
    the service clients.
    """


class InvalidArgument(ResultsError, ValueError):
    """Raised when a request cannot be built from its input."""


class TransportError(ResultsError):
    """
    Raised when a call through the transport fails: network failure, error
    status returned by the service, timeout or an undecodable body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.operation = operation


class ExportError(ResultsError):
    """Raised when exporting artifacts fails."""


def as_exit_code(exc: BaseException) -> int:
    if isinstance(exc, (ConfigError, ConfigurationError, ValueError)):
        return int(ExitCode.CONFIG_ERROR)
    if isinstance(exc, TransportError):
        return int(ExitCode.TRANSPORT_ERROR)
    if isinstance(exc, (ExportError, ResultsError)):
        return int(ExitCode.RUNTIME_ERROR)
    return 1


def map_transport_error(exc: BaseException, context: str, *, operation: Optional[str] = None) -> TransportError:
    """
    Wrap any failure raised while talking to the transport with TransportError
    so callers handle a single type. Existing TransportErrors pass through.
    """
    if isinstance(exc, TransportError):
        return exc
    status_code = getattr(getattr(exc, "response", None), "status_code", None)
    return TransportError(f"{context}: {exc}", status_code=status_code, operation=operation)
