"""Error taxonomy shared by the fetcher, the URL helpers and the tracer."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    TIMEOUT = "timeout"
    CERTIFICATE_VALIDATION = "certificate_validation"
    CONNECTION_REFUSED = "connection_refused"
    NETWORK_ERROR = "network_error"
    INVALID_URL = "invalid_url"
    MISSING_SCHEME = "missing_scheme"
    MISSING_HOST = "missing_host"
    REDIRECT_PARSE_FAILURE = "redirect_parse_failure"


# Failures the CLI reports as a plain "Sorry!" rather than an error.
USER_FACING_KINDS = frozenset(
    {
        ErrorKind.TIMEOUT,
        ErrorKind.CERTIFICATE_VALIDATION,
        ErrorKind.CONNECTION_REFUSED,
    }
)


class LinkTraceError(Exception):
    """Base class for errors raised inside the tracing engine."""

    kind: ErrorKind = ErrorKind.NETWORK_ERROR

    def __init__(self, message: str, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def message(self) -> str:
        return str(self)


class FetchError(LinkTraceError):
    """A single request could not produce a response."""


class RedirectError(LinkTraceError):
    """A redirect target could not be turned into an absolute URL."""

    kind = ErrorKind.REDIRECT_PARSE_FAILURE


class ConfigError(Exception):
    """The configuration file exists but could not be read."""


__all__ = [
    "ErrorKind",
    "USER_FACING_KINDS",
    "LinkTraceError",
    "FetchError",
    "RedirectError",
    "ConfigError",
]
