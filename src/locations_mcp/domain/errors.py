"""Error kinds raised by the location resolution pipeline."""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .validation import FieldError


class LocationError(RuntimeError):
    """Base class for every error surfaced to tool callers."""


class InputError(LocationError):
    """Raised when caller input (name, id, collection, limit) is missing or invalid."""


class NotFoundError(LocationError):
    """Raised when neither the store nor the geodata source knows the location."""


class ValidationError(LocationError):
    """Raised when a merged record fails the validation gate."""

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors = tuple(errors)
        joined = "; ".join(error.message for error in self.errors)
        super().__init__(f"Invalid location data: {joined}")


class StoreUnavailableError(LocationError):
    """Raised when the persistent store cannot be reached at startup."""


class UpstreamError(LocationError):
    """Base class for failures of external data sources."""

    def __init__(self, message: str, *, source: str) -> None:
        super().__init__(message)
        self.source = source


class UpstreamTimeoutError(UpstreamError):
    """The external call did not finish within its time budget."""


class UpstreamStatusError(UpstreamError):
    """The external source answered with a non-success status code."""

    def __init__(self, message: str, *, source: str, status_code: int) -> None:
        super().__init__(message, source=source)
        self.status_code = status_code


class UpstreamUnavailableError(UpstreamStatusError):
    """The external source is rate limiting or failing server-side (429/5xx)."""


class UpstreamPayloadError(UpstreamError):
    """The external source returned a payload that could not be interpreted."""


class NetworkFailure(StrEnum):
    CONNECTION_TIMEOUT = "connection_timeout"
    CONNECTION_RESET = "connection_reset"
    DNS_FAILURE = "dns_failure"
    OTHER = "other"


class UpstreamNetworkError(UpstreamError):
    """Connection-level failure, classified so operators can tell network from server issues."""

    def __init__(self, message: str, *, source: str, failure: NetworkFailure) -> None:
        super().__init__(message, source=source)
        self.failure = failure


def network_failure_message(source: str, failure: NetworkFailure) -> str:
    """Human readable explanation of a connection-level failure."""

    match failure:
        case NetworkFailure.CONNECTION_TIMEOUT:
            return (
                f"{source} server connection timeout. This may be due to network connectivity "
                "issues, firewall restrictions, or VPN blocking. Please check your network "
                "connection and try again later."
            )
        case NetworkFailure.CONNECTION_RESET:
            return (
                f"{source} server connection was reset. This may indicate network instability "
                "or server-side issues. Please try again later."
            )
        case NetworkFailure.DNS_FAILURE:
            return (
                f"{source} server could not be reached (DNS resolution failed). Please check "
                "your internet connection and DNS settings."
            )
        case _:
            return (
                f"Network error: unable to connect to {source} servers. "
                "Please check your network connection."
            )
