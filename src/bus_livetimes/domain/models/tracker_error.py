"""Closed set of errors a live times request can end with.

Instances are only created by the tracker error mapper. Callers dispatch on
them with ``match`` or ``isinstance``; nothing above that boundary sees HTTP or
socket details.
"""

from dataclasses import dataclass, field
from typing import ClassVar, TypeAlias


@dataclass(frozen=True)
class NetworkError:
    """I/O or connectivity fault, or a payload that could not be decoded."""

    cause: BaseException | None = field(default=None, compare=False)
    retryable: ClassVar[bool] = True

    @property
    def reason(self) -> str:
        return f"Network error: {self.cause}" if self.cause else "Network error"


@dataclass(frozen=True)
class UnknownHostError:
    """The tracker host name could not be resolved."""

    host: str | None = None
    retryable: ClassVar[bool] = True

    @property
    def reason(self) -> str:
        return f"Unknown host {self.host}" if self.host else "Unknown host"


@dataclass(frozen=True)
class RequestTimeoutError:
    """The tracker did not answer in time."""

    retryable: ClassVar[bool] = True

    @property
    def reason(self) -> str:
        return "Request timed out"


@dataclass(frozen=True)
class NoConnectivityError:
    """The device reported no internet connectivity, so no call was attempted."""

    retryable: ClassVar[bool] = True

    @property
    def reason(self) -> str:
        return "No internet connectivity"


@dataclass(frozen=True)
class ServerError:
    """The tracker service failed (5xx, rate limiting, maintenance, unexpected status)."""

    code: int | None = None
    detail: str | None = None
    retryable: ClassVar[bool] = True

    @property
    def reason(self) -> str:
        if self.detail:
            return self.detail
        return f"HTTP {self.code}" if self.code is not None else "Server error"


@dataclass(frozen=True)
class AuthenticationError:
    """The tracker rejected our credentials (API key)."""

    code: int | None = None
    retryable: ClassVar[bool] = False

    @property
    def reason(self) -> str:
        return "Authentication with the tracker service failed"


@dataclass(frozen=True)
class RequestRejectedError:
    """The tracker rejected the request itself (unknown stop, bad parameter)."""

    code: int | None = None
    detail: str | None = None
    retryable: ClassVar[bool] = False

    @property
    def reason(self) -> str:
        if self.detail:
            return self.detail
        if self.code is not None:
            return f"Request rejected (HTTP {self.code})"
        return "Request rejected"


@dataclass(frozen=True)
class RequestCancelledError:
    """The request was cancelled. A distinguishable outcome, not a failure to show the user."""

    retryable: ClassVar[bool] = False

    @property
    def reason(self) -> str:
        return "Request cancelled"


TrackerError: TypeAlias = (
    NetworkError
    | UnknownHostError
    | RequestTimeoutError
    | NoConnectivityError
    | ServerError
    | AuthenticationError
    | RequestRejectedError
    | RequestCancelledError
)

TRACKER_ERROR_TYPES: tuple[type, ...] = (
    NetworkError,
    UnknownHostError,
    RequestTimeoutError,
    NoConnectivityError,
    ServerError,
    AuthenticationError,
    RequestRejectedError,
    RequestCancelledError,
)


class TrackerException(Exception):
    """Carries a TrackerError out of a tracker request."""

    def __init__(self, error: TrackerError) -> None:
        """Initialize with the error being raised."""
        super().__init__(error.reason)
        self.error = error
