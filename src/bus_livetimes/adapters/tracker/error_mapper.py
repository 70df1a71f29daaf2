"""Translation of HTTP statuses, payload fault codes and transport failures into TrackerErrors."""

import asyncio
import logging
import socket

import aiohttp

from bus_livetimes.domain.models.tracker_error import (
    AuthenticationError,
    NetworkError,
    NoConnectivityError,
    RequestCancelledError,
    RequestRejectedError,
    RequestTimeoutError,
    ServerError,
    TrackerError,
    UnknownHostError,
)

logger = logging.getLogger(__name__)

_AUTHENTICATION_STATUSES = frozenset({401, 403})
_REJECTED_STATUSES = frozenset({400, 404, 405, 410, 414, 422})
HTTP_REQUEST_TIMEOUT = 408
HTTP_TOO_MANY_REQUESTS = 429

_FAULT_REASONS = {
    "PROCESSING_ERROR": "The tracker service failed to process the request",
    "SYSTEM_MAINTENANCE": "The tracker service is down for maintenance",
    "SYSTEM_OVERLOADED": "The tracker service is overloaded",
}


class ErrorMapper:
    """The single place where TrackerError instances are created."""

    @staticmethod
    def map_http_status_code(code: int) -> TrackerError:
        """Map a non-2xx HTTP status code to a tracker error. Total over all integers."""
        if 500 <= code <= 599:
            return ServerError(code=code)
        if code in _AUTHENTICATION_STATUSES:
            return AuthenticationError(code=code)
        if code in _REJECTED_STATUSES:
            return RequestRejectedError(code=code)
        if code == HTTP_REQUEST_TIMEOUT:
            return RequestTimeoutError()
        if code == HTTP_TOO_MANY_REQUESTS:
            return ServerError(code=code, detail="Rate limited by the tracker service")
        return ServerError(code=code)

    @staticmethod
    def map_fault_code(fault_code: str) -> TrackerError:
        """Map a fault code embedded in an otherwise successful response."""
        fault = fault_code.strip().upper()
        if fault == "INVALID_APP_KEY":
            return AuthenticationError()
        if fault == "INVALID_PARAMETER":
            return RequestRejectedError(detail="Invalid request parameter")
        return ServerError(detail=_FAULT_REASONS.get(fault, f"Tracker fault: {fault_code}"))

    @staticmethod
    def map_exception(exc: BaseException) -> TrackerError:
        """Map a transport or decoding failure.

        Timeouts are checked first since aiohttp's timeout errors are also
        OSErrors and ClientErrors.
        """
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, aiohttp.ServerTimeoutError)):
            return RequestTimeoutError()
        if isinstance(exc, aiohttp.ClientConnectorError) and isinstance(
            exc.os_error, socket.gaierror
        ):
            return UnknownHostError(host=exc.host)
        if isinstance(exc, socket.gaierror):
            return UnknownHostError()
        if isinstance(exc, (aiohttp.ClientError, OSError)):
            return NetworkError(cause=exc)
        if isinstance(exc, ValueError):  # JSONDecodeError and pydantic ValidationError
            return NetworkError(cause=exc)
        logger.warning(f"Unexpected exception type mapped to network error: {type(exc).__name__}")
        return NetworkError(cause=exc)

    @staticmethod
    def cancelled() -> TrackerError:
        """The outcome of a cancelled request."""
        return RequestCancelledError()

    @staticmethod
    def no_connectivity() -> TrackerError:
        """The outcome when the device reports no connectivity."""
        return NoConnectivityError()
