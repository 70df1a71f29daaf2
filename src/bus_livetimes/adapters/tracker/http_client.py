"""HTTP client for tracker requests."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiohttp

from bus_livetimes.adapters.api_request_logger import log_api_request
from bus_livetimes.domain.ports.tracker_protocol import HttpRequestSpec

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


@dataclass(frozen=True)
class HttpResponse:
    """Status and body of a completed tracker response."""

    status: int
    body: str

    @property
    def is_success(self) -> bool:
        return 200 <= self.status <= 299


class TrackerHttpClient:
    """Issues GET requests against the tracker.

    Transport exceptions are not handled here. They propagate to the tracker
    request, which maps them through the error mapper.
    """

    def __init__(self, session: "ClientSession", timeout_seconds: float = 10.0) -> None:
        """Initialize with an aiohttp session and a total per-request timeout."""
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def get(self, request: HttpRequestSpec) -> HttpResponse:
        """Perform the request and read the whole body."""
        params = dict(request.params)
        headers = dict(request.headers)
        log_api_request("GET", request.url, params=params, headers=headers)

        async with self._session.get(
            request.url, params=params, headers=headers, timeout=self._timeout
        ) as response:
            body = await response.text()
            if not 200 <= response.status <= 299:
                self._log_error_response(response, body, request.url)
            return HttpResponse(status=response.status, body=body)

    @staticmethod
    def _log_error_response(response: "ClientResponse", body: str, url: str) -> None:
        """Log error response details."""
        error_body = body[:500] if body else "(empty response body)"
        content_type = response.headers.get("Content-Type", "unknown")
        retry_after = response.headers.get("Retry-After")
        server = response.headers.get("Server", "unknown")
        extra_info_str = f" [Retry-After: {retry_after}]" if retry_after else ""
        logger.error(
            f"Tracker returned status {response.status} for {url}: "
            f"{error_body} (Content-Type: {content_type}, Server: {server}){extra_info_str}"
        )
