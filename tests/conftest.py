"""Shared test doubles for tracker requests and endpoints."""

import asyncio
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from bus_livetimes.adapters.tracker.authority_rules import EdinburghAuthorityRules
from bus_livetimes.adapters.tracker.http_client import HttpResponse
from bus_livetimes.adapters.tracker.live_times_mapper import LiveTimesMapper
from bus_livetimes.domain.models import RawDepartureEntry, RawLiveTimesPayload
from bus_livetimes.domain.ports.tracker_protocol import HttpRequestSpec

FIXED_NOW = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)

# Makes FakeHttpClient.get wait until it is cancelled
BLOCK = object()


class FakeProtocol:
    """Protocol whose bodies look like "stop:service:eta;stop:service:eta"."""

    name = "fake"

    def __init__(self, supports_multi_stop: bool = True, max_stops_per_request: int = 6) -> None:
        """Initialize with the multi-stop capability to advertise."""
        self.supports_multi_stop = supports_multi_stop
        self.max_stops_per_request = max_stops_per_request

    def build_request(
        self, stop_codes: Sequence[str], number_of_departures: int
    ) -> HttpRequestSpec:
        """Encode the stop codes in the URL."""
        return HttpRequestSpec(
            url=f"fake://{','.join(stop_codes)}", params={"nb": number_of_departures}
        )

    def parse_payload(
        self,
        body: str,
        stop_codes: Sequence[str],  # noqa: ARG002
    ) -> RawLiveTimesPayload:
        """Parse the compact body format, FAULT:<code> or raise for HTML."""
        if body.startswith("<"):
            raise ValueError("Not a live times payload")
        if body.startswith("FAULT:"):
            return RawLiveTimesPayload(fault_code=body.removeprefix("FAULT:"))
        entries = []
        for item in body.split(";"):
            stop, service, eta = item.split(":")
            entries.append(
                RawDepartureEntry(stop_code=stop, service_name=service, eta_minutes=int(eta))
            )
        return RawLiveTimesPayload(entries=tuple(entries))


class FakeHttpClient:
    """HTTP client returning canned outcomes keyed by comma-joined stop codes.

    An outcome is an HttpResponse, an exception to raise, BLOCK, or a callable
    returning one of those.
    """

    def __init__(self) -> None:
        """Initialize with no canned outcomes."""
        self.outcomes: dict[str, object] = {}
        self.requests: list[HttpRequestSpec] = []
        self.cancelled: list[str] = []
        self.started = asyncio.Event()

    def respond(self, stops: str, outcome: object) -> None:
        """Register the outcome for a request covering the given stops."""
        self.outcomes[stops] = outcome

    def respond_ok(self, stops: str, *items: str) -> None:
        """Answer with departures in the "stop:service:eta" body format."""
        self.respond(stops, HttpResponse(status=200, body=";".join(items)))

    def respond_status(self, stops: str, status: int, body: str = "") -> None:
        """Answer with the given status."""
        self.respond(stops, HttpResponse(status=status, body=body))

    def block(self, stops: str) -> None:
        """Never answer until cancelled."""
        self.respond(stops, BLOCK)

    @property
    def requested_stops(self) -> list[str]:
        return [request.url.removeprefix("fake://") for request in self.requests]

    async def get(self, request: HttpRequestSpec) -> HttpResponse:
        """Return or raise the registered outcome."""
        self.requests.append(request)
        key = request.url.removeprefix("fake://")
        outcome = self.outcomes.get(key, HttpResponse(status=200, body=""))
        self.started.set()

        if outcome is BLOCK:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled.append(key)
                raise
        if callable(outcome):
            outcome = outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        assert isinstance(outcome, HttpResponse)
        return outcome


@pytest.fixture
def http_client() -> FakeHttpClient:
    """Fake HTTP client."""
    return FakeHttpClient()


@pytest.fixture
def mapper() -> LiveTimesMapper:
    """Mapper with Edinburgh rules and a fixed clock."""
    return LiveTimesMapper(EdinburghAuthorityRules(), clock=lambda: FIXED_NOW)


@pytest.fixture
def make_protocol() -> Callable[..., FakeProtocol]:
    """Factory for fake protocols."""
    return FakeProtocol


class FakeResponse:
    """Minimal aiohttp response used as an async context manager."""

    def __init__(self, status: int, body: str, headers: dict[str, str] | None = None) -> None:
        """Initialize with status, body and headers."""
        self.status = status
        self._body = body
        self.headers = headers or {}

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


def _session(outcome: "FakeResponse | Exception") -> MagicMock:
    session = MagicMock()
    if isinstance(outcome, Exception):
        session.get.side_effect = outcome
    else:
        session.get.return_value = outcome
    return session


@pytest.fixture
def make_session() -> Callable[..., MagicMock]:
    """Factory for aiohttp session mocks answering every GET with the given outcome.

    The outcome is either an exception to raise or (status, body[, headers]).
    """

    def factory(
        status_or_error: int | Exception, body: str = "", headers: dict[str, str] | None = None
    ) -> MagicMock:
        if isinstance(status_or_error, Exception):
            return _session(status_or_error)
        return _session(FakeResponse(status_or_error, body, headers))

    return factory
