"""Tracker protocol port: the wire format of one authority's live times service."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from bus_livetimes.domain.models.raw_live_times import RawLiveTimesPayload


@dataclass(frozen=True)
class HttpRequestSpec:
    """An HTTP GET to issue against the tracker."""

    url: str
    params: Mapping[str, str | int] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)


class TrackerProtocol(Protocol):
    """Builds requests for, and parses responses from, a remote tracking service."""

    name: str
    supports_multi_stop: bool  # Whether one call can ask for several stops
    max_stops_per_request: int

    def build_request(
        self, stop_codes: Sequence[str], number_of_departures: int
    ) -> HttpRequestSpec:
        """Build the HTTP request for the given stops."""
        ...

    def parse_payload(self, body: str, stop_codes: Sequence[str]) -> RawLiveTimesPayload:
        """Parse a non-empty response body.

        Raises ValueError (including pydantic.ValidationError) for undecodable payloads.
        """
        ...
