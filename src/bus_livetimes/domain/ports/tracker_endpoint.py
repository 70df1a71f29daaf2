"""Tracker endpoint port."""

from collections.abc import Sequence, Set
from typing import TYPE_CHECKING, Protocol

from bus_livetimes.domain.models.live_times_result import LiveTimesResult
from bus_livetimes.domain.models.stop_identifier import StopIdentifier

if TYPE_CHECKING:
    from bus_livetimes.domain.ports.tracker_request import TrackerRequestProtocol

StopCodes = StopIdentifier | str | Sequence[StopIdentifier | str]


class TrackerEndpoint(Protocol):
    """Port for retrieving live departure times."""

    async def get_live_times(
        self,
        stop_codes: StopCodes,
        number_of_departures: int,
        services: Set[str] | None = None,
    ) -> LiveTimesResult:
        """Get live times for one stop or a non-empty sequence of stops.

        ``number_of_departures`` limits departures per service, not in total.
        """
        ...

    def create_live_times_request(
        self,
        stop_codes: StopCodes,
        number_of_departures: int,
        services: Set[str] | None = None,
    ) -> "TrackerRequestProtocol":
        """Create a cancellable request without performing it."""
        ...

    async def execute_request(self, request: "TrackerRequestProtocol") -> LiveTimesResult:
        """Perform a request created by create_live_times_request, returning errors as values."""
        ...
