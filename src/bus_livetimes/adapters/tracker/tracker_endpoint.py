"""Tracker endpoint adapter: live times for one or more stops."""

import logging
from collections.abc import Sequence, Set

from bus_livetimes.adapters.tracker.error_mapper import ErrorMapper
from bus_livetimes.adapters.tracker.http_client import TrackerHttpClient
from bus_livetimes.adapters.tracker.live_times_mapper import LiveTimesMapper
from bus_livetimes.adapters.tracker.tracker_request import (
    MultiTrackerRequest,
    SingleTrackerRequest,
    TrackerRequest,
)
from bus_livetimes.domain.models.live_times_result import LiveTimesResult, LiveTimesSuccess
from bus_livetimes.domain.models.stop_identifier import StopIdentifier, to_stop_identifier
from bus_livetimes.domain.models.tracker_error import TrackerException
from bus_livetimes.domain.ports.connectivity_checker import ConnectivityChecker
from bus_livetimes.domain.ports.tracker_endpoint import StopCodes, TrackerEndpoint
from bus_livetimes.domain.ports.tracker_protocol import TrackerProtocol

logger = logging.getLogger(__name__)


def _normalize_stop_codes(stop_codes: StopCodes) -> list[str]:
    """Validate stop codes and drop duplicates, keeping the caller's order."""
    if isinstance(stop_codes, (str, StopIdentifier)):
        stop_codes = [stop_codes]
    codes = [to_stop_identifier(stop).code for stop in stop_codes]
    if not codes:
        raise ValueError("At least one stop code is required")
    return list(dict.fromkeys(codes))


def _chunk(codes: Sequence[str], size: int) -> list[list[str]]:
    return [list(codes[i : i + size]) for i in range(0, len(codes), size)]


class LiveTimesTrackerEndpoint(TrackerEndpoint):
    """Retrieves live times from a remote tracker.

    A single stop is one HTTP call. Several stops are combined into as few
    calls as the protocol allows, all run concurrently. Failures are returned
    as TrackerError values; invalid arguments raise ValueError.
    """

    def __init__(
        self,
        http_client: TrackerHttpClient,
        protocol: TrackerProtocol,
        mapper: LiveTimesMapper,
        connectivity_checker: ConnectivityChecker | None = None,
        error_mapper: ErrorMapper | None = None,
    ) -> None:
        """Initialize the endpoint.

        Args:
            http_client: Client used to talk to the tracker.
            protocol: Wire format of the tracker.
            mapper: Mapper turning parsed payloads into LiveTimes.
            connectivity_checker: Optional connectivity sensor. When it reports
                no connectivity, no call is attempted.
            error_mapper: Mapper for failures.
        """
        self._http_client = http_client
        self._protocol = protocol
        self._mapper = mapper
        self._connectivity_checker = connectivity_checker
        self._error_mapper = error_mapper or ErrorMapper()

    async def get_live_times(
        self,
        stop_codes: StopCodes,
        number_of_departures: int,
        services: Set[str] | None = None,
    ) -> LiveTimesResult:
        """Get live times for one stop or an ordered, non-empty sequence of stops.

        Args:
            stop_codes: A stop code or StopIdentifier, or a sequence of them.
            number_of_departures: Maximum departures per service, must be positive.
            services: Services of interest, used for colour resolution only.

        Returns:
            LiveTimesSuccess with all stops merged, or the first TrackerError.

        Raises:
            ValueError: If number_of_departures is not positive, the sequence
                is empty or a stop code is invalid.
        """
        request = self.create_live_times_request(stop_codes, number_of_departures, services)
        return await self.execute_request(request)

    async def execute_request(self, request: TrackerRequest) -> LiveTimesResult:
        """Perform a request, returning TrackerErrors as values.

        Nothing is sent when the connectivity checker reports no connectivity.
        """
        if self._connectivity_checker and not self._connectivity_checker.has_internet_connectivity:
            logger.info("No internet connectivity, not requesting live times")
            return self._error_mapper.no_connectivity()

        try:
            live_times = await request.perform_request()
        except TrackerException as e:
            logger.info(f"Live times request failed: {e.error.reason}")
            return e.error

        return LiveTimesSuccess(live_times=live_times)

    def create_live_times_request(
        self,
        stop_codes: StopCodes,
        number_of_departures: int,
        services: Set[str] | None = None,
    ) -> TrackerRequest:
        """Create a cancellable request without performing it.

        Raises:
            ValueError: On the same invalid arguments as get_live_times.
        """
        if number_of_departures <= 0:
            raise ValueError(f"number_of_departures must be positive, got {number_of_departures}")
        codes = _normalize_stop_codes(stop_codes)
        frozen_services = frozenset(services) if services is not None else None

        if self._protocol.supports_multi_stop:
            chunks = _chunk(codes, self._protocol.max_stops_per_request)
        else:
            chunks = [[code] for code in codes]

        requests: list[TrackerRequest] = [
            SingleTrackerRequest(
                http_client=self._http_client,
                protocol=self._protocol,
                mapper=self._mapper,
                stop_codes=chunk,
                number_of_departures=number_of_departures,
                services=frozen_services,
                error_mapper=self._error_mapper,
            )
            for chunk in chunks
        ]

        if len(requests) == 1:
            return requests[0]
        logger.debug(f"Splitting {len(codes)} stops into {len(requests)} concurrent requests")
        return MultiTrackerRequest(requests, error_mapper=self._error_mapper)
