"""Cancellable live times requests.

A request runs its work in its own asyncio task. ``cancel()`` may be called
from any thread: it sets a one-way flag and cancels that task on its loop.
Once the flag is set the request ends with RequestCancelledError, even if the
underlying call had already succeeded.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence, Set

import aiohttp

from bus_livetimes.adapters.tracker.error_mapper import ErrorMapper
from bus_livetimes.adapters.tracker.http_client import TrackerHttpClient
from bus_livetimes.adapters.tracker.live_times_mapper import LiveTimesMapper
from bus_livetimes.domain.models.live_times import LiveTimes
from bus_livetimes.domain.models.tracker_error import TrackerException
from bus_livetimes.domain.ports.tracker_protocol import TrackerProtocol

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (aiohttp.ClientError, OSError, asyncio.TimeoutError, ValueError)


class TrackerRequest(ABC):
    """Base class for a live times request that can be performed once and cancelled."""

    def __init__(self, error_mapper: ErrorMapper | None = None) -> None:
        """Initialize the request state."""
        self._error_mapper = error_mapper or ErrorMapper()
        self._lock = threading.Lock()
        self._cancelled = False
        self._started = False
        self._task: asyncio.Task[LiveTimes] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_cancelled(self) -> bool:
        """Whether cancel() has been called."""
        with self._lock:
            return self._cancelled

    async def perform_request(self) -> LiveTimes:
        """Perform the request.

        Returns:
            The live times snapshot.

        Raises:
            TrackerException: Carrying the TrackerError the request ended with,
                RequestCancelledError if it was cancelled.
            RuntimeError: If the request has already been performed.
        """
        with self._lock:
            if self._started:
                raise RuntimeError("A tracker request can only be performed once")
            self._started = True
            if self._cancelled:
                raise TrackerException(self._error_mapper.cancelled())
            self._loop = asyncio.get_running_loop()
            self._task = self._loop.create_task(self._execute())

        try:
            live_times = await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            # Only our own cancel() is turned into a result. Cancellation of
            # the awaiting task must keep propagating.
            if self.is_cancelled and (current is None or current.cancelling() == 0):
                raise TrackerException(self._error_mapper.cancelled()) from None
            raise

        if self.is_cancelled:
            raise TrackerException(self._error_mapper.cancelled())
        return live_times

    def cancel(self) -> None:
        """Cancel the request. Idempotent and safe to call from any thread."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            task, loop = self._task, self._loop

        if task is not None and loop is not None and not task.done() and not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)
        self._on_cancel()

    def _on_cancel(self) -> None:  # noqa: B027
        """Hook for subclasses that own further requests."""

    @abstractmethod
    async def _execute(self) -> LiveTimes:
        """Do the actual work. Raises TrackerException on failure."""


class SingleTrackerRequest(TrackerRequest):
    """One HTTP call to the tracker, for one stop or one chunk of stops."""

    def __init__(
        self,
        http_client: TrackerHttpClient,
        protocol: TrackerProtocol,
        mapper: LiveTimesMapper,
        stop_codes: Sequence[str],
        number_of_departures: int,
        services: Set[str] | None = None,
        error_mapper: ErrorMapper | None = None,
    ) -> None:
        """Initialize the request.

        Args:
            http_client: Client used to talk to the tracker.
            protocol: Wire format of the tracker.
            mapper: Mapper turning parsed payloads into LiveTimes.
            stop_codes: Stop codes covered by this single call.
            number_of_departures: Departures per service to request and keep.
            services: Services of interest, passed on to colour resolution.
            error_mapper: Mapper for failures.
        """
        super().__init__(error_mapper)
        self._http_client = http_client
        self._protocol = protocol
        self._mapper = mapper
        self._stop_codes = list(stop_codes)
        self._number_of_departures = number_of_departures
        self._services = services

    @property
    def stop_codes(self) -> list[str]:
        return list(self._stop_codes)

    async def _execute(self) -> LiveTimes:
        request = self._protocol.build_request(self._stop_codes, self._number_of_departures)

        try:
            response = await self._http_client.get(request)
        except _TRANSPORT_ERRORS as e:
            error = self._error_mapper.map_exception(e)
            logger.warning(f"Tracker request for stops {self._stop_codes} failed: {error.reason}")
            raise TrackerException(error) from e

        if not response.is_success:
            raise TrackerException(self._error_mapper.map_http_status_code(response.status))

        if not response.body.strip():
            logger.debug(f"Empty response body for stops {self._stop_codes}")
            return self._mapper.empty_live_times()

        try:
            payload = self._protocol.parse_payload(response.body, self._stop_codes)
        except ValueError as e:
            logger.warning(f"Could not decode tracker response for stops {self._stop_codes}: {e}")
            raise TrackerException(self._error_mapper.map_exception(e)) from e

        if payload.fault_code:
            logger.warning(f"Tracker reported fault {payload.fault_code} for {self._stop_codes}")
            raise TrackerException(self._error_mapper.map_fault_code(payload.fault_code))

        return self._mapper.map_to_live_times(
            payload, self._number_of_departures, services=self._services
        )


class MultiTrackerRequest(TrackerRequest):
    """Fans out to several sub-requests and merges their snapshots.

    All sub-requests must succeed. The first failure cancels the rest and is
    raised. Cancelling this request cancels every sub-request.
    """

    def __init__(
        self, requests: Sequence[TrackerRequest], error_mapper: ErrorMapper | None = None
    ) -> None:
        """Initialize with the sub-requests to run concurrently."""
        super().__init__(error_mapper)
        if not requests:
            raise ValueError("A multi-stop request needs at least one sub-request")
        self._requests = list(requests)

    @property
    def requests(self) -> list[TrackerRequest]:
        return list(self._requests)

    def _on_cancel(self) -> None:
        self._cancel_sub_requests()

    def _cancel_sub_requests(self) -> None:
        for request in self._requests:
            request.cancel()

    async def _execute(self) -> LiveTimes:
        tasks = [asyncio.create_task(request.perform_request()) for request in self._requests]

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            self._cancel_sub_requests()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        failed = [t for t in tasks if t in done and not t.cancelled() and t.exception()]
        if failed:
            self._cancel_sub_requests()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            first_error = failed[0].exception()
            logger.debug(f"Multi-stop request failed: {first_error}")
            raise first_error  # type: ignore[misc]

        return LiveTimes.merge(task.result() for task in tasks)
