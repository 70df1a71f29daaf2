"""Tracker request port."""

from typing import Protocol

from bus_livetimes.domain.models.live_times import LiveTimes


class TrackerRequestProtocol(Protocol):
    """A cancellable live times request."""

    async def perform_request(self) -> LiveTimes:
        """Perform the request.

        Raises TrackerException carrying the TrackerError on failure or cancellation.
        """
        ...

    def cancel(self) -> None:
        """Cancel the request. Idempotent and safe to call from any thread."""
        ...
