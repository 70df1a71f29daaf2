"""Alert notifier port."""

from typing import Protocol

from bus_livetimes.domain.models.arrival_alert import ArrivalAlertRequest
from bus_livetimes.domain.models.departure import Departure


class AlertNotifier(Protocol):
    """Port for presenting satisfied arrival alerts to the user."""

    async def dispatch_time_alert(
        self, alert: ArrivalAlertRequest, qualifying_departures: list[Departure]
    ) -> None:
        """Notify the user that an arrival alert has been satisfied."""
        ...
