"""Alert store port (the settings store holding arrival alerts)."""

from typing import Protocol

from bus_livetimes.domain.models.arrival_alert import ArrivalAlertRequest


class AlertStore(Protocol):
    """Port for reading and removing pending arrival alerts."""

    async def get_arrival_alerts(self) -> list[ArrivalAlertRequest]:
        """Get all pending arrival alerts."""
        ...

    async def remove_arrival_alert(self, alert: ArrivalAlertRequest) -> None:
        """Remove an alert once it has been satisfied and notified."""
        ...
