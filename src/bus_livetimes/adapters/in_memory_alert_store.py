"""In-memory arrival alert store."""

import asyncio
import logging
from collections.abc import Iterable

from bus_livetimes.domain.models.arrival_alert import ArrivalAlertRequest
from bus_livetimes.domain.ports.alert_store import AlertStore

logger = logging.getLogger(__name__)


class InMemoryAlertStore(AlertStore):
    """Holds pending arrival alerts for the lifetime of the process."""

    def __init__(self, alerts: Iterable[ArrivalAlertRequest] = ()) -> None:
        """Initialize with the alerts to seed the store with."""
        self._alerts: list[ArrivalAlertRequest] = list(alerts)
        self._lock = asyncio.Lock()

    async def get_arrival_alerts(self) -> list[ArrivalAlertRequest]:
        async with self._lock:
            return list(self._alerts)

    async def remove_arrival_alert(self, alert: ArrivalAlertRequest) -> None:
        async with self._lock:
            if alert in self._alerts:
                self._alerts.remove(alert)
                logger.debug(f"Removed arrival alert for stop {alert.stop}")
