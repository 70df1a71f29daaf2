"""Alert notifier that reports satisfied alerts through logging."""

import logging

from bus_livetimes.domain.models.arrival_alert import ArrivalAlertRequest
from bus_livetimes.domain.models.departure import Departure
from bus_livetimes.domain.ports.alert_notifier import AlertNotifier

logger = logging.getLogger(__name__)


def format_alert_message(alert: ArrivalAlertRequest, departures: list[Departure]) -> str:
    """Describe a satisfied alert, e.g. "Stop 36232626: 3 to Ocean Terminal in 2 min"."""
    if not departures:
        return f"Stop {alert.stop}: alert satisfied"
    parts = []
    for departure in departures:
        destination = f" to {departure.destination}" if departure.destination else ""
        parts.append(f"{departure.service_name}{destination} in {departure.eta_minutes} min")
    return f"Stop {alert.stop}: " + ", ".join(parts)


class LoggingAlertNotifier(AlertNotifier):
    """Logs each satisfied alert at INFO level."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        """Initialize with the logger to write to (this module's by default)."""
        self._logger = target or logger

    async def dispatch_time_alert(
        self, alert: ArrivalAlertRequest, qualifying_departures: list[Departure]
    ) -> None:
        self._logger.info(f"Arrival alert: {format_alert_message(alert, qualifying_departures)}")
