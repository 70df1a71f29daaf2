"""Arrival alert evaluation against a live times snapshot."""

import logging
from collections.abc import Iterable

from bus_livetimes.domain.models.arrival_alert import ArrivalAlertRequest
from bus_livetimes.domain.models.departure import Departure
from bus_livetimes.domain.models.live_times import LiveTimes
from bus_livetimes.domain.ports.authority_rules import AuthorityRules

logger = logging.getLogger(__name__)


class AlertEvaluator:
    """Decides which pending arrival alerts a snapshot satisfies.

    Pure: no I/O and no mutation of the snapshot or the alerts. An alert is
    satisfied when some departure of a matching service at its stop is due
    within ``time_trigger`` minutes (inclusive). A stop with no data never
    satisfies an alert. Disruption flags are not taken into account.

    Departures carry normalized service names, so the services of an alert
    are normalized with the same authority rules before they are compared.
    """

    def __init__(self, rules: AuthorityRules | None = None) -> None:
        """Initialize with the authority rules used to normalize alert services."""
        self._rules = rules

    def evaluate(
        self, snapshot: LiveTimes, pending: Iterable[ArrivalAlertRequest]
    ) -> set[ArrivalAlertRequest]:
        """Return the subset of pending alerts that the snapshot satisfies."""
        satisfied = {alert for alert in pending if self.qualifying_departures(snapshot, alert)}
        logger.debug(f"{len(satisfied)} arrival alert(s) satisfied")
        return satisfied

    def qualifying_departures(
        self, snapshot: LiveTimes, alert: ArrivalAlertRequest
    ) -> list[Departure]:
        """Departures at the alert's stop that satisfy it, earliest first."""
        stop = snapshot.get_stop(alert.stop)
        if stop is None:
            return []
        services = self.alert_services(alert)
        return [
            departure
            for departure in stop.departures
            if (services is None or departure.service_name in services)
            and departure.eta_minutes <= alert.time_trigger
        ]

    def alert_services(self, alert: ArrivalAlertRequest) -> frozenset[str] | None:
        """Normalized services of an alert, or None when it matches any service."""
        if alert.matches_any_service:
            return None
        names: frozenset[str] = alert.services  # type: ignore[assignment]
        if self._rules is None:
            return names
        normalized = (self._rules.normalize_service_name(name) for name in names)
        return frozenset(name for name in normalized if name)
