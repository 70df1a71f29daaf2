"""Arrival alert checker: one check cycle of pending alerts against live times."""

import logging
import threading

from bus_livetimes.application.services.alert_evaluator import AlertEvaluator
from bus_livetimes.domain.models.arrival_alert import ArrivalAlertRequest
from bus_livetimes.domain.models.live_times_result import LiveTimesSuccess, is_cancellation
from bus_livetimes.domain.ports.alert_notifier import AlertNotifier
from bus_livetimes.domain.ports.alert_store import AlertStore
from bus_livetimes.domain.ports.tracker_endpoint import TrackerEndpoint
from bus_livetimes.domain.ports.tracker_request import TrackerRequestProtocol

logger = logging.getLogger(__name__)

# Only the next departure of each service matters for an arrival alert
DEPARTURES_PER_SERVICE = 1


class ArrivalAlertChecker:
    """Checks pending arrival alerts once.

    Scheduling repeated checks is up to the caller. A failed or cancelled
    check leaves every alert in place for the next one.
    """

    def __init__(
        self,
        tracker_endpoint: TrackerEndpoint,
        alert_store: AlertStore,
        notifier: AlertNotifier,
        evaluator: AlertEvaluator | None = None,
    ) -> None:
        """Initialize with the endpoint, alert store and notifier to use."""
        self._tracker_endpoint = tracker_endpoint
        self._alert_store = alert_store
        self._notifier = notifier
        self._evaluator = evaluator or AlertEvaluator()
        self._lock = threading.Lock()
        self._request: TrackerRequestProtocol | None = None
        self._cancelled = False

    async def check_alerts(self) -> list[ArrivalAlertRequest]:
        """Run one check.

        Returns:
            The alerts that were satisfied, notified and removed, in store order.
        """
        with self._lock:
            self._cancelled = False

        alerts = await self._alert_store.get_arrival_alerts()
        if not alerts:
            logger.debug("No pending arrival alerts")
            return []

        stop_codes = list(dict.fromkeys(alert.stop.code for alert in alerts))
        services = self._services_of_interest(alerts)
        request = self._tracker_endpoint.create_live_times_request(
            stop_codes, DEPARTURES_PER_SERVICE, services
        )
        with self._lock:
            self._request = request
            cancelled = self._cancelled
        # cancel() arrived before the request existed
        if cancelled:
            request.cancel()
        try:
            result = await self._tracker_endpoint.execute_request(request)
        finally:
            with self._lock:
                self._request = None

        if not isinstance(result, LiveTimesSuccess):
            if is_cancellation(result):
                logger.info("Arrival alert check cancelled")
            else:
                logger.warning(f"Could not check arrival alerts: {result.reason}")
            return []

        satisfied = self._evaluator.evaluate(result.live_times, alerts)
        notified: list[ArrivalAlertRequest] = []
        for alert in alerts:
            if alert not in satisfied:
                continue
            departures = self._evaluator.qualifying_departures(result.live_times, alert)
            await self._notifier.dispatch_time_alert(alert, departures)
            await self._alert_store.remove_arrival_alert(alert)
            notified.append(alert)

        logger.info(f"Checked {len(alerts)} arrival alert(s), {len(notified)} satisfied")
        return notified

    def cancel(self) -> None:
        """Cancel the check in flight, including a request it has not created yet."""
        with self._lock:
            self._cancelled = True
            request = self._request
        if request is not None:
            request.cancel()

    def _services_of_interest(self, alerts: list[ArrivalAlertRequest]) -> set[str] | None:
        services: set[str] = set()
        for alert in alerts:
            alert_services = self._evaluator.alert_services(alert)
            if alert_services is None:
                return None
            services.update(alert_services)
        return services
