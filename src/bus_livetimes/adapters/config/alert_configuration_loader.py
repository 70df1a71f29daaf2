"""Arrival alert configuration loader."""

import logging
from typing import Any

from bus_livetimes.adapters.config.app_config import AppConfig
from bus_livetimes.domain.models.arrival_alert import ANY_SERVICE, AnyService, ArrivalAlertRequest
from bus_livetimes.domain.models.stop_identifier import StopIdentifier

logger = logging.getLogger(__name__)


class AlertConfigurationLoader:
    """Loads arrival alerts from the [[alerts]] section of the app config.

    Each entry has ``stop_code``, ``time_trigger`` and optionally ``services``
    (a list of service names). A missing or empty ``services`` list, or the
    string ``"any"``, matches every service.
    """

    @staticmethod
    def load(config: AppConfig) -> list[ArrivalAlertRequest]:
        """Load arrival alerts from app config. Invalid entries are skipped with a warning."""
        alerts: list[ArrivalAlertRequest] = []

        for index, alert_data in enumerate(config.get_alerts_config()):
            try:
                alerts.append(AlertConfigurationLoader.parse_alert(alert_data, alert_id=index + 1))
            except (ValueError, TypeError, KeyError) as e:
                logger.warning(f"Skipping invalid alert #{index + 1} ({alert_data}): {e}")

        return alerts

    @staticmethod
    def parse_alert(alert_data: dict[str, Any], alert_id: int | None = None) -> ArrivalAlertRequest:
        """Build one alert from its TOML table.

        Raises:
            KeyError: If stop_code or time_trigger is missing.
            ValueError: If a value is invalid.
        """
        stop = StopIdentifier(str(alert_data["stop_code"]))
        time_trigger = int(alert_data["time_trigger"])

        raw_services = alert_data.get("services")
        services: frozenset[str] | AnyService
        if raw_services is None or raw_services == [] or raw_services == "any":
            services = ANY_SERVICE
        elif isinstance(raw_services, list):
            services = frozenset(str(s) for s in raw_services)
        else:
            raise ValueError("services must be a list of service names or 'any'")

        return ArrivalAlertRequest(
            stop=stop,
            services=services,
            time_trigger=time_trigger,
            alert_id=alert_data.get("id", alert_id),
        )
