"""Arrival alert domain model."""

from dataclasses import dataclass
from enum import Enum

from bus_livetimes.domain.models.stop_identifier import StopIdentifier


class AnyService(Enum):
    """Sentinel for an alert that matches every service at its stop."""

    ANY = "any"


ANY_SERVICE = AnyService.ANY


@dataclass(frozen=True)
class ArrivalAlertRequest:
    """Notify the user when a chosen service is within ``time_trigger`` minutes of a stop."""

    stop: StopIdentifier
    services: frozenset[str] | AnyService
    time_trigger: int  # Minutes
    alert_id: int | None = None

    def __post_init__(self) -> None:
        """Validate services and trigger."""
        if not isinstance(self.services, AnyService):
            services = frozenset(s for s in self.services if s)
            if not services:
                raise ValueError("An arrival alert needs at least one service (or ANY_SERVICE)")
            object.__setattr__(self, "services", services)
        if self.time_trigger < 0:
            raise ValueError(f"time_trigger must not be negative, got {self.time_trigger}")

    @property
    def matches_any_service(self) -> bool:
        """True when the alert is not constrained to specific services."""
        return self.services is ANY_SERVICE

    def matches_service(self, service_name: str) -> bool:
        """Check whether a service name is covered by this alert."""
        return self.matches_any_service or service_name in self.services  # type: ignore[operator]
