"""Domain layer - core business logic and models."""

from bus_livetimes.domain.models import (
    ANY_SERVICE,
    ArrivalAlertRequest,
    Departure,
    LiveTimes,
    ServiceDescriptor,
    Stop,
    StopIdentifier,
)
from bus_livetimes.domain.ports import (
    AlertNotifier,
    AlertStore,
    AuthorityRules,
    TrackerEndpoint,
)

__all__ = [
    "ANY_SERVICE",
    "AlertNotifier",
    "AlertStore",
    "ArrivalAlertRequest",
    "AuthorityRules",
    "Departure",
    "LiveTimes",
    "ServiceDescriptor",
    "Stop",
    "StopIdentifier",
    "TrackerEndpoint",
]
