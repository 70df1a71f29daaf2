"""Domain models for live departure times and arrival alerts."""

from bus_livetimes.domain.models.arrival_alert import ANY_SERVICE, AnyService, ArrivalAlertRequest
from bus_livetimes.domain.models.departure import Departure
from bus_livetimes.domain.models.live_times import LiveTimes, Stop
from bus_livetimes.domain.models.live_times_result import (
    LiveTimesResult,
    LiveTimesSuccess,
    is_cancellation,
    is_error,
)
from bus_livetimes.domain.models.raw_live_times import RawDepartureEntry, RawLiveTimesPayload
from bus_livetimes.domain.models.service import ServiceDescriptor, service_name_sort_key
from bus_livetimes.domain.models.stop_identifier import StopIdentifier, to_stop_identifier
from bus_livetimes.domain.models.tracker_error import (
    AuthenticationError,
    NetworkError,
    NoConnectivityError,
    RequestCancelledError,
    RequestRejectedError,
    RequestTimeoutError,
    ServerError,
    TrackerError,
    TrackerException,
    UnknownHostError,
)

__all__ = [
    "ANY_SERVICE",
    "AnyService",
    "ArrivalAlertRequest",
    "AuthenticationError",
    "Departure",
    "LiveTimes",
    "LiveTimesResult",
    "LiveTimesSuccess",
    "NetworkError",
    "NoConnectivityError",
    "RawDepartureEntry",
    "RawLiveTimesPayload",
    "RequestCancelledError",
    "RequestRejectedError",
    "RequestTimeoutError",
    "ServerError",
    "ServiceDescriptor",
    "Stop",
    "StopIdentifier",
    "TrackerError",
    "TrackerException",
    "UnknownHostError",
    "is_cancellation",
    "is_error",
    "service_name_sort_key",
    "to_stop_identifier",
]
