"""Authority-neutral form of a live times payload, before normalization."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RawDepartureEntry:
    """One departure exactly as an endpoint reported it.

    ``service_name`` is the raw, uncorrected identifier. ``colour`` is only set
    when the payload itself supplied one.
    """

    stop_code: str | None
    service_name: str | None
    eta_minutes: int
    destination: str | None = None
    departure_time: datetime | None = None
    is_estimated_time: bool = False
    is_diverted: bool = False
    colour: int | None = None
    service_description: str | None = None
    stop_name: str | None = None
    is_stop_disrupted: bool = False
    is_global_disruption: bool = False


@dataclass(frozen=True)
class RawLiveTimesPayload:
    """Everything a wire parser extracted from one response."""

    entries: tuple[RawDepartureEntry, ...] = ()
    fault_code: str | None = None  # Error reported inside a successful HTTP response
