"""Live times domain models: a snapshot of departures for one or more stops."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from bus_livetimes.domain.models.departure import Departure
from bus_livetimes.domain.models.service import service_name_sort_key
from bus_livetimes.domain.models.stop_identifier import StopIdentifier


def _departure_order(departure: Departure) -> tuple[int, tuple[tuple[int, int, str], ...]]:
    return departure.eta_minutes, service_name_sort_key(departure.service_name)


@dataclass(frozen=True)
class Stop:
    """Live departures for a single stop.

    Departures are always held in ascending ETA order, ties broken by natural
    service name order.
    """

    stop_identifier: StopIdentifier
    departures: tuple[Departure, ...] = ()
    is_disrupted: bool = False
    stop_name: str | None = None

    def __post_init__(self) -> None:
        """Freeze and order the departures."""
        object.__setattr__(self, "departures", tuple(sorted(self.departures, key=_departure_order)))

    @property
    def stop_code(self) -> str:
        """Code of this stop."""
        return self.stop_identifier.code

    @property
    def service_names(self) -> list[str]:
        """Distinct service names at this stop, in departure order."""
        return list(dict.fromkeys(d.service_name for d in self.departures))

    def departures_for_service(self, service_name: str) -> list[Departure]:
        """Departures of one service, earliest first."""
        return [d for d in self.departures if d.service_name == service_name]


@dataclass(frozen=True)
class LiveTimes:
    """Immutable snapshot of live departures, keyed by stop code.

    A stop code missing from ``stops`` means the endpoint returned no data for
    that stop, not that an error occurred.
    """

    stops: Mapping[str, Stop] = field(default_factory=dict)
    receive_time: datetime | None = None  # Local capture instant, the reference "now" for ETAs
    has_global_disruption: bool = False

    def __post_init__(self) -> None:
        """Validate keys and make the stop mapping read-only."""
        for code, stop in self.stops.items():
            if code != stop.stop_code:
                raise ValueError(f"Stop key {code!r} does not match stop code {stop.stop_code!r}")
        object.__setattr__(self, "stops", MappingProxyType(dict(self.stops)))

    @property
    def is_empty(self) -> bool:
        """True when no stop returned any data."""
        return not self.stops

    def get_stop(self, stop: StopIdentifier | str) -> Stop | None:
        """Get the live departures for a stop, or None if no data was returned for it."""
        code = stop.code if isinstance(stop, StopIdentifier) else stop
        return self.stops.get(code)

    @classmethod
    def merge(cls, snapshots: Iterable["LiveTimes"]) -> "LiveTimes":
        """Combine several snapshots into one.

        The merged receive time is the earliest of the inputs so that ETAs are
        never treated as fresher than the oldest data they came from.
        """
        stops: dict[str, Stop] = {}
        receive_times: list[datetime] = []
        has_global_disruption = False

        for snapshot in snapshots:
            stops.update(snapshot.stops)
            if snapshot.receive_time is not None:
                receive_times.append(snapshot.receive_time)
            has_global_disruption = has_global_disruption or snapshot.has_global_disruption

        return cls(
            stops=stops,
            receive_time=min(receive_times) if receive_times else None,
            has_global_disruption=has_global_disruption,
        )
