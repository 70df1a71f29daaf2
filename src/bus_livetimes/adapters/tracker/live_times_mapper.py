"""Maps authority-neutral raw payloads into the LiveTimes domain model."""

import logging
from collections import defaultdict
from collections.abc import Callable, Set
from datetime import UTC, datetime

from bus_livetimes.domain.models.departure import Departure
from bus_livetimes.domain.models.live_times import LiveTimes, Stop
from bus_livetimes.domain.models.raw_live_times import RawDepartureEntry, RawLiveTimesPayload
from bus_livetimes.domain.models.service import ServiceDescriptor, service_name_sort_key
from bus_livetimes.domain.models.stop_identifier import StopIdentifier
from bus_livetimes.domain.ports.authority_rules import AuthorityRules
from bus_livetimes.domain.ports.service_colour_source import ServiceColourSource

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class _StopAccumulator:
    """Collects the entries of one stop while a payload is mapped."""

    def __init__(self, stop_identifier: StopIdentifier) -> None:
        self.stop_identifier = stop_identifier
        self.stop_name: str | None = None
        self.is_disrupted = False
        self.entries: list[tuple[str, RawDepartureEntry]] = []


class LiveTimesMapper:
    """Converts raw payloads into LiveTimes.

    Service names are normalized before anything else looks at them, so night
    classification, colours and the per-service limit all see corrected names.
    """

    def __init__(
        self,
        rules: AuthorityRules,
        colour_source: ServiceColourSource | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the mapper.

        Args:
            rules: Rules of the authority the payloads come from.
            colour_source: Optional source of known service colours.
            clock: Supplies the receive time stamped on each snapshot.
        """
        self._rules = rules
        self._colour_source = colour_source
        self._clock = clock

    def empty_live_times(self) -> LiveTimes:
        """A snapshot with no stops, for successful responses without data."""
        return LiveTimes(stops={}, receive_time=self._clock())

    def map_to_live_times(
        self,
        raw_payload: RawLiveTimesPayload,
        number_of_departures: int,
        services: Set[str] | None = None,
    ) -> LiveTimes:
        """Map a raw payload into a LiveTimes snapshot.

        Args:
            raw_payload: Entries extracted by the authority's wire parser.
            number_of_departures: Maximum departures kept per service per stop.
            services: Services the caller is interested in. Only affects which
                services may receive a default colour. When None, colours
                are passed through without defaults.

        Returns:
            The snapshot, stamped with the mapper's clock.
        """
        receive_time = self._clock()
        accumulators: dict[str, _StopAccumulator] = {}
        payload_colours: dict[str, int] = {}
        has_global_disruption = False

        for entry in raw_payload.entries:
            has_global_disruption = has_global_disruption or entry.is_global_disruption
            accumulator = self._accumulator_for(accumulators, entry.stop_code)
            if accumulator is None:
                continue
            if entry.stop_name and not accumulator.stop_name:
                accumulator.stop_name = entry.stop_name
            accumulator.is_disrupted = accumulator.is_disrupted or entry.is_stop_disrupted

            service_name = self._rules.normalize_service_name(entry.service_name)
            if not service_name:
                logger.debug(f"Skipping entry without service name at stop {entry.stop_code}")
                continue
            if entry.colour is not None:
                payload_colours.setdefault(service_name, entry.colour)
            accumulator.entries.append((service_name, entry))

        service_names = {name for acc in accumulators.values() for name, _ in acc.entries}
        colours = self._resolve_colours(services, service_names, payload_colours)

        stops = {
            code: self._build_stop(acc, number_of_departures, colours)
            for code, acc in accumulators.items()
        }
        return LiveTimes(
            stops=stops, receive_time=receive_time, has_global_disruption=has_global_disruption
        )

    @staticmethod
    def _accumulator_for(
        accumulators: dict[str, _StopAccumulator], stop_code: str | None
    ) -> _StopAccumulator | None:
        code = (stop_code or "").strip()
        if not code:
            return None
        if code not in accumulators:
            try:
                accumulators[code] = _StopAccumulator(StopIdentifier(code))
            except ValueError:
                logger.warning(f"Ignoring departures for invalid stop code {code!r}")
                return None
        return accumulators[code]

    def _resolve_colours(
        self,
        requested_services: Set[str] | None,
        payload_services: Set[str],
        payload_colours: dict[str, int],
    ) -> dict[str, int]:
        services: set[str] | None = None
        if requested_services is not None:
            services = {
                name
                for name in (self._rules.normalize_service_name(s) for s in requested_services)
                if name
            }

        colours: dict[str, int] = {}
        lookup = payload_services if services is None else services
        # Requested services that all normalize to nothing leave nothing to look up
        if self._colour_source is not None and lookup:
            colours.update(self._colour_source.get_service_colours(set(lookup)) or {})
        colours.update(payload_colours)

        return self._rules.override_service_colours(services, colours) or {}

    def _build_stop(
        self,
        accumulator: _StopAccumulator,
        number_of_departures: int,
        colours: dict[str, int],
    ) -> Stop:
        by_service: dict[str, list[RawDepartureEntry]] = defaultdict(list)
        for service_name, entry in accumulator.entries:
            by_service[service_name].append(entry)

        departures: list[Departure] = []
        for service_name in sorted(by_service, key=service_name_sort_key):
            entries = sorted(by_service[service_name], key=lambda e: e.eta_minutes)
            descriptor = ServiceDescriptor(
                name=service_name,
                display_name=service_name,
                colour=colours.get(service_name),
                description=next(
                    (e.service_description for e in entries if e.service_description), None
                ),
                is_night_service=self._rules.is_night_service(service_name),
            )
            departures.extend(
                self._to_departure(descriptor, entry) for entry in entries[:number_of_departures]
            )

        return Stop(
            stop_identifier=accumulator.stop_identifier,
            departures=tuple(departures),
            is_disrupted=accumulator.is_disrupted,
            stop_name=accumulator.stop_name,
        )

    @staticmethod
    def _to_departure(service: ServiceDescriptor, entry: RawDepartureEntry) -> Departure:
        return Departure(
            service=service,
            destination=entry.destination,
            eta_minutes=max(0, entry.eta_minutes),
            departure_time=entry.departure_time,
            is_estimated_time=entry.is_estimated_time,
            is_diverted=entry.is_diverted,
        )
