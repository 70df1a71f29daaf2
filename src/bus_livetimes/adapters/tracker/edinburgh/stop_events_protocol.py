"""Edinburgh open data API stop events (``/stops/{code}/events``).

Only one stop can be queried per call. Departure times are given either as
seconds after the server time or as an ``HH:MM`` clock time. When no
departure time is given, the timetabled time is used and the departure is
marked as estimated.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bus_livetimes.domain.models.raw_live_times import RawDepartureEntry, RawLiveTimesPayload
from bus_livetimes.domain.ports.tracker_protocol import HttpRequestSpec

logger = logging.getLogger(__name__)

DEFAULT_OPEN_API_URL = "https://tfe-opendata.com/api/v1"

# The limit counts events at the stop, not per service. The mapper trims per service.
EVENTS_PER_DEPARTURE = 20


def _parse_clock_time(value: str) -> time:
    try:
        return time.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Invalid clock time {value!r}") from e


class StopEvent(BaseModel):
    """One arrival or departure at the stop."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    public_service_name: str | None = Field(default=None, alias="publicservicename")
    destination: str | None = None
    scheduled_departure_time: time | None = Field(default=None, alias="scheduledeparturetime")
    departure_time: int | time | None = Field(default=None, alias="departuretime")

    @field_validator("scheduled_departure_time", mode="before")
    @classmethod
    def parse_scheduled_time(cls, v: object) -> object:
        """Scheduled times are always HH:MM strings."""
        if isinstance(v, str):
            return _parse_clock_time(v)
        return v

    @field_validator("departure_time", mode="before")
    @classmethod
    def parse_departure_time(cls, v: object) -> object:
        """Departure times are seconds (int) or an HH:MM string."""
        if isinstance(v, bool):
            raise ValueError("departuretime must be seconds or HH:MM")
        if isinstance(v, str):
            return _parse_clock_time(v)
        return v


class StopEventsResponse(BaseModel):
    """Top level of a stop events response."""

    model_config = ConfigDict(extra="ignore")

    time: datetime
    events: list[StopEvent] = Field(default_factory=list)


def next_occurrence_after(clock_time: time, instant: datetime, time_zone: tzinfo) -> datetime:
    """Find when a local clock time next occurs at or after an instant, wrapping to the next day."""
    local_instant = instant.astimezone(time_zone)
    candidate = datetime.combine(local_instant.date(), clock_time, tzinfo=time_zone)
    if candidate < local_instant:
        candidate = datetime.combine(
            local_instant.date() + timedelta(days=1), clock_time, tzinfo=time_zone
        )
    return candidate


class StopEventsProtocol:
    """Request building and parsing for the open data stop events API."""

    name = "stop_events"
    supports_multi_stop = False
    max_stops_per_request = 1

    def __init__(
        self,
        base_url: str = DEFAULT_OPEN_API_URL,
        api_key: str | None = None,
        time_zone: str = "Europe/London",
    ) -> None:
        """Initialize the protocol.

        Args:
            base_url: Base URL of the API, without trailing slash.
            api_key: Optional key sent as a bearer token.
            time_zone: Zone clock times in responses are expressed in.
        """
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._time_zone = ZoneInfo(time_zone)

    def build_request(
        self, stop_codes: Sequence[str], number_of_departures: int
    ) -> HttpRequestSpec:
        if len(stop_codes) != 1:
            raise ValueError(f"Stop events are requested one stop at a time, got {len(stop_codes)}")

        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        return HttpRequestSpec(
            url=f"{self._base_url}/stops/{stop_codes[0]}/events",
            params={"limit": number_of_departures * EVENTS_PER_DEPARTURE},
            headers=headers,
        )

    def parse_payload(self, body: str, stop_codes: Sequence[str]) -> RawLiveTimesPayload:
        response = StopEventsResponse.model_validate_json(body)
        server_time = response.time
        if server_time.tzinfo is None:
            server_time = server_time.replace(tzinfo=self._time_zone)

        stop_code = stop_codes[0] if stop_codes else None
        entries = []
        for event in response.events:
            entry = self._to_entry(event, stop_code, server_time)
            if entry is not None:
                entries.append(entry)

        return RawLiveTimesPayload(entries=tuple(entries))

    def _to_entry(
        self, event: StopEvent, stop_code: str | None, server_time: datetime
    ) -> RawDepartureEntry | None:
        if not event.public_service_name:
            return None

        is_estimated_time = False
        if isinstance(event.departure_time, int):
            departure_time = server_time + timedelta(seconds=event.departure_time)
        elif isinstance(event.departure_time, time):
            departure_time = next_occurrence_after(
                event.departure_time, server_time, self._time_zone
            )
        elif event.scheduled_departure_time is not None:
            is_estimated_time = True
            departure_time = next_occurrence_after(
                event.scheduled_departure_time, server_time, self._time_zone
            )
        else:
            logger.debug(f"Dropping {event.public_service_name} event without any departure time")
            return None

        return RawDepartureEntry(
            stop_code=stop_code,
            service_name=event.public_service_name,
            eta_minutes=int((departure_time - server_time).total_seconds() / 60),
            destination=event.destination,
            departure_time=departure_time,
            is_estimated_time=is_estimated_time,
        )
