"""Legacy Edinburgh "bus tracker" JSON web service.

API: ``ws.php?module=json&function=getBusTimes&key=...&nb=N&stopId=...``.
Up to six stops can be queried in one call with ``stopId1`` .. ``stopId6``.
The API key is sent hashed with the current hour in UK time.
"""

import hashlib
import logging
import random
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from bus_livetimes.domain.models.raw_live_times import RawDepartureEntry, RawLiveTimesPayload
from bus_livetimes.domain.ports.tracker_protocol import HttpRequestSpec

logger = logging.getLogger(__name__)

DEFAULT_BUS_TRACKER_URL = "http://www.mybustracker.co.uk/ws.php"
MAX_STOPS_PER_REQUEST = 6

RELIABILITY_ESTIMATED = "T"
RELIABILITY_DIVERTED = "V"

_UK_TIME_ZONE = ZoneInfo("Europe/London")


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BusTimeData(_WireModel):
    """One departure of a service."""

    minutes: int
    name_dest: str | None = Field(default=None, alias="nameDest")
    reliability: str | None = None
    type: str | None = None
    terminus: str | None = None
    journey_id: str | None = Field(default=None, alias="journeyId")


class BusTime(_WireModel):
    """The departures of one service at one stop."""

    stop_id: str | None = Field(default=None, alias="stopId")
    stop_name: str | None = Field(default=None, alias="stopName")
    mnemo_service: str | None = Field(default=None, alias="mnemoService")
    operator_id: str | None = Field(default=None, alias="operatorId")
    name_service: str | None = Field(default=None, alias="nameService")
    bus_stop_disruption: bool = Field(default=False, alias="busStopDisruption")
    global_disruption: bool = Field(default=False, alias="globalDisruption")
    service_disruption: bool = Field(default=False, alias="serviceDisruption")
    service_diversion: bool = Field(default=False, alias="serviceDiversion")
    time_datas: list[BusTimeData] = Field(default_factory=list, alias="timeDatas")


class BusTimesResponse(_WireModel):
    """Top level of a getBusTimes response."""

    fault_code: str | None = Field(default=None, alias="faultcode")
    bus_times: list[BusTime] = Field(default_factory=list, alias="busTimes")


def _utc_now() -> datetime:
    return datetime.now(UTC)


def hash_api_key(api_key: str, now: datetime) -> str:
    """Hash the API key with the current hour in UK time, as the service expects."""
    uk_hour = now.astimezone(_UK_TIME_ZONE).strftime("%Y%m%d%H")
    return hashlib.md5(f"{api_key}{uk_hour}".encode()).hexdigest()  # noqa: S324


class BusTrackerProtocol:
    """Request building and parsing for the legacy bus tracker service."""

    name = "bus_tracker"
    supports_multi_stop = True

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BUS_TRACKER_URL,
        max_stops_per_request: int = MAX_STOPS_PER_REQUEST,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the protocol.

        Args:
            api_key: Unhashed API key issued for the bus tracker service.
            base_url: URL of ws.php.
            max_stops_per_request: Stops per call, capped at the service maximum of 6.
            clock: Supplies the time used to hash the API key.
        """
        self._api_key = api_key
        self._base_url = base_url
        self.max_stops_per_request = max(1, min(max_stops_per_request, MAX_STOPS_PER_REQUEST))
        self._clock = clock

    def build_request(
        self, stop_codes: Sequence[str], number_of_departures: int
    ) -> HttpRequestSpec:
        if not stop_codes:
            raise ValueError("At least one stop code is required")
        if len(stop_codes) > self.max_stops_per_request:
            raise ValueError(
                f"At most {self.max_stops_per_request} stops per request, got {len(stop_codes)}"
            )

        params: dict[str, str | int] = {
            "module": "json",
            "key": hash_api_key(self._api_key, self._clock()),
            "function": "getBusTimes",
            "nb": number_of_departures,
        }
        if len(stop_codes) == 1:
            params["stopId"] = stop_codes[0]
        else:
            for index, code in enumerate(stop_codes, start=1):
                params[f"stopId{index}"] = code
        # Stops intermediate caches from serving stale times.
        params["random"] = random.randint(0, 2**31 - 1)  # noqa: S311

        return HttpRequestSpec(url=self._base_url, params=params)

    def parse_payload(
        self,
        body: str,
        stop_codes: Sequence[str],  # noqa: ARG002
    ) -> RawLiveTimesPayload:
        response = BusTimesResponse.model_validate_json(body)
        if response.fault_code:
            return RawLiveTimesPayload(fault_code=response.fault_code)

        entries: list[RawDepartureEntry] = []
        for bus_time in response.bus_times:
            if not bus_time.stop_id:
                logger.debug(f"Skipping service {bus_time.mnemo_service} without a stop code")
                continue
            # A service without departures still carries the stop name and disruption flags.
            entries.extend(self._parse_bus_time(bus_time) or [self._stop_only_entry(bus_time)])

        return RawLiveTimesPayload(entries=tuple(entries))

    @staticmethod
    def _parse_bus_time(bus_time: BusTime) -> list[RawDepartureEntry]:
        entries = []
        for data in bus_time.time_datas:
            if not data.reliability or not data.type:
                continue
            reliability = data.reliability[0].upper()
            entries.append(
                RawDepartureEntry(
                    stop_code=bus_time.stop_id,
                    service_name=bus_time.mnemo_service,
                    eta_minutes=data.minutes,
                    destination=data.name_dest,
                    is_estimated_time=reliability == RELIABILITY_ESTIMATED,
                    is_diverted=bus_time.service_diversion or reliability == RELIABILITY_DIVERTED,
                    service_description=bus_time.name_service,
                    stop_name=bus_time.stop_name,
                    is_stop_disrupted=bus_time.bus_stop_disruption,
                    is_global_disruption=bus_time.global_disruption,
                )
            )
        return entries

    @staticmethod
    def _stop_only_entry(bus_time: BusTime) -> RawDepartureEntry:
        return RawDepartureEntry(
            stop_code=bus_time.stop_id,
            service_name=None,
            eta_minutes=0,
            stop_name=bus_time.stop_name,
            is_stop_disrupted=bus_time.bus_stop_disruption,
            is_global_disruption=bus_time.global_disruption,
        )
