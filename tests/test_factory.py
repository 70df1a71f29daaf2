"""Tests for wiring a tracker endpoint from configuration."""

import json
from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from bus_livetimes.adapters.config import AppConfig
from bus_livetimes.adapters.tracker.edinburgh import BusTrackerProtocol, StopEventsProtocol
from bus_livetimes.adapters.tracker.factory import (
    create_tracker_endpoint,
    create_tracker_protocol,
)
from bus_livetimes.domain.models import AuthenticationError, LiveTimesSuccess

SessionFactory = Callable[..., MagicMock]


def test_stop_events_protocol_needs_no_key() -> None:
    """Given the stop_events protocol, when creating it, then no API key is required."""
    protocol = create_tracker_protocol(AppConfig(protocol="stop_events", api_key=None))

    assert isinstance(protocol, StopEventsProtocol)
    assert protocol.supports_multi_stop is False


def test_bus_tracker_protocol_requires_key() -> None:
    """Given the bus_tracker protocol without a key, when creating it, then ValueError."""
    with pytest.raises(ValueError, match="API key"):
        create_tracker_protocol(AppConfig(protocol="bus_tracker", api_key=None))


def test_bus_tracker_protocol_uses_configured_limit() -> None:
    """Given a stop limit, when creating the bus tracker protocol, then it is applied."""
    protocol = create_tracker_protocol(
        AppConfig(protocol="bus_tracker", api_key="k", max_stops_per_request=3)
    )

    assert isinstance(protocol, BusTrackerProtocol)
    assert protocol.max_stops_per_request == 3


@pytest.mark.integration
@pytest.mark.asyncio
async def test_endpoint_maps_bus_tracker_response(make_session: SessionFactory) -> None:
    """Given a bus tracker response, when requesting live times, then Edinburgh rules apply."""
    body = json.dumps(
        {
            "busTimes": [
                {
                    "stopId": "36232626",
                    "stopName": "Princes Street",
                    "mnemoService": "50",
                    "timeDatas": [
                        {"minutes": 7, "nameDest": "Newhaven", "reliability": "H", "type": "N"}
                    ],
                },
                {
                    "stopId": "36232626",
                    "mnemoService": "N25",
                    "timeDatas": [
                        {"minutes": 3, "nameDest": "Riccarton", "reliability": "T", "type": "N"}
                    ],
                },
            ]
        }
    )
    session = make_session(200, body)
    endpoint = create_tracker_endpoint(
        AppConfig(protocol="bus_tracker", api_key="k", night_service_colour="#112233"), session
    )

    result = await endpoint.get_live_times("36232626", 2, services={"N25", "50"})

    assert isinstance(result, LiveTimesSuccess)
    stop = result.live_times.get_stop("36232626")
    assert stop is not None
    assert stop.stop_name == "Princes Street"
    assert [d.service_name for d in stop.departures] == ["N25", "TRAM"]
    night = stop.departures[0]
    assert night.is_estimated_time is True
    assert night.service.is_night_service is True
    assert night.service.colour == 0xFF112233
    params = session.get.call_args.kwargs["params"]
    assert params["stopId"] == "36232626"
    assert params["key"] != "k"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_endpoint_maps_invalid_key_fault(make_session: SessionFactory) -> None:
    """Given an INVALID_APP_KEY fault, when requesting live times, then AuthenticationError."""
    session = make_session(200, json.dumps({"faultcode": "INVALID_APP_KEY"}))
    endpoint = create_tracker_endpoint(AppConfig(protocol="bus_tracker", api_key="k"), session)

    result = await endpoint.get_live_times("36232626", 2)

    assert result == AuthenticationError()
