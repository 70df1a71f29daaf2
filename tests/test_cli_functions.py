"""Tests for CLI helper functions."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest

from bus_livetimes import cli
from bus_livetimes.cli import format_live_times, live_times_to_dict
from bus_livetimes.domain.models import (
    Departure,
    LiveTimes,
    ServiceDescriptor,
    Stop,
    StopIdentifier,
)

RECEIVED = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


def _live_times(has_global_disruption: bool = False) -> LiveTimes:
    stop = Stop(
        StopIdentifier("36232626"),
        departures=(
            Departure(
                service=ServiceDescriptor(name="N25", colour=0xFF000000, is_night_service=True),
                destination="Riccarton",
                eta_minutes=12,
                is_estimated_time=True,
            ),
            Departure(
                service=ServiceDescriptor(name="3", colour=0xFFDA5F2D),
                destination="Clovenstone",
                eta_minutes=2,
            ),
        ),
        is_disrupted=True,
        stop_name="Princes Street",
    )
    empty = Stop(StopIdentifier("36237526"))
    return LiveTimes(
        stops={stop.stop_code: stop, empty.stop_code: empty},
        receive_time=RECEIVED,
        has_global_disruption=has_global_disruption,
    )


def test_live_times_to_dict_contains_departures() -> None:
    """Given a snapshot, when converting to a dict, then stops and departures are serialized."""
    data = live_times_to_dict(_live_times())

    assert data["receive_time"] == "2026-03-14T12:00:00+00:00"
    stop = data["stops"]["36232626"]
    assert stop["stop_name"] == "Princes Street"
    assert stop["is_disrupted"] is True
    assert [d["service"] for d in stop["departures"]] == ["3", "N25"]
    assert stop["departures"][0]["colour"] == "#FFDA5F2D"
    assert stop["departures"][1]["is_night_service"] is True
    assert data["stops"]["36237526"]["departures"] == []


def test_live_times_to_dict_handles_missing_colour_and_time() -> None:
    """Given a departure without colour, when converting, then colour is None."""
    stop = Stop(
        StopIdentifier("100"),
        departures=(
            Departure(service=ServiceDescriptor(name="3"), destination=None, eta_minutes=0),
        ),
    )

    data = live_times_to_dict(LiveTimes(stops={"100": stop}))

    assert data["receive_time"] is None
    assert data["stops"]["100"]["departures"][0]["colour"] is None


def test_format_live_times_lists_departures() -> None:
    """Given a snapshot, when formatting, then each departure gets a line in ETA order."""
    lines = format_live_times(_live_times())

    assert lines[0] == "Princes Street (36232626) [disrupted]:"
    assert lines[1].split() == ["3", "Clovenstone", "2", "min"]
    assert lines[2].split() == ["N25", "Riccarton", "12*", "min"]
    assert lines[3] == "36237526:"
    assert lines[4] == "  No departures"


def test_format_live_times_reports_global_disruption() -> None:
    """Given a global disruption, when formatting, then it is reported first."""
    lines = format_live_times(_live_times(has_global_disruption=True))

    assert lines[0] == "Service disruption in effect"


@pytest.mark.asyncio
@pytest.mark.parametrize(("argv", "expected"), [(["-n", "0"], 0), ([], 4)])
async def test_times_command_passes_departure_count(
    monkeypatch: pytest.MonkeyPatch, argv: list[str], expected: int
) -> None:
    """Given -n 0 or no -n, when running times, then 0 is passed on and absent uses config."""
    monkeypatch.delenv("BUS_LIVETIMES_NUMBER_OF_DEPARTURES", raising=False)
    monkeypatch.setattr("sys.argv", ["bus-livetimes", "times", "36232626", *argv])

    with patch.object(cli, "show_live_times", new_callable=AsyncMock, return_value=0) as mock_show:
        with pytest.raises(SystemExit):
            await cli.main()

    assert mock_show.await_args.args[2] == expected


@pytest.mark.asyncio
async def test_times_command_rejects_zero_departures(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Given -n 0, when running times, then the command fails before any request."""
    monkeypatch.setattr("sys.argv", ["bus-livetimes", "times", "36232626", "-n", "0"])
    monkeypatch.setenv("BUS_LIVETIMES_API_KEY", "key")

    with pytest.raises(SystemExit) as exc_info:
        await cli.main()

    assert exc_info.value.code == 1
    assert "number_of_departures must be positive" in capsys.readouterr().err
