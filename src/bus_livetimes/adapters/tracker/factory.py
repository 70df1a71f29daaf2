"""Builds a tracker endpoint from configuration."""

import logging
from typing import TYPE_CHECKING

from bus_livetimes.adapters.tracker.authority_rules import rules_for_authority
from bus_livetimes.adapters.tracker.edinburgh.bus_tracker_protocol import BusTrackerProtocol
from bus_livetimes.adapters.tracker.edinburgh.stop_events_protocol import StopEventsProtocol
from bus_livetimes.adapters.tracker.http_client import TrackerHttpClient
from bus_livetimes.adapters.tracker.live_times_mapper import LiveTimesMapper
from bus_livetimes.adapters.tracker.tracker_endpoint import LiveTimesTrackerEndpoint
from bus_livetimes.domain.ports.connectivity_checker import ConnectivityChecker
from bus_livetimes.domain.ports.service_colour_source import ServiceColourSource
from bus_livetimes.domain.ports.tracker_protocol import TrackerProtocol

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientSession

    from bus_livetimes.adapters.config.app_config import AppConfig


def create_tracker_protocol(config: "AppConfig") -> TrackerProtocol:
    """Create the wire protocol selected in the config.

    Raises:
        ValueError: If the bus tracker protocol is selected without an API key.
    """
    if config.protocol == "stop_events":
        return StopEventsProtocol(
            base_url=config.open_api_url, api_key=config.api_key, time_zone=config.time_zone
        )
    if not config.api_key:
        raise ValueError("The bus tracker protocol needs an API key (BUS_LIVETIMES_API_KEY)")
    return BusTrackerProtocol(
        api_key=config.api_key,
        base_url=config.bus_tracker_url,
        max_stops_per_request=config.max_stops_per_request,
    )


def create_tracker_endpoint(
    config: "AppConfig",
    session: "ClientSession",
    connectivity_checker: ConnectivityChecker | None = None,
    colour_source: ServiceColourSource | None = None,
) -> LiveTimesTrackerEndpoint:
    """Wire an endpoint for the configured authority and protocol."""
    rules = rules_for_authority(config.authority, config.night_service_colour)
    protocol = create_tracker_protocol(config)
    logger.info(f"Using {protocol.name} protocol with {config.authority} rules")

    return LiveTimesTrackerEndpoint(
        http_client=TrackerHttpClient(session, timeout_seconds=config.request_timeout_seconds),
        protocol=protocol,
        mapper=LiveTimesMapper(rules, colour_source=colour_source),
        connectivity_checker=connectivity_checker,
    )
