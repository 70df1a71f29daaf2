"""Ports (interfaces) for the ports-and-adapters architecture."""

from bus_livetimes.domain.ports.alert_notifier import AlertNotifier
from bus_livetimes.domain.ports.alert_store import AlertStore
from bus_livetimes.domain.ports.authority_rules import AuthorityRules
from bus_livetimes.domain.ports.connectivity_checker import ConnectivityChecker
from bus_livetimes.domain.ports.service_colour_source import ServiceColourSource
from bus_livetimes.domain.ports.tracker_endpoint import StopCodes, TrackerEndpoint
from bus_livetimes.domain.ports.tracker_protocol import HttpRequestSpec, TrackerProtocol
from bus_livetimes.domain.ports.tracker_request import TrackerRequestProtocol

__all__ = [
    "AlertNotifier",
    "AlertStore",
    "AuthorityRules",
    "ConnectivityChecker",
    "HttpRequestSpec",
    "ServiceColourSource",
    "StopCodes",
    "TrackerEndpoint",
    "TrackerProtocol",
    "TrackerRequestProtocol",
]
