"""Adapters layer - external system integrations."""

from bus_livetimes.adapters.config import AppConfig
from bus_livetimes.adapters.in_memory_alert_store import InMemoryAlertStore
from bus_livetimes.adapters.notifiers import LoggingAlertNotifier
from bus_livetimes.adapters.tracker import LiveTimesTrackerEndpoint, create_tracker_endpoint

__all__ = [
    "AppConfig",
    "InMemoryAlertStore",
    "LiveTimesTrackerEndpoint",
    "LoggingAlertNotifier",
    "create_tracker_endpoint",
]
