"""Edinburgh tracker wire protocols."""

from bus_livetimes.adapters.tracker.edinburgh.bus_tracker_protocol import BusTrackerProtocol
from bus_livetimes.adapters.tracker.edinburgh.stop_events_protocol import StopEventsProtocol

__all__ = ["BusTrackerProtocol", "StopEventsProtocol"]
