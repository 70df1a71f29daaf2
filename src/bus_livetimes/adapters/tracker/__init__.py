"""Tracker adapters: requests, error mapping and payload mapping for live times."""

from bus_livetimes.adapters.tracker.authority_rules import (
    EdinburghAuthorityRules,
    PassthroughAuthorityRules,
    rules_for_authority,
)
from bus_livetimes.adapters.tracker.error_mapper import ErrorMapper
from bus_livetimes.adapters.tracker.factory import create_tracker_endpoint
from bus_livetimes.adapters.tracker.live_times_mapper import LiveTimesMapper
from bus_livetimes.adapters.tracker.tracker_endpoint import LiveTimesTrackerEndpoint
from bus_livetimes.adapters.tracker.tracker_request import (
    MultiTrackerRequest,
    SingleTrackerRequest,
    TrackerRequest,
)

__all__ = [
    "EdinburghAuthorityRules",
    "ErrorMapper",
    "LiveTimesMapper",
    "LiveTimesTrackerEndpoint",
    "MultiTrackerRequest",
    "PassthroughAuthorityRules",
    "SingleTrackerRequest",
    "TrackerRequest",
    "create_tracker_endpoint",
    "rules_for_authority",
]
