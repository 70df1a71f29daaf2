"""Outcome of a live times request."""

from dataclasses import dataclass
from typing import TypeAlias

from bus_livetimes.domain.models.live_times import LiveTimes
from bus_livetimes.domain.models.tracker_error import (
    TRACKER_ERROR_TYPES,
    RequestCancelledError,
    TrackerError,
)


@dataclass(frozen=True)
class LiveTimesSuccess:
    """Live times were loaded."""

    live_times: LiveTimes


LiveTimesResult: TypeAlias = LiveTimesSuccess | TrackerError


def is_error(result: LiveTimesResult) -> bool:
    """True when the result is one of the tracker errors."""
    return isinstance(result, TRACKER_ERROR_TYPES)


def is_cancellation(result: LiveTimesResult) -> bool:
    """True when the request was cancelled, which callers should not surface as an error."""
    return isinstance(result, RequestCancelledError)
