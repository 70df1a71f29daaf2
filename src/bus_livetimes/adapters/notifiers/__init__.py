"""Alert notifier adapters."""

from bus_livetimes.adapters.notifiers.logging_notifier import LoggingAlertNotifier

__all__ = ["LoggingAlertNotifier"]
