"""Application services."""

from bus_livetimes.application.services.alert_evaluator import AlertEvaluator
from bus_livetimes.application.services.arrival_alert_checker import ArrivalAlertChecker

__all__ = ["AlertEvaluator", "ArrivalAlertChecker"]
