"""Application layer - use cases and business logic orchestration."""

from bus_livetimes.application.services import AlertEvaluator, ArrivalAlertChecker

__all__ = ["AlertEvaluator", "ArrivalAlertChecker"]
