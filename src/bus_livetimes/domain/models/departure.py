"""Departure domain model."""

from dataclasses import dataclass
from datetime import datetime

from bus_livetimes.domain.models.service import ServiceDescriptor


@dataclass(frozen=True)
class Departure:
    """Represents one upcoming departure of a service from a stop."""

    service: ServiceDescriptor
    destination: str | None
    eta_minutes: int  # Minutes from capture time, the unit alerts trigger on
    departure_time: datetime | None = None
    is_estimated_time: bool = False  # True when only the timetabled time was known
    is_diverted: bool = False

    def __post_init__(self) -> None:
        """Validate the ETA."""
        if self.eta_minutes < 0:
            raise ValueError(f"eta_minutes must not be negative, got {self.eta_minutes}")

    @property
    def service_name(self) -> str:
        """Name of the service this departure belongs to."""
        return self.service.name
