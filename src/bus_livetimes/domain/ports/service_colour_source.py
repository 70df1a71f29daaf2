"""Service colour source port (the bus stop database)."""

from collections.abc import Set
from typing import Protocol


class ServiceColourSource(Protocol):
    """Port for looking up the known colours of services."""

    def get_service_colours(self, services: Set[str] | None) -> dict[str, int] | None:
        """Get known colours keyed by service name, for the given services or all of them."""
        ...
