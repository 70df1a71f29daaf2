"""Authority rules port: the per-city business rules behind the uniform live times model."""

from collections.abc import Mapping, Set
from typing import Protocol


class AuthorityRules(Protocol):
    """Service naming, night service and colour rules of one transit authority.

    One implementation exists per authority and is chosen once, at
    configuration time.
    """

    def normalize_service_name(self, service_name: str | None) -> str | None:
        """Correct a malformed or legacy service identifier returned by an endpoint."""
        ...

    def is_night_service(self, service_name: str) -> bool:
        """Check whether a service identifier denotes a night service."""
        ...

    def override_service_colours(
        self,
        services: Set[str] | None,
        current_colours: Mapping[str, int] | None,
    ) -> dict[str, int] | None:
        """Fill colour gaps for the requested services without touching assigned colours."""
        ...
