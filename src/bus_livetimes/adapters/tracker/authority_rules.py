"""Per-authority service naming, night service and colour rules."""

import logging
import re
from collections.abc import Mapping, Set

from bus_livetimes.domain.ports.authority_rules import AuthorityRules

logger = logging.getLogger(__name__)

DEFAULT_NIGHT_SERVICE_COLOUR = 0xFF000000  # Opaque black, ARGB


def _apply_night_colour(
    rules: AuthorityRules,
    night_colour: int,
    services: Set[str] | None,
    current_colours: Mapping[str, int] | None,
) -> dict[str, int] | None:
    """Add the night colour for requested night services that have no colour yet."""
    if not services:
        return dict(current_colours) if current_colours else None

    result = dict(current_colours) if current_colours else {}
    for service in services:
        if service not in result and rules.is_night_service(service):
            result[service] = night_colour

    return result or None


class EdinburghAuthorityRules:
    """Rules for Edinburgh (Lothian Buses, Edinburgh Trams).

    The tracker reports the tram as service "50" (legacy feed) or "T50"; both
    are renamed to "TRAM". Night services are "N" followed by digits.
    """

    NAME = "edinburgh"
    _SERVICE_NAME_OVERRIDES = {"50": "TRAM", "T50": "TRAM"}
    _NIGHT_SERVICE_PATTERN = re.compile(r"^N\d+", re.IGNORECASE)

    def __init__(self, night_service_colour: int = DEFAULT_NIGHT_SERVICE_COLOUR) -> None:
        """Initialize with the colour given to night services lacking one."""
        self._night_service_colour = night_service_colour

    def normalize_service_name(self, service_name: str | None) -> str | None:
        if service_name is None:
            return None
        name = service_name.strip()
        if not name:
            return None
        return self._SERVICE_NAME_OVERRIDES.get(name.upper(), name)

    def is_night_service(self, service_name: str) -> bool:
        return self._NIGHT_SERVICE_PATTERN.match(service_name) is not None

    def override_service_colours(
        self,
        services: Set[str] | None,
        current_colours: Mapping[str, int] | None,
    ) -> dict[str, int] | None:
        return _apply_night_colour(self, self._night_service_colour, services, current_colours)


class PassthroughAuthorityRules:
    """Rules for an authority with no renames and no night services."""

    NAME = "passthrough"

    def normalize_service_name(self, service_name: str | None) -> str | None:
        if service_name is None:
            return None
        return service_name.strip() or None

    def is_night_service(self, service_name: str) -> bool:  # noqa: ARG002
        return False

    def override_service_colours(
        self,
        services: Set[str] | None,
        current_colours: Mapping[str, int] | None,
    ) -> dict[str, int] | None:
        return _apply_night_colour(self, DEFAULT_NIGHT_SERVICE_COLOUR, services, current_colours)


AUTHORITY_NAMES = (EdinburghAuthorityRules.NAME, PassthroughAuthorityRules.NAME)


def rules_for_authority(
    authority: str, night_service_colour: int = DEFAULT_NIGHT_SERVICE_COLOUR
) -> AuthorityRules:
    """Select the rules for a configured authority.

    Raises:
        ValueError: If the authority is not known.
    """
    name = authority.strip().lower()
    logger.debug(f"Selecting authority rules for {name!r}")
    if name == EdinburghAuthorityRules.NAME:
        return EdinburghAuthorityRules(night_service_colour=night_service_colour)
    if name == PassthroughAuthorityRules.NAME:
        return PassthroughAuthorityRules()
    raise ValueError(f"Unknown authority '{authority}'. Supported: {', '.join(AUTHORITY_NAMES)}")
