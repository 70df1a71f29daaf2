"""Stop identifier domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StopIdentifier:
    """Identifies a stop by the code the transit authority assigns to it (e.g. a NaPTAN code)."""

    code: str

    def __post_init__(self) -> None:
        """Validate the stop code."""
        if not self.code:
            raise ValueError("Stop code must not be empty")
        if not (self.code.isascii() and self.code.isalnum()):
            raise ValueError(f"Invalid stop code: {self.code!r}")

    def __str__(self) -> str:
        return self.code


def to_stop_identifier(stop: "StopIdentifier | str") -> StopIdentifier:
    """Coerce a stop code string into a StopIdentifier."""
    if isinstance(stop, StopIdentifier):
        return stop
    return StopIdentifier(stop)
