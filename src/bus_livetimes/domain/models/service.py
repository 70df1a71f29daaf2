"""Service descriptor domain model."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceDescriptor:
    """A transit service (bus or tram line) as reported by a live times endpoint."""

    name: str
    display_name: str | None = None
    colour: int | None = None  # Packed RGB/ARGB. None means unassigned, inherit the default
    description: str | None = None
    is_night_service: bool = False


_DIGIT_RUN = re.compile(r"(\d+)")


def service_name_sort_key(name: str) -> tuple[tuple[int, int, str], ...]:
    """Natural sort key for service names, so "2" sorts before "10" and "N3" before "N25".

    Digit runs compare numerically and ahead of text at the same position,
    text compares case-insensitively.
    """
    key: list[tuple[int, int, str]] = []
    for part in _DIGIT_RUN.split(name):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part), part))
        else:
            key.append((1, 0, part.casefold()))
    return tuple(key)
