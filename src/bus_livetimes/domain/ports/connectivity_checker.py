"""Connectivity checker port."""

from typing import Protocol


class ConnectivityChecker(Protocol):
    """Port for the platform's connectivity sensor."""

    @property
    def has_internet_connectivity(self) -> bool:
        """Whether the device currently has internet connectivity."""
        ...
