"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bus_livetimes.adapters.tracker.authority_rules import AUTHORITY_NAMES
from bus_livetimes.adapters.tracker.edinburgh.bus_tracker_protocol import (
    DEFAULT_BUS_TRACKER_URL,
    MAX_STOPS_PER_REQUEST,
)
from bus_livetimes.adapters.tracker.edinburgh.stop_events_protocol import DEFAULT_OPEN_API_URL

TRACKER_PROTOCOLS = ("bus_tracker", "stop_events")

# Settings the [tracker] TOML section may override
_TRACKER_TOML_KEYS = (
    "authority",
    "protocol",
    "bus_tracker_url",
    "open_api_url",
    "api_key",
    "request_timeout_seconds",
    "night_service_colour",
    "max_stops_per_request",
    "number_of_departures",
    "time_zone",
)


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles.

    Every setting can be given as an environment variable prefixed with
    ``BUS_LIVETIMES_`` (e.g. ``BUS_LIVETIMES_API_KEY``).
    """

    model_config = SettingsConfigDict(
        env_prefix="BUS_LIVETIMES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True,
    )

    # Tracker configuration
    authority: str = Field(
        default="edinburgh", description="Transit authority whose rules apply to service names"
    )
    protocol: str = Field(
        default="bus_tracker",
        description="Tracker wire protocol: 'bus_tracker' (legacy JSON) or 'stop_events'",
    )
    bus_tracker_url: str = Field(
        default=DEFAULT_BUS_TRACKER_URL, description="URL of the legacy bus tracker ws.php"
    )
    open_api_url: str = Field(
        default=DEFAULT_OPEN_API_URL, description="Base URL of the open data API"
    )
    api_key: str | None = Field(default=None, description="API key for the tracker service")
    request_timeout_seconds: float = Field(
        default=10.0, description="Total timeout for one tracker request in seconds"
    )
    night_service_colour: int = Field(
        default=0xFF000000,
        description="ARGB colour for night services without one (int, '0xAARRGGBB' or '#RRGGBB')",
    )
    max_stops_per_request: int = Field(
        default=MAX_STOPS_PER_REQUEST,
        description="Stops combined into one call when the protocol supports it",
    )
    number_of_departures: int = Field(
        default=4, description="Default number of departures per service"
    )
    time_zone: str = Field(
        default="Europe/London", description="Time zone of clock times in tracker responses"
    )

    # TOML config file path, holding [tracker] overrides and [[alerts]]
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file with tracker settings and arrival alerts",
    )

    @field_validator("authority")
    @classmethod
    def validate_authority(cls, v: str) -> str:
        """Validate the authority is one we have rules for."""
        if v.lower() not in AUTHORITY_NAMES:
            raise ValueError(f"authority must be one of {', '.join(AUTHORITY_NAMES)}")
        return v.lower()

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v: str) -> str:
        """Validate the tracker protocol."""
        if v.lower() not in TRACKER_PROTOCOLS:
            raise ValueError(f"protocol must be one of {', '.join(TRACKER_PROTOCOLS)}")
        return v.lower()

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate the timeout is positive."""
        if v <= 0:
            raise ValueError("request_timeout_seconds must be positive")
        return v

    @field_validator("max_stops_per_request", "number_of_departures")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counts are positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("night_service_colour", mode="before")
    @classmethod
    def parse_colour(cls, v: Any) -> Any:
        """Accept colours as ints, '0xAARRGGBB' or '#RRGGBB' strings."""
        if isinstance(v, str):
            text = v.strip()
            if text.startswith("#"):
                value = int(text[1:], 16)
                # '#RRGGBB' is taken as fully opaque
                return value | 0xFF000000 if len(text) == 7 else value
            return int(text, 0)
        return v

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse the TOML file, applying [tracker] overrides."""
        if not self.config_file:
            return {}

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        tracker = toml_data.get("tracker", {})
        if not isinstance(tracker, dict):
            raise ValueError("TOML config 'tracker' must be a table")
        for key in _TRACKER_TOML_KEYS:
            if key in tracker:
                setattr(self, key, tracker[key])

        return toml_data

    def load_tracker_overrides(self) -> None:
        """Apply the [tracker] section of the config file, if any."""
        self._load_toml_data()

    def get_alerts_config(self) -> list[dict[str, Any]]:
        """Parse and return the [[alerts]] entries of the TOML file.

        Returns an empty list when no config file is set.
        """
        toml_data = self._load_toml_data()

        alerts = toml_data.get("alerts", [])
        if not isinstance(alerts, list):
            raise ValueError("TOML config 'alerts' must be a list")
        return [alert for alert in alerts if isinstance(alert, dict)]
