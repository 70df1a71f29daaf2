"""Configuration adapters."""

from bus_livetimes.adapters.config.alert_configuration_loader import AlertConfigurationLoader
from bus_livetimes.adapters.config.app_config import AppConfig

__all__ = ["AlertConfigurationLoader", "AppConfig"]
