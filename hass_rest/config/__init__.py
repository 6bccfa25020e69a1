"""
Optional configuration for hass_rest.

Nothing in the client reads configuration implicitly; use
``connect_from_config()`` to build a session from config.yaml and the
environment.
"""

from hass_rest.config.config_loader import ConfigError, ConfigLoader
from hass_rest.config.settings import (
    HomeAssistantSettings,
    connect_from_config,
    load_settings,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "HomeAssistantSettings",
    "connect_from_config",
    "load_settings",
]
