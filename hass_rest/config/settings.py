"""
Validated Home Assistant connection settings.

Values come from the ``home_assistant`` section of config.yaml, with
``HASS_HOST``, ``HASS_PORT`` and ``HASS_TOKEN`` filling anything left unset.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from hass_rest.client.session import DEFAULT_PORT, Session, validate_host
from hass_rest.config.config_loader import ConfigError, ConfigLoader
from hass_rest.errors import InvalidInputError

logger = logging.getLogger(__name__)


class HomeAssistantSettings(BaseModel):
    """Schema for the ``home_assistant`` configuration section."""

    host: str = Field(description="IPv4 address or homeassistant.local.")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    token: str = Field(description="Long-Lived Access Token.", repr=False)
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Request timeout in seconds."
    )

    @field_validator("host")
    @classmethod
    def _check_host(cls, value: str) -> str:
        try:
            return validate_host(value)
        except InvalidInputError as e:
            raise ValueError(e.message) from e

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("token cannot be empty")
        return value


def load_settings(loader: Optional[ConfigLoader] = None) -> HomeAssistantSettings:
    """
    Builds validated settings from config.yaml and the environment.

    Raises:
        ConfigError: If required values are missing or invalid.
    """
    loader = loader or ConfigLoader()
    section = dict(loader.get_home_assistant_config())

    for key, env_var in (("host", "HASS_HOST"), ("port", "HASS_PORT"), ("token", "HASS_TOKEN")):
        if not section.get(key) and os.environ.get(env_var):
            section[key] = os.environ[env_var]

    try:
        return HomeAssistantSettings(**section)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid home_assistant configuration: {problems}") from e


def connect_from_config(loader: Optional[ConfigLoader] = None) -> Session:
    """
    Creates a session and connects it using configured settings.

    Raises:
        ConfigError: If the configuration is incomplete or invalid.
        ConnectionFailedError: If the server could not be reached.
    """
    settings = load_settings(loader)
    session = Session(timeout=settings.timeout)
    session.connect(settings.host, settings.token, port=settings.port)
    return session
