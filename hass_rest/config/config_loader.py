"""
ConfigLoader for YAML-based configuration with environment variable interpolation.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

# Define logger
logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "HASS_REST_CONFIG"
CONFIG_FILENAME = "config.yaml"


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


class ConfigLoader:
    """
    Loads YAML configuration with environment variable interpolation.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Optional explicit path to config.yaml
        """
        load_dotenv()
        self.config_path = self._find_config_path(config_path)
        self.config = self._load_config()
        logger.debug(f"ConfigLoader: config={self.config_path}")

    def _find_config_path(
        self, config_path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        """
        Find the configuration file path.

        Looks in the following locations (in order):
        1. Explicit path provided to constructor
        2. Path specified by the HASS_REST_CONFIG environment variable
        3. Current working directory
        4. User's config directory (~/.config/hass_rest/)

        Returns:
            Path to the configuration file, or None if there is none
        """
        candidates: List[Path] = []
        if config_path:
            path = Path(config_path)
            if path.exists():
                return path
            logger.warning(f"Specified config path does not exist: {path}")

        env_path = os.getenv(CONFIG_ENV_VAR)
        if env_path:
            path = Path(env_path)
            if path.exists():
                return path
            logger.warning(
                f"Config path from environment variable does not exist: {path}"
            )

        candidates.append(Path.cwd() / CONFIG_FILENAME)
        candidates.append(Path.home() / ".config" / "hass_rest" / CONFIG_FILENAME)
        for candidate in candidates:
            if candidate.exists():
                return candidate

        logger.debug("No config.yaml found. Using environment variables only.")
        return None

    def _interpolate_env_vars(self, value: Any) -> Any:
        """
        Recursively interpolate environment variables in configuration values.

        Replaces "${ENV_VAR}" or "$ENV_VAR" with the value of the environment variable.
        Unset variables are left as written.
        """
        if isinstance(value, str):
            # Match ${ENV_VAR} or $ENV_VAR
            pattern = r"\${([^}]+)}|\$([a-zA-Z0-9_]+)"

            def replace_env_var(match):
                env_var = match.group(1) or match.group(2)
                return os.environ.get(env_var, match.group(0))

            return re.sub(pattern, replace_env_var, value)
        elif isinstance(value, list):
            return [self._interpolate_env_vars(item) for item in value]
        elif isinstance(value, dict):
            return {k: self._interpolate_env_vars(v) for k, v in value.items()}
        else:
            return value

    def _load_config(self) -> Dict[str, Any]:
        """
        Load the configuration file.

        Raises:
            ConfigError: If the configuration file cannot be parsed
        """
        if self.config_path is None:
            return {}

        try:
            with open(self.config_path, "r") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            error_msg = f"Error parsing {self.config_path}: {e}"
            logger.error(error_msg)
            raise ConfigError(error_msg) from e
        except OSError as e:
            error_msg = f"Error loading configuration: {e}"
            logger.error(error_msg)
            raise ConfigError(error_msg) from e

        if not isinstance(config, dict):
            raise ConfigError(
                f"Top level of {self.config_path} must be a mapping, "
                f"got {type(config).__name__}"
            )
        return self._interpolate_env_vars(config)

    def get_config(self) -> Dict[str, Any]:
        """
        Get the full configuration.
        """
        return self.config

    def get_home_assistant_config(self) -> Dict[str, Any]:
        """
        Get the Home Assistant configuration section.

        Returns:
            Dictionary containing the Home Assistant configuration
        """
        section = self.config.get("home_assistant") or {}
        if not isinstance(section, dict):
            raise ConfigError("'home_assistant' section must be a mapping")
        return section
