"""
hass_rest - A synchronous client for the Home Assistant REST API.
"""

import logging
import os
import sys

__version__ = "0.1.3"

from hass_rest.client import (
    Session,
    call_service,
    check_config,
    connect,
    disconnect,
    fire_event,
    get_api_status,
    get_calendar_events,
    get_calendars,
    get_camera_image,
    get_components,
    get_config,
    get_error_log,
    get_events,
    get_history,
    get_logbook,
    get_services,
    get_session,
    get_state,
    get_states,
    handle_intent,
    is_connected,
    render_template,
    set_state,
)
from hass_rest.errors import ErrorKind, HomeAssistantError

logging.getLogger(__name__).addHandler(logging.NullHandler())


def setup_logging(level=None) -> None:
    """Configure a stdout handler for scripts using this package."""
    logging.basicConfig(
        level=level or os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
