"""
Home Assistant REST client package.

This package provides the session, request dispatch and endpoint operations
for talking to the Home Assistant REST API.
"""

from hass_rest.client.api import (
    call_service,
    check_config,
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
    get_state,
    get_states,
    handle_intent,
    render_template,
    set_state,
)
from hass_rest.client.session import Session
from hass_rest.client.session_singleton import (
    connect,
    disconnect,
    get_session,
    is_connected,
)

__all__ = [
    "Session",
    "connect",
    "disconnect",
    "get_session",
    "is_connected",
    "call_service",
    "check_config",
    "fire_event",
    "get_api_status",
    "get_calendar_events",
    "get_calendars",
    "get_camera_image",
    "get_components",
    "get_config",
    "get_error_log",
    "get_events",
    "get_history",
    "get_logbook",
    "get_services",
    "get_state",
    "get_states",
    "handle_intent",
    "render_template",
    "set_state",
]
