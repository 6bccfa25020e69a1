"""
Home Assistant REST endpoint operations.

Each function maps its parameters to a ``(method, path, query, body)``
request and sends it through a connected ``Session``. Inputs are validated
before any network activity.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from hass_rest.client.query import Timestamp, build_query, format_value, join_ids
from hass_rest.client.session import Session
from hass_rest.errors import InvalidInputError

logger = logging.getLogger(__name__)

Confirmation = Union[bool, Callable[[str], bool]]


def _require(value: Any, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(f"{name} cannot be empty.")


def _dumps(payload: Any) -> str:
    return json.dumps(payload, default=str)


def get_api_status(session: Session) -> Dict[str, Any]:
    """Returns the API root message, e.g. ``{"message": "API running."}``."""
    session.require_connected()
    return session.dispatch("GET", "")


def get_config(session: Session) -> Dict[str, Any]:
    """Returns the server's current configuration."""
    session.require_connected()
    return session.dispatch("GET", "config")


def check_config(session: Session) -> Dict[str, Any]:
    """
    Triggers a check of ``configuration.yaml`` on the server.

    Returns:
        ``{"result": "valid"|"invalid", "errors": ...}``
    """
    session.require_connected()
    return session.dispatch("POST", "config/core/check_config")


def get_components(session: Session) -> List[str]:
    """Lists the currently loaded components."""
    session.require_connected()
    return session.dispatch("GET", "components")


def get_events(session: Session) -> List[Dict[str, Any]]:
    """Lists event types and their listener counts."""
    session.require_connected()
    return session.dispatch("GET", "events")


def fire_event(
    session: Session, event_type: str, event_data: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Fires an event on the server's event bus.

    Args:
        event_type: The event type, e.g. ``my_custom_event``.
        event_data: Optional event payload.
    """
    _require(event_type, "Event type")
    session.require_connected()
    body = _dumps(event_data) if event_data is not None else None
    return session.dispatch("POST", f"events/{format_value(event_type)}", body=body)


def get_services(session: Session) -> List[Dict[str, Any]]:
    """Lists service domains and the services each provides."""
    session.require_connected()
    return session.dispatch("GET", "services")


def domain_of(entity_id: str) -> str:
    """Returns the part of *entity_id* before the first ``.``."""
    return entity_id.split(".", 1)[0]


def call_service(
    session: Session,
    service: str,
    entity_id: Optional[Union[str, Sequence[str]]] = None,
    domain: Optional[str] = None,
    service_data: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Calls a service in Home Assistant.

    Args:
        service: The service to call (e.g. ``turn_on``).
        entity_id: Optional target entity id, or list of ids.
        domain: The service domain. Defaults to the domain of ``entity_id``
            (the first one when several are given).
        service_data: Optional additional fields for the service call.

    Returns:
        List of states that changed.
    """
    _require(service, "Service")
    if isinstance(entity_id, (list, tuple)):
        entity_id = list(entity_id) or None

    if not domain:
        if not entity_id:
            raise InvalidInputError(
                "A domain is required when no entity_id is given."
            )
        first = entity_id if isinstance(entity_id, str) else entity_id[0]
        domain = domain_of(first)
    _require(domain, "Domain")
    session.require_connected()

    payload: Dict[str, Any] = {}
    if entity_id:
        payload["entity_id"] = entity_id
    if service_data:
        payload.update(service_data)

    logger.info(f"Calling service {domain}.{service}")
    body = _dumps(payload) if payload else None
    return session.dispatch(
        "POST",
        f"services/{format_value(domain)}/{format_value(service)}",
        body=body,
    )


def get_states(
    session: Session, entity_id: Optional[str] = None
) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
    """
    Gets all entity states, or the state of one entity.

    Args:
        entity_id: Optional entity id (e.g. ``sensor.temperature``).
    """
    session.require_connected()
    if entity_id:
        return session.dispatch("GET", f"states/{format_value(entity_id)}")
    return session.dispatch("GET", "states")


def get_state(session: Session, entity_id: str) -> Dict[str, Any]:
    """Gets the state object of a single entity."""
    _require(entity_id, "Entity ID")
    return get_states(session, entity_id)


def _is_confirmed(confirm: Confirmation, description: str) -> bool:
    if callable(confirm):
        return bool(confirm(description))
    return confirm is True


def set_state(
    session: Session,
    entity_id: str,
    state: Any,
    attributes: Optional[Dict[str, Any]] = None,
    confirm: Confirmation = False,
) -> Optional[Dict[str, Any]]:
    """
    Overwrites the state representation of an entity on the server.

    The server applies this without validation and it does not touch the
    actual device, so nothing is sent unless ``confirm`` grants it.

    Args:
        entity_id: The entity to overwrite.
        state: The new state value.
        attributes: Optional attribute mapping.
        confirm: True, or a callable taking a description of the change and
            returning True to proceed.

    Returns:
        The new state object, or None when the change was not confirmed.
    """
    _require(entity_id, "Entity ID")
    _require(state, "State")
    session.require_connected()

    description = f"Set state of {entity_id} to {state!r}"
    if not _is_confirmed(confirm, description):
        logger.info(f"{description}: not confirmed, skipped")
        return None

    payload: Dict[str, Any] = {"state": state}
    if attributes is not None:
        payload["attributes"] = attributes
    return session.dispatch(
        "POST", f"states/{format_value(entity_id)}", body=_dumps(payload)
    )


def history_request(
    start_time: Optional[Timestamp] = None,
    end_time: Optional[Timestamp] = None,
    entity_ids: Optional[Union[str, Sequence[str]]] = None,
    minimal_response: bool = False,
    no_attributes: bool = False,
    significant_changes_only: bool = False,
):
    """Builds the ``(path, query)`` pair for a history query."""
    path = "history/period"
    if start_time:
        path = f"{path}/{format_value(start_time)}"
    query = build_query(
        [
            ("end_time", end_time or None),
            ("filter_entity_id", join_ids(entity_ids)),
            ("minimal_response", bool(minimal_response)),
            ("no_attributes", bool(no_attributes)),
            ("significant_changes_only", bool(significant_changes_only)),
        ]
    )
    return path, query


def get_history(
    session: Session,
    start_time: Optional[Timestamp] = None,
    end_time: Optional[Timestamp] = None,
    entity_ids: Optional[Union[str, Sequence[str]]] = None,
    minimal_response: bool = False,
    no_attributes: bool = False,
    significant_changes_only: bool = False,
) -> List[List[Dict[str, Any]]]:
    """
    Gets state changes over a period of time.

    Args:
        start_time: Beginning of the period. Server default is one day ago.
        end_time: End of the period.
        entity_ids: One or more entity ids to filter on.
        minimal_response: Only return ``last_changed`` and ``state`` for
            intermediate states.
        no_attributes: Skip returning attributes.
        significant_changes_only: Only return significant state changes.

    Returns:
        One list of state objects per entity.
    """
    session.require_connected()
    path, query = history_request(
        start_time,
        end_time,
        entity_ids,
        minimal_response,
        no_attributes,
        significant_changes_only,
    )
    return session.dispatch("GET", path, query=query)


def logbook_request(
    start_time: Optional[Timestamp] = None,
    entity_id: Optional[str] = None,
    end_time: Optional[Timestamp] = None,
):
    """Builds the ``(path, query)`` pair for a logbook query."""
    path = "logbook"
    if start_time:
        path = f"{path}/{format_value(start_time)}"
    query = build_query([("entity", entity_id or None), ("end_time", end_time or None)])
    return path, query


def get_logbook(
    session: Session,
    start_time: Optional[Timestamp] = None,
    entity_id: Optional[str] = None,
    end_time: Optional[Timestamp] = None,
) -> List[Dict[str, Any]]:
    """Gets logbook entries, optionally for one entity and period."""
    session.require_connected()
    path, query = logbook_request(start_time, entity_id, end_time)
    return session.dispatch("GET", path, query=query)


def get_error_log(session: Session) -> str:
    """Returns the server error log of the current session as plain text."""
    session.require_connected()
    return session.dispatch("GET", "error_log")


def get_camera_image(
    session: Session,
    entity_id: str,
    output_path: Union[str, Path],
    time: Optional[Timestamp] = None,
) -> Path:
    """
    Downloads the current image of a camera entity to *output_path*.

    Args:
        entity_id: The camera entity (e.g. ``camera.front_door``).
        output_path: File to write the image to.
        time: Optional timestamp passed through as ``?time=``.

    Returns:
        The path the image was written to.
    """
    _require(entity_id, "Entity ID")
    _require(output_path, "Output path")
    if not Path(output_path).parent.is_dir():
        raise InvalidInputError(
            f"Directory for output path does not exist: {Path(output_path).parent}"
        )
    session.require_connected()
    return session.dispatch(
        "GET",
        f"camera_proxy/{format_value(entity_id)}",
        query=build_query([("time", time or None)]),
        stream_to=output_path,
    )


def render_template(session: Session, template: str) -> str:
    """
    Renders a template on the server.

    Args:
        template: Template source, e.g. ``"{{ states('sun.sun') }}"``.

    Returns:
        The rendered text.
    """
    _require(template, "Template")
    session.require_connected()
    return session.dispatch("POST", "template", body=_dumps({"template": template}))


def get_calendars(session: Session) -> List[Dict[str, Any]]:
    """Lists calendar entities."""
    session.require_connected()
    return session.dispatch("GET", "calendars")


def get_calendar_events(
    session: Session, entity_id: str, start: Timestamp, end: Timestamp
) -> List[Dict[str, Any]]:
    """
    Lists events of a calendar entity between *start* and *end*.
    """
    _require(entity_id, "Entity ID")
    _require(start, "Start")
    _require(end, "End")
    session.require_connected()
    return session.dispatch(
        "GET",
        f"calendars/{format_value(entity_id)}",
        query=build_query([("start", start), ("end", end)]),
    )


def handle_intent(
    session: Session, name: str, data: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Handles an intent (requires ``intent:`` in the server configuration)."""
    _require(name, "Intent name")
    session.require_connected()
    payload: Dict[str, Any] = {"name": name}
    if data:
        payload["data"] = data
    return session.dispatch("POST", "intent/handle", body=_dumps(payload))
