"""
Liveness probe for the Home Assistant API root.

Used by the dispatcher to tell "the request was bad" apart from "the server
is down".
"""

import logging
from typing import Optional, Union

import requests

from hass_rest.credentials import SecretToken

logger = logging.getLogger(__name__)

API_GREETING = "API running."


def extract_greeting(response: requests.Response) -> Optional[str]:
    """Return the greeting text of an API root response, if there is one."""
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text or None
    if isinstance(payload, dict):
        message = payload.get("message")
        return message if isinstance(message, str) else None
    return None


def check(
    http: requests.Session,
    base_url: str,
    credential: SecretToken,
    timeout: Optional[float] = None,
) -> Union[bool, str]:
    """
    Issues a bare GET against the API root.

    Args:
        http: The requests session to use.
        base_url: The API root, e.g. ``http://192.168.1.10:8123/api/``.
        credential: The token used for the Authorization header.
        timeout: Optional request timeout in seconds.

    Returns:
        True if the server answered with the expected greeting, otherwise the
        raw response body so the caller can inspect it.

    Raises:
        requests.RequestException: On transport failure (DNS, refused
            connection, timeout).
    """
    headers = credential.borrow_header()
    try:
        response = http.get(base_url, headers=headers, timeout=timeout)
    finally:
        headers.clear()
    logger.debug(f"Health check {base_url} - Status: {response.status_code}")
    greeting = extract_greeting(response)
    if (
        response.status_code == 200
        and greeting is not None
        and greeting.strip().lower() == API_GREETING.lower()
    ):
        return True
    return response.text
