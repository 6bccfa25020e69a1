"""
Connection state for a Home Assistant server.

A ``Session`` holds the API root, the encrypted bearer token and whether
``connect()`` succeeded. Endpoint operations take a session and refuse to run
until it is connected.
"""

import ipaddress
import logging
from pathlib import Path
from typing import Any, Optional, Union

import requests

from hass_rest.client.dispatcher import dispatch
from hass_rest.client.health import check, extract_greeting
from hass_rest.credentials import SecretToken
from hass_rest.errors import (
    ConnectionFailedError,
    InvalidInputError,
    NotConnectedError,
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8123
MDNS_HOSTNAME = "homeassistant.local"


def validate_host(host: str) -> str:
    """
    Checks that *host* is a dotted IPv4 literal or ``homeassistant.local``.

    Returns:
        The host as it should appear in the URL.

    Raises:
        InvalidInputError: For any other value.
    """
    if not isinstance(host, str) or not host:
        raise InvalidInputError("Host must be a non-empty string.")
    if host.lower() == MDNS_HOSTNAME:
        return MDNS_HOSTNAME
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        raise InvalidInputError(
            f"Host must be an IPv4 address or '{MDNS_HOSTNAME}', got {host!r}."
        ) from None
    return host


def validate_port(port: int) -> int:
    """Raises ``InvalidInputError`` unless *port* is an int in 1..65535."""
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise InvalidInputError(f"Port must be an integer in 1-65535, got {port!r}.")
    return port


def build_base_url(host: str, port: int = DEFAULT_PORT) -> str:
    """Compose the API root for *host* and *port*."""
    return f"http://{validate_host(host)}:{validate_port(port)}/api/"


class Session:
    """
    A connection to one Home Assistant server.
    """

    def __init__(self, timeout: Optional[float] = None):
        """
        Initializes an unconnected session.

        Args:
            timeout: Optional per-request timeout in seconds. None leaves the
                transport default in place.
        """
        self.timeout = timeout
        self.base_url: Optional[str] = None
        self.configured = False
        self._credential = SecretToken()
        self._http = requests.Session()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = self.base_url if self.configured else "disconnected"
        return f"<Session {state}>"

    def connect(self, host: str, token: str, port: int = DEFAULT_PORT) -> str:
        """
        Connects to a Home Assistant server and validates the token.

        Args:
            host: IPv4 address or ``homeassistant.local``.
            token: The Long-Lived Access Token.
            port: API port (default 8123).

        Returns:
            The server greeting, e.g. ``"API running."``.

        Raises:
            InvalidInputError: For a bad host, port or empty token. No network
                call is made.
            ConnectionFailedError: If the server could not be reached or did
                not answer with a greeting. The session is left cleared.
        """
        base_url = build_base_url(host, port)
        credential = SecretToken(token)

        # Replaced wholesale: the previous connection is gone either way
        self.disconnect()

        headers = credential.borrow_header()
        try:
            response = self._http.get(
                base_url, headers=headers, timeout=self.timeout
            )
            logger.debug(f"Connect to {base_url} - Status: {response.status_code}")
            if response.status_code != 200:
                raise ConnectionFailedError(
                    f"Server at {base_url} answered with status {response.status_code}.",
                    http_status=response.status_code,
                )
            greeting = extract_greeting(response)
            if not greeting:
                raise ConnectionFailedError(
                    f"Server at {base_url} returned a malformed greeting.",
                    http_status=response.status_code,
                )
        except ConnectionFailedError as e:
            credential.clear()
            logger.error(f"Failed to connect to Home Assistant API: {e}")
            raise
        except requests.RequestException as e:
            credential.clear()
            logger.error(f"Failed to connect to Home Assistant API at {base_url}: {e}")
            raise ConnectionFailedError(
                f"Could not connect to {base_url}: {e}"
            ) from e
        finally:
            headers.clear()

        self._credential = credential
        self.base_url = base_url
        self.configured = True
        logger.info(f"Successfully connected to Home Assistant API at {base_url}.")
        return greeting

    def disconnect(self) -> None:
        """Clears the base URL and token. Calling it again is a no-op."""
        if self.configured:
            logger.info(f"Disconnected from {self.base_url}")
        self._credential.clear()
        self.base_url = None
        self.configured = False

    def close(self) -> None:
        """Disconnects and releases pooled HTTP connections."""
        self.disconnect()
        self._http.close()

    def require_connected(self) -> None:
        """Raises ``NotConnectedError`` unless ``connect()`` has succeeded."""
        if not self.configured or self.base_url is None:
            raise NotConnectedError(
                "Not connected to Home Assistant. Call connect() first."
            )

    def dispatch(
        self,
        method: str,
        path: str,
        query: Optional[str] = None,
        body: Optional[str] = None,
        stream_to: Optional[Union[str, Path]] = None,
    ) -> Any:
        """
        Sends one request through this session.

        See ``hass_rest.client.dispatcher.dispatch`` for the failure
        classification.
        """
        self.require_connected()
        return dispatch(
            self._http,
            self.base_url,
            self._credential,
            method,
            path,
            query=query,
            body=body,
            stream_to=stream_to,
            timeout=self.timeout,
        )

    def health_check(self) -> Union[bool, str]:
        """Probes the API root. True when the greeting came back."""
        self.require_connected()
        return check(self._http, self.base_url, self._credential, timeout=self.timeout)
