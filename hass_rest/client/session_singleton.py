"""
Process-wide session shared by callers that do not pass one explicitly.

Lifecycle: created by ``connect()``, torn down by ``disconnect()`` or a failed
``connect()``. Access is guarded by a lock.
"""

import logging
import threading
from typing import Optional

from hass_rest.client.session import DEFAULT_PORT, Session
from hass_rest.errors import NotConnectedError

logger = logging.getLogger(__name__)

# Singleton session instance
_session: Optional[Session] = None
_session_lock = threading.Lock()


def connect(
    host: str, token: str, port: int = DEFAULT_PORT, timeout: Optional[float] = None
) -> str:
    """
    Connects the shared session, replacing any previous one.

    Returns:
        The server greeting.

    Raises:
        InvalidInputError: For a bad host, port or token.
        ConnectionFailedError: If the server could not be reached. The shared
            session is cleared.
    """
    global _session

    with _session_lock:
        if _session is not None:
            _session.close()
            _session = None

        session = Session(timeout=timeout)
        try:
            greeting = session.connect(host, token, port=port)
        except Exception:
            session.close()
            raise
        _session = session
        return greeting


def get_session() -> Session:
    """
    Returns the connected shared session.

    Raises:
        NotConnectedError: If ``connect()`` has not succeeded.
    """
    with _session_lock:
        if _session is None or not _session.configured:
            raise NotConnectedError(
                "Not connected to Home Assistant. Call connect() first."
            )
        return _session


def disconnect() -> None:
    """Tears down the shared session. Safe to call repeatedly."""
    global _session

    with _session_lock:
        if _session is not None:
            _session.close()
            _session = None


def is_connected() -> bool:
    with _session_lock:
        return _session is not None and _session.configured
