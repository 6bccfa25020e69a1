"""Opaque holder for the Home Assistant bearer token.

Usage::

    from hass_rest.credentials import SecretToken

    secret = SecretToken("long-lived-token")
    headers = secret.borrow_header()  # {"Authorization": "Bearer ..."}
    secret.clear()
"""

import logging
from typing import Dict, Optional

from hass_rest.credentials.crypto import decrypt, encrypt, new_key, wipe
from hass_rest.errors import InvalidInputError

logger = logging.getLogger(__name__)


class SecretToken:
    """Encrypted, in-memory bearer token.

    The only way to get at the plain value is ``borrow_header()``, which
    decrypts it for the header being built and does not keep the result.
    """

    __slots__ = ("_key", "_ciphertext")

    def __init__(self, token: Optional[str] = None):
        self._key: Optional[bytearray] = None
        self._ciphertext: Optional[bytearray] = None
        if token is not None:
            self.set(token)

    @property
    def is_set(self) -> bool:
        """True when a token is currently held."""
        return self._ciphertext is not None

    def set(self, token: str) -> None:
        """Store *token*, replacing (and wiping) any previous one.

        Raises:
            InvalidInputError: If the token is empty or whitespace-only.
        """
        if not isinstance(token, str) or not token.strip():
            raise InvalidInputError("Access token must be a non-empty string.")
        self.clear()
        self._key = new_key()
        self._ciphertext = encrypt(token, self._key)

    def borrow_header(self) -> Dict[str, str]:
        """Build an ``Authorization`` header for a single request.

        Raises:
            InvalidInputError: If no token is held.
        """
        if self._ciphertext is None or self._key is None:
            raise InvalidInputError("No access token is set.")
        return {"Authorization": f"Bearer {decrypt(self._ciphertext, self._key)}"}

    def clear(self) -> None:
        """Wipe the stored token. Safe to call repeatedly."""
        if self._ciphertext is not None:
            wipe(self._ciphertext)
        if self._key is not None:
            wipe(self._key)
        self._ciphertext = None
        self._key = None

    def __repr__(self) -> str:
        state = "set" if self.is_set else "empty"
        return f"<SecretToken {state}>"

    __str__ = __repr__

    def __reduce__(self):
        raise TypeError("SecretToken cannot be pickled")
