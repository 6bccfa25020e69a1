"""In-memory credential holding for the Home Assistant REST client.

The bearer token is kept Fernet-encrypted under a random per-instance key
and only decrypted while a single request header is being built.
"""

from hass_rest.credentials.secret import SecretToken

__all__ = ["SecretToken"]
