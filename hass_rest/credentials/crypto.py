"""Encryption helpers for the in-memory credential holder.

Uses Fernet symmetric encryption. Each holder generates its own random key,
so a ciphertext is useless outside the instance that produced it.
"""

import logging

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


def new_key() -> bytearray:
    """Generate a fresh Fernet key in a mutable (wipeable) buffer."""
    return bytearray(Fernet.generate_key())


def encrypt(plaintext: str, key: bytearray) -> bytearray:
    """Encrypt *plaintext* under *key* and return the ciphertext buffer."""
    return bytearray(Fernet(bytes(key)).encrypt(plaintext.encode("utf-8")))


def decrypt(ciphertext: bytearray, key: bytearray) -> str:
    """Decrypt *ciphertext* using *key*.

    Raises:
        cryptography.fernet.InvalidToken: If the key is wrong or data is corrupt.
    """
    return Fernet(bytes(key)).decrypt(bytes(ciphertext)).decode("utf-8")


def wipe(buffer: bytearray) -> None:
    """Overwrite *buffer* with zeros in place."""
    for i in range(len(buffer)):
        buffer[i] = 0


__all__ = ["InvalidToken", "decrypt", "encrypt", "new_key", "wipe"]
