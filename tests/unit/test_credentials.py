"""Tests for the in-memory bearer token holder."""

import pickle

import pytest

from hass_rest.credentials import SecretToken
from hass_rest.credentials.crypto import decrypt, encrypt, new_key, wipe
from hass_rest.errors import ErrorKind, InvalidInputError


class TestSecretToken:
    def test_borrow_header(self):
        secret = SecretToken("tok123")
        assert secret.borrow_header() == {"Authorization": "Bearer tok123"}

    def test_each_borrow_is_a_fresh_dict(self):
        secret = SecretToken("tok123")
        first = secret.borrow_header()
        first.clear()
        assert secret.borrow_header() == {"Authorization": "Bearer tok123"}

    @pytest.mark.parametrize("token", ["", "   ", "\t\n"])
    def test_empty_token_rejected(self, token):
        with pytest.raises(InvalidInputError) as exc_info:
            SecretToken(token)
        assert exc_info.value.kind is ErrorKind.INVALID_INPUT

    def test_non_string_rejected(self):
        with pytest.raises(InvalidInputError):
            SecretToken().set(None)

    def test_token_not_stored_in_plain_text(self):
        secret = SecretToken("super-secret-token")
        assert b"super-secret-token" not in bytes(secret._ciphertext)

    def test_repr_hides_token(self):
        secret = SecretToken("super-secret-token")
        assert "super-secret-token" not in repr(secret)
        assert "super-secret-token" not in str(secret)
        assert repr(secret) == "<SecretToken set>"

    def test_clear_is_idempotent(self):
        secret = SecretToken("tok123")
        secret.clear()
        secret.clear()
        assert not secret.is_set
        assert repr(secret) == "<SecretToken empty>"

    def test_borrow_after_clear_fails(self):
        secret = SecretToken("tok123")
        secret.clear()
        with pytest.raises(InvalidInputError):
            secret.borrow_header()

    def test_set_replaces_previous_token(self):
        secret = SecretToken("old")
        secret.set("new")
        assert secret.borrow_header()["Authorization"] == "Bearer new"

    def test_cannot_be_pickled(self):
        with pytest.raises(TypeError):
            pickle.dumps(SecretToken("tok123"))


class TestCrypto:
    def test_encrypt_decrypt(self):
        key = new_key()
        assert decrypt(encrypt("value", key), key) == "value"

    def test_wrong_key_fails(self):
        from cryptography.fernet import InvalidToken

        ciphertext = encrypt("value", new_key())
        with pytest.raises(InvalidToken):
            decrypt(ciphertext, new_key())

    def test_wipe_zeroes_buffer(self):
        buf = bytearray(b"abc")
        wipe(buf)
        assert buf == bytearray(3)
