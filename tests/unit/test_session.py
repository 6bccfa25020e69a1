"""Tests for session connect/disconnect and the shared session singleton."""

from unittest.mock import patch

import pytest
import requests

from hass_rest.client import session_singleton
from hass_rest.client.session import Session, build_base_url, validate_host
from hass_rest.errors import (
    ConnectionFailedError,
    ErrorKind,
    InvalidInputError,
    NotConnectedError,
)


class TestValidateHost:
    @pytest.mark.parametrize(
        "host", ["192.168.1.10", "10.0.0.1", "0.0.0.0", "255.255.255.255"]
    )
    def test_ipv4_accepted(self, host):
        assert validate_host(host) == host

    @pytest.mark.parametrize(
        "host", ["homeassistant.local", "HomeAssistant.Local", "HOMEASSISTANT.LOCAL"]
    )
    def test_mdns_name_accepted(self, host):
        assert validate_host(host) == "homeassistant.local"

    @pytest.mark.parametrize(
        "host",
        [
            "",
            "example.com",
            "homeassistant",
            "homeassistant.local.evil",
            "192.168.1",
            "192.168.1.256",
            "::1",
            "http://192.168.1.10",
            "192.168.1.10:8123",
        ],
    )
    def test_other_hosts_rejected(self, host):
        with pytest.raises(InvalidInputError):
            validate_host(host)

    def test_base_url(self):
        assert build_base_url("192.168.1.10") == "http://192.168.1.10:8123/api/"
        assert build_base_url("homeassistant.local", 8300) == (
            "http://homeassistant.local:8300/api/"
        )

    @pytest.mark.parametrize("port", [0, 65536, -1, "8123", True])
    def test_bad_port_rejected(self, port):
        with pytest.raises(InvalidInputError):
            build_base_url("192.168.1.10", port)


class TestConnect:
    def test_connect_success(self, http):
        s = Session()
        s._http = http

        greeting = s.connect("192.168.1.10", "tok123", 8123)

        assert greeting == "API running."
        assert s.configured is True
        assert s.base_url == "http://192.168.1.10:8123/api/"
        call = http.calls[0]
        assert call["url"] == "http://192.168.1.10:8123/api/"
        assert call["headers"] == {"Authorization": "Bearer tok123"}
        # The dict handed to the transport is emptied once the call returns
        assert http.get.call_args.kwargs["headers"] == {}

    def test_invalid_host_makes_no_network_call(self, http):
        s = Session()
        s._http = http

        with pytest.raises(InvalidInputError):
            s.connect("not-a-host", "tok123")

        http.get.assert_not_called()
        assert s.configured is False

    def test_empty_token_makes_no_network_call(self, http):
        s = Session()
        s._http = http

        with pytest.raises(InvalidInputError):
            s.connect("192.168.1.10", "  ")

        http.get.assert_not_called()

    def test_unreachable_server(self, http):
        http.get_responses = [requests.ConnectionError("refused")]
        s = Session()
        s._http = http

        with pytest.raises(ConnectionFailedError) as exc_info:
            s.connect("192.168.1.10", "tok123")

        assert exc_info.value.kind is ErrorKind.CONNECTION_FAILED
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
        assert s.configured is False
        assert s.base_url is None
        assert not s._credential.is_set

    def test_failure_clears_previous_connection(self, session, http):
        http.get_responses = [requests.Timeout("timed out")]

        with pytest.raises(ConnectionFailedError):
            session.connect("192.168.1.11", "other")

        assert session.configured is False
        assert session.base_url is None
        assert not session._credential.is_set

    def test_non_200_fails(self, http, response):
        http.get_responses = [response(401, json_body={"message": "Unauthorized"})]
        s = Session()
        s._http = http

        with pytest.raises(ConnectionFailedError) as exc_info:
            s.connect("192.168.1.10", "bad")

        assert exc_info.value.http_status == 401
        assert s.configured is False

    def test_malformed_greeting_fails(self, http, response):
        http.get_responses = [response(200, json_body=["not", "a", "greeting"])]
        s = Session()
        s._http = http

        with pytest.raises(ConnectionFailedError):
            s.connect("192.168.1.10", "tok123")

        assert s.configured is False

    def test_reconnect_replaces_session(self, session, http):
        session.connect("homeassistant.local", "tok456", 8300)

        assert session.base_url == "http://homeassistant.local:8300/api/"
        assert session._credential.borrow_header() == {
            "Authorization": "Bearer tok456"
        }


class TestDisconnect:
    def test_disconnect_clears_everything(self, session):
        session.disconnect()

        assert session.configured is False
        assert session.base_url is None
        assert not session._credential.is_set

    def test_disconnect_twice_is_noop(self, session):
        session.disconnect()
        session.disconnect()

        assert session.configured is False

    def test_require_connected(self, session):
        session.require_connected()
        session.disconnect()
        with pytest.raises(NotConnectedError) as exc_info:
            session.require_connected()
        assert exc_info.value.kind is ErrorKind.NOT_CONNECTED

    def test_dispatch_after_disconnect_makes_no_call(self, session, http):
        session.disconnect()

        with pytest.raises(NotConnectedError):
            session.dispatch("GET", "states")

        http.request.assert_not_called()

    def test_context_manager_closes(self, http):
        with Session() as s:
            s._http = http
            s.connect("192.168.1.10", "tok123")
        assert s.configured is False
        http.close.assert_called_once()


class TestSessionSingleton:
    @pytest.fixture(autouse=True)
    def _reset_singleton(self):
        session_singleton._session = None
        yield
        session_singleton._session = None

    def test_get_session_before_connect(self):
        with pytest.raises(NotConnectedError):
            session_singleton.get_session()
        assert session_singleton.is_connected() is False

    def test_connect_and_disconnect(self, http):
        with patch(
            "hass_rest.client.session.requests.Session", return_value=http
        ):
            greeting = session_singleton.connect("192.168.1.10", "tok123")

        assert greeting == "API running."
        assert session_singleton.is_connected() is True
        assert session_singleton.get_session().base_url == (
            "http://192.168.1.10:8123/api/"
        )

        session_singleton.disconnect()
        session_singleton.disconnect()
        assert session_singleton.is_connected() is False

    def test_failed_connect_leaves_no_session(self, http):
        with patch(
            "hass_rest.client.session.requests.Session", return_value=http
        ):
            session_singleton.connect("192.168.1.10", "tok123")
            http.get_responses = [requests.ConnectionError("refused")]
            with pytest.raises(ConnectionFailedError):
                session_singleton.connect("192.168.1.10", "tok123")

        assert session_singleton.is_connected() is False
        with pytest.raises(NotConnectedError):
            session_singleton.get_session()
