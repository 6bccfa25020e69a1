"""
Configuration for pytest.

This file provides common fixtures for all tests: fake HTTP responses and a
session connected to a mocked Home Assistant server.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
import requests

from hass_rest.client.session import Session

BASE_URL = "http://192.168.1.10:8123/api/"
GREETING = {"message": "API running."}


def make_response(
    status: int = 200,
    json_body: Any = None,
    text: Optional[str] = None,
    content: Optional[bytes] = None,
    content_type: Optional[str] = None,
    url: str = BASE_URL,
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = content_type or "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = content_type or "text/plain; charset=utf-8"
    else:
        response._content = content or b""
        if content_type:
            response.headers["Content-Type"] = content_type
    response._content_consumed = True
    return response


class RecordingHttp:
    """Stand-in for ``requests.Session`` that records every call.

    Headers are copied at call time since the dispatcher clears them after
    the request returns.
    """

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.get = MagicMock(side_effect=self._get)
        self.request = MagicMock(side_effect=self._request)
        self.close = MagicMock()
        self.get_responses: List[Any] = [make_response(json_body=GREETING)]
        self.request_responses: List[Any] = []

    @staticmethod
    def _next(queue):
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def _get(self, url, headers=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "headers": dict(headers or {})})
        return self._next(self.get_responses)

    def _request(self, method, url, headers=None, data=None, timeout=None, stream=False):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": dict(headers or {}),
                "data": data,
                "stream": stream,
            }
        )
        return self._next(self.request_responses)

    @property
    def last_request(self) -> Dict[str, Any]:
        return [c for c in self.calls if "data" in c][-1]


@pytest.fixture
def http():
    return RecordingHttp()


@pytest.fixture
def session(http):
    """A session connected to a mocked server at 192.168.1.10:8123."""
    s = Session()
    s._http = http
    s.connect("192.168.1.10", "tok123")
    http.calls.clear()
    return s


@pytest.fixture
def response():
    """Factory fixture for fake responses, see ``make_response``."""
    return make_response
