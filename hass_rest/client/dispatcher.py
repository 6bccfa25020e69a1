"""
Request dispatch for the Home Assistant REST API.

Builds the final URL, attaches the bearer header for the one call, issues the
request and turns every failure into a classified ``HomeAssistantError``:
first the API root is probed, then the original failure is classified by its
HTTP status.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import requests

from hass_rest.client.health import check
from hass_rest.credentials import SecretToken
from hass_rest.errors import (
    InvalidInputError,
    ServerUnreachableError,
    error_for_status,
    truncate_error,
)

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("GET", "POST")
CHUNK_SIZE = 8192


def build_url(base_url: str, path: str, query: Optional[str] = None) -> str:
    """Concatenate the API root, endpoint path and optional query string."""
    if query and not query.startswith("?"):
        raise InvalidInputError(f"Query string must start with '?': {query!r}")
    return f"{base_url}{path}{query or ''}"


def _parse_response(response: requests.Response) -> Any:
    """Decode a successful response: JSON when declared, text otherwise."""
    if not response.content:
        return {}
    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        return response.json()
    return response.text


def _write_stream(response: requests.Response, target: Union[str, Path]) -> Path:
    """Stream a binary response body to *target* in chunks.

    The body goes to a sibling ``.part`` file that only replaces *target*
    once the last chunk is written, so a broken stream leaves nothing behind.
    """
    path = Path(target)
    partial = path.with_name(path.name + ".part")
    try:
        with open(partial, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
        os.replace(partial, path)
    except Exception:
        partial.unlink(missing_ok=True)
        raise
    finally:
        response.close()
    logger.debug(f"Wrote response body to {path}")
    return path


def _failure_detail(
    failure: Exception, response: Optional[requests.Response]
) -> str:
    """Server-provided detail text for a failed call, or the transport error."""
    if response is None:
        return str(failure)
    try:
        text = response.text.strip()
    except RuntimeError:
        # Body already consumed by a stream that broke partway
        return str(failure)
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return text or str(failure)


def classify_failure(
    http: requests.Session,
    base_url: str,
    credential: SecretToken,
    failure: Exception,
    response: Optional[requests.Response] = None,
    timeout: Optional[float] = None,
) -> Exception:
    """
    Two-step classification of a failed request.

    The API root is probed first. If the probe fails or does not return the
    greeting, the server is considered unreachable. Otherwise the original
    failure is classified by its HTTP status.

    Returns:
        The ``HomeAssistantError`` to raise.
    """
    status = response.status_code if response is not None else None
    detail = _failure_detail(failure, response)

    try:
        alive = check(http, base_url, credential, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"Home Assistant unreachable at {base_url}: {e}")
        return ServerUnreachableError(
            f"Server at {base_url} is unreachable ({e}). Original error: {detail}"
        )

    if alive is not True:
        logger.error(f"Home Assistant at {base_url} did not return the API greeting")
        return ServerUnreachableError(
            f"Server at {base_url} did not return the API greeting "
            f"(got {truncate_error(str(alive))!r}). Original error: {detail}"
        )

    error = error_for_status(status, detail)
    logger.warning(f"Request failed against live server: {truncate_error(str(error))}")
    return error


def dispatch(
    http: requests.Session,
    base_url: str,
    credential: SecretToken,
    method: str,
    path: str,
    query: Optional[str] = None,
    body: Optional[str] = None,
    stream_to: Optional[Union[str, Path]] = None,
    timeout: Optional[float] = None,
) -> Any:
    """
    Makes a request to the Home Assistant API.

    Args:
        http: The requests session to send through.
        base_url: The API root ending in ``/api/``.
        credential: Token holder used to build the Authorization header.
        method: ``GET`` or ``POST``.
        path: Endpoint path relative to the API root (e.g. ``states``).
        query: Optional query string, already starting with ``?``.
        body: Optional JSON-encoded request body (POST only).
        stream_to: When given, the binary body is written to this path.
        timeout: Optional request timeout in seconds.

    Returns:
        Parsed JSON, raw text for non-JSON responses, or the written path when
        ``stream_to`` is set.

    Raises:
        InvalidInputError: For an unsupported method or malformed query.
        HomeAssistantError: The classified failure of the request.
    """
    method = method.upper()
    if method not in ALLOWED_METHODS:
        raise InvalidInputError(f"Unsupported HTTP method: {method}")
    url = build_url(base_url, path, query)

    headers = credential.borrow_header()
    data = None
    if method == "POST" and body is not None:
        headers["Content-Type"] = "application/json"
        data = body

    response = None
    try:
        response = http.request(
            method,
            url,
            headers=headers,
            data=data,
            timeout=timeout,
            stream=stream_to is not None,
        )
        logger.debug(f"Request to {url} ({method}) - Status: {response.status_code}")
        response.raise_for_status()
        if stream_to is not None:
            return _write_stream(response, stream_to)
        return _parse_response(response)
    except (requests.RequestException, ValueError) as e:
        # JSONDecodeError inherits from ValueError
        logger.debug(f"Request to {url} ({method}) failed: {e}")
        failure = e
    finally:
        headers.clear()

    try:
        error = classify_failure(
            http, base_url, credential, failure, response, timeout=timeout
        )
    finally:
        if response is not None:
            response.close()
    raise error from failure
