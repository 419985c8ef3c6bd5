"""
HTTP access to the upstream HMS REST API.

All resource adapters go through :func:`api_request`, which joins the
configured base URL with an endpoint, sends JSON and returns the parsed
body.  Failures surface as :class:`ApiError`; adapters decide whether to
propagate them or fall back to stub fixtures via
:func:`with_stub_fallback`.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, TypeVar

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

T = TypeVar('T')

_session: Optional[requests.Session] = None


class ApiError(Exception):
    """A failed upstream call.

    ``status`` is the HTTP status code, or ``0`` when the request never
    produced a response (connection refused, timeout ...).  ``data`` holds
    the decoded error body when the upstream sent one.
    """

    def __init__(self, message: str, status: int, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data


class InvalidRequest(ValueError):
    """Raised before any network call when a request is malformed."""


def get_session() -> requests.Session:
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({'Content-Type': 'application/json', 'Accept': 'application/json'})
    return _session


def stub_enabled() -> bool:
    return bool(getattr(settings, 'HMS_ENABLE_STUB_DATA', False))


def _decode_error_body(response: requests.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {'data': data}


def _handle_response(response: requests.Response) -> Any:
    if not response.ok:
        error_data = _decode_error_body(response)
        message = error_data.get('message') or f'HTTP error! status: {response.status_code}'
        logger.error('API request failed [%s]: %s (url=%s)', response.status_code, message, response.url)
        raise ApiError(message, response.status_code, error_data)

    # 204 No Content is common for DELETE
    if response.status_code == 204:
        return None
    content_type = response.headers.get('content-type') or ''
    if 'application/json' not in content_type:
        return None
    text = response.text
    if not text:
        return None
    return json.loads(text)


def api_request(endpoint: str, method: str = 'GET', *, params: Optional[dict] = None,
                json_body: Any = None) -> Any:
    """Send one request to the upstream API and return the decoded body.

    ``params`` entries whose value is ``None`` are dropped so callers can
    pass optional filters straight through.
    """
    url = f"{settings.HMS_API_BASE_URL}{endpoint}"
    query = {k: v for k, v in (params or {}).items() if v is not None and v != ''}
    logger.debug('%s %s params=%s', method, url, query)
    try:
        response = get_session().request(
            method, url, params=query or None, json=json_body, timeout=settings.HMS_API_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.error('Network error calling %s %s: %s', method, url, e)
        raise ApiError(f'Network error: {e}', 0) from e
    logger.debug('%s %s -> %s', method, url, response.status_code)
    return _handle_response(response)


def describe_error(exc: BaseException, default: str) -> str:
    """Return a user-facing message for a failed call.

    Upstream bodies usually carry ``message`` (or ``error``) and sometimes
    a list or mapping of field ``errors``/``details``; both are folded into
    one line.
    """
    if not isinstance(exc, ApiError):
        return str(exc) or default
    data = exc.data if isinstance(exc.data, dict) else {}
    message = data.get('message') or data.get('error') or exc.message or default
    details = data.get('errors') or data.get('details')
    if details:
        if isinstance(details, list):
            message += ': ' + ', '.join(str(d) for d in details)
        elif isinstance(details, dict):
            message += ': ' + json.dumps(details)
        else:
            message += f': {details}'
    return message


def ensure_success(payload: Any, message: str) -> Any:
    """Reject ``{"success": false}`` bodies that arrive with a 2xx status."""
    if isinstance(payload, dict) and payload.get('success') is False:
        raise ApiError(payload.get('message') or message, 200, payload)
    return payload


def with_stub_fallback(live: Callable[[], T], stub: Callable[[], T], *, label: str) -> T:
    """Run ``live``; serve ``stub`` only if it raises while stubs are enabled."""
    try:
        return live()
    except Exception as e:
        logger.error('Error fetching %s: %s', label, e)
        if not stub_enabled():
            raise
        logger.warning('Serving stub %s', label)
        return stub()
