"""Error normalizer.

Turns whatever went wrong at a pipeline stage (an httpx exception, a
non-2xx response, a decoding error) into a Failure of the matching kind.
"""

from __future__ import annotations

import json

import httpx

from contracts.errors import ErrorKind
from contracts.result import Failure, fail

_MAX_BODY_CHARS = 500


def from_transport_error(exc: httpx.RequestError, url: httpx.URL | str) -> Failure:
    """Connection refused, DNS failure, timeout, protocol error..."""
    message = str(exc) or type(exc).__name__
    return fail(
        ErrorKind.REQUEST,
        f"Request to {url} failed: {message}",
        detail={"url": str(url), "exception": type(exc).__name__},
    )


def from_status(response: httpx.Response) -> Failure:
    """A response whose status is outside the 2xx class."""
    return fail(
        ErrorKind.RESPONSE_STATUS,
        service_message(response),
        status_code=response.status_code,
        detail={"url": str(response.request.url)} if _has_request(response) else {},
    )


def from_parse_error(exc: Exception, response: httpx.Response) -> Failure:
    """A 2xx response whose body could not be decoded."""
    return fail(
        ErrorKind.RESPONSE_PARSE,
        f"Unexpected response body: {exc}",
        status_code=response.status_code,
        detail={"body": _snippet(response)},
    )


def service_message(response: httpx.Response) -> str:
    """Best human-readable message for an error response.

    Chroma error bodies look like ``{"error": ..., "message": ...}``;
    FastAPI-style ones use ``detail``. Anything else falls back to the
    raw text, then to the reason phrase.
    """
    text = _snippet(response, limit=None)
    try:
        data = json.loads(text) if text else None
    except ValueError:
        data = None

    if isinstance(data, dict):
        for key in ("message", "error", "detail"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else json.dumps(value)
    if text:
        return text[:_MAX_BODY_CHARS]
    return response.reason_phrase or f"HTTP {response.status_code}"


def _snippet(response: httpx.Response, limit: int | None = _MAX_BODY_CHARS) -> str:
    try:
        text = response.text
    except (UnicodeDecodeError, httpx.ResponseNotRead):
        return ""
    return text.strip()[:limit]


def _has_request(response: httpx.Response) -> bool:
    try:
        response.request
    except RuntimeError:
        return False
    return True
