"""Request/response mapper.

Every client operation is described by one OperationRequest and one
decoder. ``execute`` turns the pair into an HTTP exchange and a typed
OperationResult, delegating failures to the error normalizer.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

import httpx
from pydantic import TypeAdapter

from chromakit import errors
from chromakit.context import ConnectionContext
from chromakit.urls import build_url
from contracts.collection import Collection, CollectionResponse, HeartbeatResponse
from contracts.result import Failure, OperationResult, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")
Decoder = Callable[[httpx.Response], T]


@dataclass(frozen=True)
class OperationRequest:
    """Everything needed to issue one API call. Built fresh per call."""

    method: str
    path: str
    scoped: bool
    body: dict[str, Any] | None = None
    params: dict[str, Any] = field(default_factory=dict)
    extra_headers: dict[str, str] = field(default_factory=dict)


def encode_body(body: dict[str, Any]) -> bytes:
    """Canonical JSON: sorted keys, compact separators, UTF-8."""
    return json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")


async def send(
    http: httpx.AsyncClient,
    context: ConnectionContext,
    request: OperationRequest,
) -> OperationResult[httpx.Response]:
    """Build the URL, send the request and check the status class."""
    url_result = build_url(context, request.path, request.scoped, request.params)
    if isinstance(url_result, Failure):
        return url_result
    url = url_result.value

    has_body = request.body is not None
    headers = context.headers(with_body=has_body)
    headers.update(request.extra_headers)
    content = encode_body(request.body) if has_body else None

    logger.debug("%s %s", request.method, url)
    try:
        response = await http.request(request.method, url, headers=headers, content=content)
    except httpx.RequestError as exc:
        return errors.from_transport_error(exc, url)

    logger.debug("%s %s -> %d", request.method, url, response.status_code)
    if not response.is_success:
        return errors.from_status(response)
    return Success(response)


async def execute(
    http: httpx.AsyncClient,
    context: ConnectionContext,
    request: OperationRequest,
    decode: Decoder[T],
) -> OperationResult[T]:
    """Send ``request`` and decode a successful response with ``decode``."""
    sent = await send(http, context, request)
    if isinstance(sent, Failure):
        return sent
    response = sent.value
    try:
        return Success(decode(response))
    except (ValueError, TypeError, KeyError) as exc:
        # pydantic.ValidationError and json.JSONDecodeError are ValueErrors
        return errors.from_parse_error(exc, response)


# ── decoders ─────────────────────────────────────────────────────────

_collection_list = TypeAdapter(list[CollectionResponse])
_count = TypeAdapter(int)


def decode_heartbeat(response: httpx.Response) -> int:
    return HeartbeatResponse.model_validate_json(response.content).nanosecond_heartbeat


def decode_collection(response: httpx.Response) -> Collection:
    return CollectionResponse.model_validate_json(response.content).to_collection()


def decode_collection_list(response: httpx.Response) -> list[Collection]:
    return [c.to_collection() for c in _collection_list.validate_json(response.content)]


def decode_count(response: httpx.Response) -> int:
    return _count.validate_json(response.content)


def decode_text(response: httpx.Response) -> str:
    """Raw body text. A bare JSON string (``"0.5.0"``) loses its quotes."""
    text = response.text.strip()
    if len(text) >= 2 and text[0] == text[-1] == '"':
        text = text[1:-1]
    return text


def decode_nothing(response: httpx.Response) -> None:
    return None
