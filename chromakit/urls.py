"""URL builder: relative API paths to absolute, validated request URLs."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from chromakit.context import ConnectionContext
from contracts.errors import ErrorKind
from contracts.result import OperationResult, Success, fail

API_ROOT = "api/v1"
_DOT_SEGMENTS = ("", ".", "..")


def resource_path(*segments: str) -> str:
    """Join path segments, percent-encoding each one.

    Identifiers like collection names may contain ``/``, ``?`` or ``#``;
    each segment is encoded so it stays a single segment.
    """
    return "/".join(quote(str(s), safe="") for s in segments)


def build_url(
    context: ConnectionContext,
    relative_path: str,
    scoped: bool,
    params: dict[str, Any] | None = None,
) -> OperationResult[httpx.URL]:
    """Build ``{origin}/api/v1/{relative_path}``.

    Scoped URLs carry the context's tenant and database as query
    parameters. ``params`` entries with a None value are dropped. Empty,
    ``.`` and ``..`` segments are rejected; httpx would otherwise collapse
    them into a different resource.
    """
    segments = relative_path.lstrip("/").split("/")
    if any(seg in _DOT_SEGMENTS for seg in segments):
        return fail(
            ErrorKind.URL,
            f"Invalid path segment in {relative_path!r}",
            detail={"path": relative_path},
        )

    query: list[tuple[str, str]] = [
        (k, str(v)) for k, v in (params or {}).items() if v is not None
    ]
    if scoped:
        query = [(k, v) for k, v in query if k not in ("tenant", "database")]
        query += [("tenant", context.tenant), ("database", context.database)]

    raw = f"{context.origin}/{API_ROOT}/{relative_path.lstrip('/')}"
    try:
        url = httpx.URL(raw, params=query) if query else httpx.URL(raw)
    except (httpx.InvalidURL, ValueError) as exc:
        return fail(ErrorKind.URL, f"Invalid URL {raw!r}: {exc}", detail={"url": raw})

    if url.scheme not in ("http", "https") or not url.host:
        return fail(ErrorKind.URL, f"Not an absolute http(s) URL: {raw!r}", detail={"url": raw})
    return Success(url)
