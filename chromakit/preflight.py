"""Pre-flight gate: readiness probe run before every substantive call."""

from __future__ import annotations

import logging

import httpx

from chromakit.context import ConnectionContext
from chromakit.urls import build_url
from contracts.errors import ErrorKind
from contracts.result import Failure, OperationResult, Success, fail

logger = logging.getLogger(__name__)

PREFLIGHT_PATH = "pre-flight-checks"


async def check_ready(
    http: httpx.AsyncClient, context: ConnectionContext
) -> OperationResult[None]:
    """GET the readiness endpoint and require a 2xx status.

    Reports the observed status code or the transport message; does not
    retry and does not look at the body.
    """
    url_result = build_url(context, PREFLIGHT_PATH, scoped=False)
    if isinstance(url_result, Failure):
        return url_result
    url = url_result.value

    try:
        response = await http.get(url, headers=context.headers())
    except httpx.RequestError as exc:
        message = str(exc) or type(exc).__name__
        return fail(
            ErrorKind.PREFLIGHT,
            f"Pre-flight check against {url} failed: {message}",
            detail={"url": str(url), "exception": type(exc).__name__},
        )

    if not response.is_success:
        logger.debug("Pre-flight %s -> %d", url, response.status_code)
        return fail(
            ErrorKind.PREFLIGHT,
            f"Service not ready: pre-flight check returned {response.status_code}",
            status_code=response.status_code,
            detail={"url": str(url)},
        )
    return Success(None)
