"""Connection context: the immutable configuration every request reads.

Built once per client from ClientSettings; no operation ever mutates it.
"""

from __future__ import annotations

import re

import httpx
from pydantic import BaseModel, ConfigDict

from contracts.errors import ErrorKind
from contracts.result import OperationResult, Success, fail
from contracts.settings import ClientSettings

JSON_MIME = "application/json"

# RFC 9110 token characters
_HEADER_NAME = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Visible ASCII, space and tab only
_HEADER_VALUE = re.compile(r"^[\t\x20-\x7e]*$")


class ConnectionContext(BaseModel):
    """Origin, tenant/database scope and default headers for one client."""

    model_config = ConfigDict(frozen=True)

    origin: str
    tenant: str
    database: str
    default_headers: dict[str, str] = {}

    def headers(self, with_body: bool = False) -> httpx.Headers:
        """Return fresh, case-insensitive headers for a single request."""
        out = httpx.Headers(self.default_headers)
        if with_body:
            out["Content-Type"] = JSON_MIME
        return out

    def with_scope(
        self, tenant: str | None = None, database: str | None = None
    ) -> OperationResult[ConnectionContext]:
        """Same origin and headers, different tenant and/or database."""
        tenant = self.tenant if tenant is None else tenant
        database = self.database if database is None else database
        problem = _check_scope(tenant, database)
        if problem:
            return fail(ErrorKind.CONFIGURATION, problem)
        return Success(self.model_copy(update={"tenant": tenant, "database": database}))


def build_context(settings: ClientSettings) -> OperationResult[ConnectionContext]:
    """Validate settings and assemble the ConnectionContext."""
    problem = _check_scope(settings.tenant, settings.database)
    if problem:
        return fail(ErrorKind.CONFIGURATION, problem)

    headers: dict[str, str] = {}
    for name, value in settings.headers.items():
        if not _HEADER_NAME.match(name):
            return fail(
                ErrorKind.CONFIGURATION,
                f"Invalid header name: {name!r}",
                detail={"header": name},
            )
        if not _HEADER_VALUE.match(value):
            return fail(
                ErrorKind.CONFIGURATION,
                f"Invalid value for header {name!r}",
                detail={"header": name},
            )
        headers[name] = value
    # Accept is always JSON; Content-Type is set per request when a body is sent
    headers = {
        k: v for k, v in headers.items() if k.lower() not in ("accept", "content-type")
    }
    headers["Accept"] = JSON_MIME

    scheme = "https" if settings.ssl else "http"
    host = settings.host.strip().rstrip("/")
    origin = f"{scheme}://{host}:{settings.port}"

    return Success(
        ConnectionContext(
            origin=origin,
            tenant=settings.tenant,
            database=settings.database,
            default_headers=headers,
        )
    )


def _check_scope(tenant: str, database: str) -> str | None:
    if not tenant.strip():
        return "Tenant must be a non-empty string"
    if not database.strip():
        return "Database must be a non-empty string"
    return None
