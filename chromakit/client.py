"""Chroma HTTP client.

Async client for the Chroma v1 REST API. Each public operation runs the
same pipeline (pre-flight check, URL, send, decode) and returns an
OperationResult; nothing is raised to the caller except from the
constructor.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from chromakit.context import ConnectionContext, build_context
from chromakit.mapper import (
    Decoder,
    OperationRequest,
    T,
    decode_collection,
    decode_collection_list,
    decode_count,
    decode_heartbeat,
    decode_nothing,
    decode_text,
    execute,
)
from chromakit.preflight import check_ready
from chromakit.urls import resource_path
from contracts.chroma_api import ChromaAPI
from contracts.collection import Collection, CreateCollectionRequest, ModifyCollectionRequest
from contracts.errors import ChromaClientError, ClientError, ErrorKind
from contracts.result import Failure, OperationResult, Success, fail
from contracts.settings import ClientSettings

logger = logging.getLogger(__name__)


class ChromaHttpClient(ChromaAPI):
    """Chroma client bound to one origin and one tenant/database scope.

    Settings come from a ClientSettings, keyword overrides, or both::

        client = ChromaHttpClient(host="localhost", port=8000)
        async with client:
            beat = await client.heartbeat()

    Pass ``http`` to share an existing httpx.AsyncClient; the client only
    closes transports it created itself.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        _scope: ConnectionContext | None = None,
        **overrides: Any,
    ) -> None:
        if _scope is not None and settings is not None:
            # with_scope: the context is already validated
            resolved = settings.model_copy(
                update={"tenant": _scope.tenant, "database": _scope.database}
            )
            self._context: ConnectionContext = _scope
        else:
            try:
                base = settings.model_dump() if settings is not None else {}
                resolved = ClientSettings(**{**base, **overrides})
            except (ValidationError, TypeError) as exc:
                raise ChromaClientError(
                    ClientError(
                        kind=ErrorKind.CONFIGURATION, message=f"Invalid client settings: {exc}"
                    )
                ) from exc

            # raises ChromaClientError(CONFIGURATION) on bad headers or scope
            self._context = build_context(resolved).unwrap()
        self._settings = resolved
        self._owns_http = http is None
        self._http = http if http is not None else httpx.AsyncClient(timeout=resolved.timeout)

    # ── properties / lifecycle ───────────────────────────────────────

    @property
    def context(self) -> ConnectionContext:
        return self._context

    @property
    def tenant(self) -> str:
        return self._context.tenant

    @property
    def database(self) -> str:
        return self._context.database

    def with_scope(
        self, tenant: str | None = None, database: str | None = None
    ) -> OperationResult[ChromaHttpClient]:
        """A client for another tenant/database sharing this transport."""
        scoped = self._context.with_scope(tenant, database)
        if isinstance(scoped, Failure):
            return scoped
        return Success(type(self)(self._settings, http=self._http, _scope=scoped.value))

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> ChromaHttpClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ── database-level ───────────────────────────────────────────────

    async def heartbeat(self) -> OperationResult[int]:
        return await self._call(
            "heartbeat",
            OperationRequest("GET", "heartbeat", scoped=False),
            decode_heartbeat,
        )

    async def version(self) -> OperationResult[str]:
        return await self._call(
            "version",
            OperationRequest("GET", "version", scoped=False),
            decode_text,
        )

    async def reset(self) -> OperationResult[None]:
        # Servers refuse this unless started with ALLOW_RESET
        return await self._call(
            "reset",
            OperationRequest("POST", "reset", scoped=False),
            decode_nothing,
        )

    # ── collections ──────────────────────────────────────────────────

    async def create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> OperationResult[Collection]:
        return await self._call(
            "create_collection",
            self._create_request(name, metadata, get_or_create=False),
            decode_collection,
        )

    async def get_or_create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> OperationResult[Collection]:
        return await self._call(
            "get_or_create_collection",
            self._create_request(name, metadata, get_or_create=True),
            decode_collection,
        )

    async def get_collection(self, name: str) -> OperationResult[Collection]:
        return await self._call(
            "get_collection",
            OperationRequest("GET", resource_path("collections", name), scoped=True),
            decode_collection,
        )

    async def list_collections(
        self, limit: int | None = None, offset: int | None = None
    ) -> OperationResult[list[Collection]]:
        return await self._call(
            "list_collections",
            OperationRequest(
                "GET",
                "collections",
                scoped=True,
                params={"limit": limit, "offset": offset},
            ),
            decode_collection_list,
        )

    async def count_collections(self) -> OperationResult[int]:
        return await self._call(
            "count_collections",
            OperationRequest("GET", "count_collections", scoped=True),
            decode_count,
        )

    async def modify_collection(
        self,
        collection_id: str,
        new_name: str | None = None,
        new_metadata: dict[str, Any] | None = None,
    ) -> OperationResult[None]:
        body = ModifyCollectionRequest(new_name=new_name, new_metadata=new_metadata)
        return await self._call(
            "modify_collection",
            OperationRequest(
                "PUT",
                resource_path("collections", collection_id),
                scoped=True,
                body=body.model_dump(mode="json", exclude_none=True),
            ),
            decode_nothing,
        )

    async def delete_collection(self, name: str) -> OperationResult[None]:
        return await self._call(
            "delete_collection",
            OperationRequest("DELETE", resource_path("collections", name), scoped=True),
            decode_nothing,
        )

    # ── internal ────────────────────────────────────────────────────

    @staticmethod
    def _create_request(
        name: str, metadata: dict[str, Any] | None, get_or_create: bool
    ) -> OperationRequest:
        body = CreateCollectionRequest(name=name, metadata=metadata, get_or_create=get_or_create)
        return OperationRequest(
            "POST",
            "collections",
            scoped=True,
            body=body.model_dump(mode="json"),
        )

    async def _call(
        self, op: str, request: OperationRequest, decode: Decoder[T]
    ) -> OperationResult[T]:
        if self._http.is_closed:
            return self._report(op, fail(ErrorKind.REQUEST, "Client is closed"))

        ready = await check_ready(self._http, self._context)
        if isinstance(ready, Failure):
            return self._report(op, ready)

        result = await execute(self._http, self._context, request, decode)
        if isinstance(result, Failure):
            return self._report(op, result)
        return result

    @staticmethod
    def _report(op: str, failure: Failure) -> Failure:
        logger.warning("%s failed: %s", op, failure.error)
        return failure
