"""Unit tests for the request/response mapper and error normalizer."""

from __future__ import annotations

import json

import httpx
import pytest

from chromakit.context import build_context
from chromakit.errors import service_message
from chromakit.mapper import (
    OperationRequest,
    decode_collection,
    decode_collection_list,
    decode_count,
    decode_heartbeat,
    decode_text,
    encode_body,
    execute,
    send,
)
from contracts.collection import Collection
from contracts.errors import ErrorKind
from contracts.result import Failure, Success
from contracts.settings import ClientSettings

CTX = build_context(ClientSettings(headers={"X-Chroma-Token": "t0k"})).unwrap()


def _http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _response(status: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status, request=httpx.Request("GET", "http://localhost:8000/"), **kwargs)


class TestEncodeBody:
    def test_canonical_json(self) -> None:
        body = {"name": "docs", "metadata": None, "get_or_create": False}
        assert encode_body(body) == b'{"get_or_create":false,"metadata":null,"name":"docs"}'

    def test_utf8(self) -> None:
        assert encode_body({"name": "données"}) == '{"name":"données"}'.encode("utf-8")


class TestSend:
    @pytest.mark.asyncio
    async def test_body_request_headers_and_payload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        req = OperationRequest("POST", "collections", scoped=True, body={"name": "a"})
        result = await send(_http(handler), CTX, req)

        assert isinstance(result, Success)
        sent = seen[0]
        assert sent.method == "POST"
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["accept"] == "application/json"
        assert sent.headers["x-chroma-token"] == "t0k"
        assert sent.content == b'{"name":"a"}'
        assert sent.url.params["tenant"] == "default_tenant"

    @pytest.mark.asyncio
    async def test_bodyless_request_has_no_content_type(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=1)

        req = OperationRequest("GET", "heartbeat", scoped=False)
        await send(_http(handler), CTX, req)

        assert "content-type" not in seen[0].headers
        assert seen[0].content == b""
        assert not seen[0].url.params

    @pytest.mark.asyncio
    async def test_extra_headers_applied(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        req = OperationRequest("GET", "version", scoped=False, extra_headers={"X-Trace": "abc"})
        await send(_http(handler), CTX, req)
        assert seen[0].headers["x-trace"] == "abc"

    @pytest.mark.asyncio
    async def test_user_content_type_never_duplicated(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        ctx = build_context(ClientSettings(headers={"content-type": "text/plain"})).unwrap()
        req = OperationRequest(
            "POST",
            "collections",
            scoped=True,
            body={"name": "a"},
            extra_headers={"accept": "application/json"},
        )
        await send(_http(handler), ctx, req)
        assert seen[0].headers.get_list("content-type") == ["application/json"]
        assert seen[0].headers.get_list("accept") == ["application/json"]

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        result = await send(_http(handler), CTX, OperationRequest("GET", "version", scoped=False))
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.REQUEST
        assert "Connection refused" in result.error.message
        assert result.error.detail["exception"] == "ConnectError"

    @pytest.mark.asyncio
    async def test_timeout_is_request_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = await send(_http(handler), CTX, OperationRequest("GET", "version", scoped=False))
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.REQUEST

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 400, 401, 404, 409, 422, 500, 503])
    async def test_non_success_status(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json={"error": "Boom", "message": "it broke"})

        result = await send(_http(handler), CTX, OperationRequest("GET", "version", scoped=False))
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.RESPONSE_STATUS
        assert result.error.status_code == status
        assert result.error.message == "it broke"


class TestExecute:
    @pytest.mark.asyncio
    async def test_decodes_success(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"nanosecond heartbeat": 1712345678901234567})

        result = await execute(
            _http(handler), CTX, OperationRequest("GET", "heartbeat", scoped=False), decode_heartbeat
        )
        assert result == Success(1712345678901234567)

    @pytest.mark.asyncio
    async def test_missing_field_is_parse_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"name": "docs", "metadata": None})

        result = await execute(
            _http(handler),
            CTX,
            OperationRequest("POST", "collections", scoped=True, body={"name": "docs"}),
            decode_collection,
        )
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.RESPONSE_PARSE
        assert "id" in result.error.message
        assert result.error.status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_json_is_parse_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>proxy error</html>")

        result = await execute(
            _http(handler), CTX, OperationRequest("GET", "heartbeat", scoped=False), decode_heartbeat
        )
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.RESPONSE_PARSE
        assert result.error.detail["body"] == "<html>proxy error</html>"

    @pytest.mark.asyncio
    async def test_status_error_skips_decoding(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="not json at all")

        result = await execute(
            _http(handler), CTX, OperationRequest("GET", "heartbeat", scoped=False), decode_heartbeat
        )
        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.RESPONSE_STATUS
        assert result.error.message == "not json at all"


class TestDecoders:
    def test_collection_keeps_metadata(self) -> None:
        body = {
            "name": "docs",
            "id": "c0ffee",
            "metadata": {"hnsw:space": "cosine", "owner": "me"},
            "tenant": "default_tenant",
            "database": "default_database",
            "dimension": 384,
        }
        col = decode_collection(_response(json=body))
        assert col == Collection(
            name="docs",
            id="c0ffee",
            metadata={"hnsw:space": "cosine", "owner": "me"},
            tenant="default_tenant",
            database="default_database",
        )

    def test_collection_list(self) -> None:
        body = [{"name": "a", "id": "1", "metadata": None}, {"name": "b", "id": "2"}]
        cols = decode_collection_list(_response(json=body))
        assert [c.name for c in cols] == ["a", "b"]
        assert cols[1].metadata is None

    def test_collection_list_rejects_object(self) -> None:
        with pytest.raises(ValueError):
            decode_collection_list(_response(json={"name": "a", "id": "1"}))

    def test_count(self) -> None:
        assert decode_count(_response(json=3)) == 3

    def test_heartbeat_rejects_negative(self) -> None:
        with pytest.raises(ValueError):
            decode_heartbeat(_response(json={"nanosecond heartbeat": -1}))

    @pytest.mark.parametrize("body,expected", [('"0.5.23"', "0.5.23"), ("0.4.22\n", "0.4.22")])
    def test_text(self, body: str, expected: str) -> None:
        assert decode_text(_response(text=body)) == expected


class TestServiceMessage:
    def test_prefers_message(self) -> None:
        resp = _response(409, json={"error": "UniqueConstraintError", "message": "exists"})
        assert service_message(resp) == "exists"

    def test_error_field(self) -> None:
        resp = _response(500, json={"error": "ValueError('Collection docs does not exist.')"})
        assert service_message(resp) == "ValueError('Collection docs does not exist.')"

    def test_fastapi_detail_list(self) -> None:
        detail = [{"loc": ["query", "tenant"], "msg": "field required"}]
        resp = _response(422, json={"detail": detail})
        assert json.loads(service_message(resp)) == detail

    def test_empty_body_uses_reason_phrase(self) -> None:
        assert service_message(_response(404)) == "Not Found"
