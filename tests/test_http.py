from __future__ import annotations

import json

import httpx
import pytest

from storefront.http import ApiClient, ApiError, DEFAULT_ERROR_MESSAGE, error_message


def client_for(handler) -> ApiClient:
    return ApiClient("http://api.test", transport=httpx.MockTransport(handler))


async def test_json_body_and_decoded_response() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    async with client_for(handler) as api:
        data = await api.post("/things", {"a": 1})

    assert data == {"ok": True}
    assert seen[0].method == "POST"
    assert seen[0].headers["content-type"] == "application/json"


async def test_get_with_json_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    async with client_for(handler) as api:
        assert await api.get("/search", {"q": "abnt"}) == []

    assert seen[0].method == "GET"
    assert json.loads(seen[0].content) == {"q": "abnt"}



async def test_empty_body_decodes_to_none() -> None:
    async with client_for(lambda _: httpx.Response(204)) as api:
        assert await api.delete("/things/1") is None


async def test_error_status_raises_with_body_message() -> None:
    async with client_for(lambda _: httpx.Response(400, json={"error": "Curso não encontrado"})) as api:
        with pytest.raises(ApiError) as info:
            await api.get("/courses/x")

    assert info.value.status == 400
    assert info.value.message == "Curso não encontrado"
    assert error_message(info.value) == "Curso não encontrado"


async def test_transport_failure_has_no_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with client_for(handler) as api:
        with pytest.raises(ApiError) as info:
            await api.get("/anything")

    assert info.value.status is None
    assert info.value.is_transport


async def test_multipart_upload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"url": "https://cdn.test/f"})

    async with client_for(handler) as api:
        await api.post("/upload", {"folder": "covers"}, files={"file": ("a.txt", b"hello", "text/plain")})

    assert seen[0].headers["content-type"].startswith("multipart/form-data")


def test_error_message_fallbacks() -> None:
    assert error_message(None) == DEFAULT_ERROR_MESSAGE
    assert error_message("boom") == "boom"
    assert error_message(RuntimeError("bad")) == "bad"
