"""
API client: thin async wrapper over httpx.

Every verb returns the decoded JSON payload or raises ApiError.
Cookies set by the backend are kept on the client and sent back
(credentialed requests).
"""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx

from storefront.http._errors import ApiError, message_from_body

logger = logging.getLogger(__name__)

type Method = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
type Files = dict[str, Any]


class ApiClient:
    """
    REST client for the storefront backend.

    Example:
        async with ApiClient("http://localhost:3333") as api:
            data = await api.get("/checkout/status/ord_1")
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 15.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url,
                timeout=timeout,
                headers=headers,
                transport=transport,
            )
        self._client = client

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def request(
        self,
        method: Method,
        path: str,
        body: Any = None,
        *,
        files: Files | None = None,
    ) -> Any:
        """Send one request. Raises ApiError on transport or HTTP failure."""
        kwargs: dict[str, Any] = {}
        if files is not None:
            # multipart: plain fields travel as form data next to the files
            kwargs["files"] = files
            if body is not None:
                kwargs["data"] = body
        elif body is not None:
            kwargs["json"] = body

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out", method, path)
            raise ApiError(None, "Tempo de resposta esgotado") from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(None, f"Falha de conexão: {e}") from e

        return self._handle_response(method, path, response)

    def _handle_response(self, method: Method, path: str, response: httpx.Response) -> Any:
        payload = _decode(response)

        if response.is_success:
            return payload

        message = message_from_body(payload) or response.reason_phrase or f"HTTP {response.status_code}"
        logger.info("%s %s -> %s: %s", method, path, response.status_code, message)
        raise ApiError(response.status_code, message, payload)

    async def get(self, path: str, body: Any = None) -> Any:
        return await self.request("GET", path, body)

    async def post(self, path: str, body: Any = None, *, files: Files | None = None) -> Any:
        return await self.request("POST", path, body, files=files)

    async def put(self, path: str, body: Any = None, *, files: Files | None = None) -> Any:
        return await self.request("PUT", path, body, files=files)

    async def patch(self, path: str, body: Any = None) -> Any:
        return await self.request("PATCH", path, body)

    async def delete(self, path: str, body: Any = None) -> Any:
        return await self.request("DELETE", path, body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


__all__ = ("ApiClient", "Method", "Files")
