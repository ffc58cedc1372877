"""httpx transport for upstream catalog lookups.

One pooled AsyncClient is shared by every request the service handles; it is
opened in the composition root and closed on shutdown.
"""
from __future__ import annotations

import httpx

from embed.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    HttpResponse,
    RequestTimeout,
)


class _HttpxResponseAdapter:
    """Exposes the status, body and final URL of an httpx.Response."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def content(self) -> bytes:
        return self._response.content

    @property
    def url(self) -> str:
        return str(self._response.url)


class HttpxHttpClient(AbstractHttpClient):
    """AbstractHttpClient over httpx.AsyncClient; error statuses pass through untouched."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        httpx_timeout = httpx.Timeout(
            connect=timeout.connect_seconds,
            read=timeout.read_seconds,
            write=timeout.read_seconds,
            pool=timeout.connect_seconds,
        )
        try:
            response = await self._client.get(
                url,
                timeout=httpx_timeout,
                headers=headers or {},
            )
            return _HttpxResponseAdapter(response)
        except httpx.TimeoutException as exc:
            raise HttpClientTimeoutError(f"timeout while fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise HttpClientError(f"http fetch failed for {url}: {exc}") from exc

    async def close(self) -> None:
        await self._client.aclose()
