"""Rate-limited fetcher: one permit per upstream GET, JSON decoded at the boundary.

Uses the HTTP port (AbstractHttpClient); client is built in the composition root.
Every call waits on the shared TokenBucketLimiter before touching the network.
The permit is spent even when the request then fails; nothing is retried.
"""
from __future__ import annotations

import json
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

from embed.app.domain.rate_limit import TokenBucketLimiter
from embed.app.ports.http_client import (
    AbstractHttpClient,
    HttpClientError,
    HttpClientTimeoutError,
    RequestTimeout,
)

RecordT = TypeVar("RecordT", bound=BaseModel)


class UpstreamError(Exception):
    """Base error for upstream lookup failures."""


class UpstreamTransportError(UpstreamError):
    """Raised when the upstream could not be reached."""


class UpstreamTimeoutError(UpstreamTransportError):
    """Raised when an upstream request times out."""


class UpstreamStatusError(UpstreamError):
    """Raised when the upstream answers with anything but 200."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"http status {status_code} for {url}")
        self.url = url
        self.status_code = status_code


class UpstreamParseError(UpstreamError):
    """Raised when the body is not JSON or not the expected document shape."""


class RateLimitedFetcher:
    """Fetches upstream JSON documents through a shared rate limiter."""

    def __init__(
        self,
        client: AbstractHttpClient,
        limiter: TokenBucketLimiter,
        connect_timeout_seconds: float,
        read_timeout_seconds: float,
        *,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._client = client
        self._limiter = limiter
        self._timeout = RequestTimeout(
            connect_seconds=connect_timeout_seconds,
            read_seconds=read_timeout_seconds,
        )
        self._default_headers = dict(default_headers) if default_headers else {}

    @property
    def limiter(self) -> TokenBucketLimiter:
        return self._limiter

    async def fetch_json(self, endpoint: str, identifier: str) -> Any:
        """GET ``endpoint`` with ``identifier`` substituted and return the parsed body."""
        url = endpoint.format(identifier)
        await self._limiter.acquire()
        try:
            response = await self._client.get(
                url,
                timeout=self._timeout,
                headers=self._default_headers or None,
            )
        except HttpClientTimeoutError as exc:
            raise UpstreamTimeoutError(str(exc)) from exc
        except HttpClientError as exc:
            raise UpstreamTransportError(str(exc)) from exc

        logger.debug("upstream response: url={}, status code={}", url, response.status_code)
        if response.status_code != 200:
            raise UpstreamStatusError(url, response.status_code)

        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise UpstreamParseError(f"could not decode response from {url}: {exc}") from exc

    async def fetch_record(self, endpoint: str, identifier: str, schema: type[RecordT]) -> RecordT:
        """Like ``fetch_json`` but validated into ``schema``; shape mismatches raise UpstreamParseError."""
        payload = await self.fetch_json(endpoint, identifier)
        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamParseError(
                f"unexpected {schema.__name__} shape for {identifier}: {exc.error_count()} error(s)"
            ) from exc
