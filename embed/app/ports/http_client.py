"""HTTP client port used by the rate-limited fetcher to reach the MangaDex API.

The fetcher only needs the status and the raw body of a GET: it accepts a 200
and decodes the JSON itself. Anything else the transport reports (refused
connection, timeout) comes back as an HttpClientError.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class HttpClientError(Exception):
    """Raised when the upstream could not be reached or the exchange broke off."""


class HttpClientTimeoutError(HttpClientError):
    """Raised when the request times out."""


@runtime_checkable
class HttpResponse(Protocol):
    """Status and fully-read body of one upstream GET."""

    @property
    def status_code(self) -> int: ...

    @property
    def content(self) -> bytes: ...

    @property
    def url(self) -> str: ...


@dataclass(frozen=True)
class RequestTimeout:
    """Per-request connect and read timeouts in seconds, taken from settings."""

    connect_seconds: float
    read_seconds: float


@runtime_checkable
class AbstractHttpClient(Protocol):
    """Port: one GET per permit. Implementations live in infrastructure."""

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """GET ``url`` and read the whole body.

        Every status is returned as-is; deciding that only 200 counts is the
        fetcher's job. Raises HttpClientTimeoutError or HttpClientError when no
        response arrives.
        """
        ...

    async def close(self) -> None:
        """Release resources (e.g. connection pool). No-op allowed if nothing to close."""
        ...
