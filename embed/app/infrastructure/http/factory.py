"""HTTP client factory: builds AbstractHttpClient from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from embed.app.config.settings import Settings
from embed.app.ports.http_client import AbstractHttpClient
from embed.app.infrastructure.http.httpx_client import HttpxHttpClient


def create_http_client(settings: Settings) -> AbstractHttpClient:
    """Build an HTTP client from settings. Timeouts and headers are applied per-request by the fetcher."""
    async_client = httpx.AsyncClient(follow_redirects=True)
    return HttpxHttpClient(async_client)
