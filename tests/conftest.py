from __future__ import annotations

import json
from typing import Any

import pytest
from fastapi import FastAPI

from embed.app.application.embed_service import EmbedService
from embed.app.application.resolver import MetadataResolver
from embed.app.domain.fetcher import RateLimitedFetcher
from embed.app.domain.rate_limit import RateBudget, TokenBucketLimiter
from embed.app.ports.http_client import RequestTimeout
from embed.app.routers.embed import embed_router
from embed.app.routers.health import health_router

MANGA_ENDPOINT = "https://api.test/manga/{}"
AUTHOR_ENDPOINT = "https://api.test/author/{}"
COVER_ENDPOINT = "https://api.test/cover/{}"
COVER_URL_TEMPLATE = "https://uploads.mangadex.org/covers/{}/{}"
SITE_URL_TEMPLATE = "https://mangadex.org/title/{}"


class FakeClock:
    """Manual clock; ``sleep`` advances time instead of waiting."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeResponse:
    def __init__(self, status_code: int, content: bytes, url: str) -> None:
        self.status_code = status_code
        self.content = content
        self.url = url


class FakeHttpClient:
    """Implements AbstractHttpClient for tests. Routes by exact URL; unknown URLs answer 404.

    A route value may be a dict/list (200 JSON), a ``(status, body)`` tuple, raw bytes
    (200 with that body) or an exception instance to raise.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[str] = []
        self.request_headers: list[dict[str, str] | None] = []
        self.closed = False

    async def get(
        self,
        url: str,
        *,
        timeout: RequestTimeout,
        headers: dict[str, str] | None = None,
    ) -> FakeResponse:
        self.requests.append(url)
        self.request_headers.append(headers)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(404, b'{"result":"error"}', url)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, tuple):
            status, body = route
            return FakeResponse(status, body if isinstance(body, bytes) else json.dumps(body).encode(), url)
        if isinstance(route, bytes):
            return FakeResponse(200, route, url)
        return FakeResponse(200, json.dumps(route).encode(), url)

    async def close(self) -> None:
        self.closed = True


def manga_doc(
    title: dict[str, str] | list | None = None,
    description: dict[str, str] | list | None = None,
    relationships: list[dict[str, str]] | None = None,
    manga_id: str = "abc123",
) -> dict[str, Any]:
    return {
        "result": "ok",
        "data": {
            "id": manga_id,
            "type": "manga",
            "attributes": {
                "title": title if title is not None else {},
                "description": description if description is not None else {},
            },
            "relationships": relationships or [],
        },
    }


def author_doc(name: str) -> dict[str, Any]:
    return {"result": "ok", "data": {"type": "author", "attributes": {"name": name}}}


def cover_doc(file_name: str) -> dict[str, Any]:
    return {"result": "ok", "data": {"type": "cover_art", "attributes": {"fileName": file_name, "volume": "1"}}}


def build_fetcher(
    client: FakeHttpClient,
    *,
    clock: FakeClock | None = None,
    budget: RateBudget | None = None,
) -> RateLimitedFetcher:
    clock = clock or FakeClock()
    limiter = TokenBucketLimiter(budget or RateBudget(2.0, 5), clock=clock, sleep=clock.sleep)
    return RateLimitedFetcher(client, limiter, connect_timeout_seconds=1.0, read_timeout_seconds=1.0)


def build_resolver(fetcher: RateLimitedFetcher, *, preferred_languages: list[str] | None = None) -> MetadataResolver:
    return MetadataResolver(
        fetcher,
        author_endpoint=AUTHOR_ENDPOINT,
        cover_endpoint=COVER_ENDPOINT,
        cover_url_template=COVER_URL_TEMPLATE,
        site_url_template=SITE_URL_TEMPLATE,
        preferred_languages=preferred_languages or [],
    )


def build_service(client: FakeHttpClient) -> EmbedService:
    fetcher = build_fetcher(client)
    return EmbedService(fetcher, build_resolver(fetcher), manga_endpoint=MANGA_ENDPOINT)


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def http_client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture()
def test_app(http_client: FakeHttpClient) -> FastAPI:
    app = FastAPI()
    app.state.embed_service = build_service(http_client)
    app.include_router(health_router)
    app.include_router(embed_router)
    return app
