"""Composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle. The rate limiter is built here once and shared by
every request through the single fetcher instance.
"""
from __future__ import annotations

from typing import Any
from loguru import logger

from embed.app.application.embed_service import EmbedService
from embed.app.application.resolver import MetadataResolver
from embed.app.config.settings import Settings
from embed.app.core import SERVICE_NAME
from embed.app.domain.fetcher import RateLimitedFetcher
from embed.app.domain.rate_limit import RateBudget, TokenBucketLimiter
from embed.app.infrastructure.http.factory import create_http_client
from embed.app.ports.http_client import AbstractHttpClient


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class AppDependencies:
    """Holds wired embed dependencies and their lifecycle."""

    def __init__(
        self,
        *,
        settings: Settings,
        http_client: AbstractHttpClient | None = None,
        limiter: TokenBucketLimiter | None = None,
    ) -> None:
        self._settings = settings
        self._http_client = http_client
        self._limiter = limiter
        self._fetcher: RateLimitedFetcher | None = None
        self._embed_service: EmbedService | None = None
        self._connected = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def fetcher(self) -> RateLimitedFetcher:
        if self._fetcher is None:
            raise RuntimeError("fetcher is not initialized")
        return self._fetcher

    @property
    def embed_service(self) -> EmbedService:
        if self._embed_service is None:
            raise RuntimeError("embed_service is not initialized")
        return self._embed_service

    async def connect(self) -> None:
        settings = self._settings
        if self._http_client is None:
            self._http_client = create_http_client(settings)
        if self._limiter is None:
            self._limiter = TokenBucketLimiter(
                RateBudget(
                    refill_interval_seconds=settings.rate_limit_interval_seconds,
                    burst=settings.rate_limit_burst,
                )
            )

        default_headers: dict[str, str] | None = None
        if settings.fetch_user_agent:
            default_headers = {"User-Agent": settings.fetch_user_agent}

        self._fetcher = RateLimitedFetcher(
            self._http_client,
            self._limiter,
            connect_timeout_seconds=settings.fetch_connect_timeout_seconds,
            read_timeout_seconds=settings.fetch_read_timeout_seconds,
            default_headers=default_headers,
        )
        resolver = MetadataResolver(
            self._fetcher,
            author_endpoint=settings.author_endpoint,
            cover_endpoint=settings.cover_endpoint,
            cover_url_template=settings.cover_url_template,
            site_url_template=settings.site_url_template,
            preferred_languages=settings.preferred_languages,
        )
        self._embed_service = EmbedService(
            self._fetcher,
            resolver,
            manga_endpoint=settings.manga_endpoint,
        )
        self._connected = True
        _log(
            "dependencies_connected",
            rate_limit_interval_seconds=settings.rate_limit_interval_seconds,
            rate_limit_burst=settings.rate_limit_burst,
        )

    async def close(self) -> None:
        if self._http_client is not None:
            try:
                await self._http_client.close()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._http_client = None

        self._fetcher = None
        self._embed_service = None
        self._connected = False


def create_app_dependencies(settings: Settings | None = None) -> AppDependencies:
    return AppDependencies(settings=settings or Settings())
