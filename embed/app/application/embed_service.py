"""
Builds the preview for one manga id: primary lookup, then dependent resolution.
Returns an outcome; router translates it to an HTTP status and a rendered page.
"""
from __future__ import annotations

from dataclasses import dataclass

from embed.app.application.resolver import MetadataResolver
from embed.app.domain.fetcher import RateLimitedFetcher, UpstreamError
from embed.app.domain.models import MangaDocument, PreviewFields


@dataclass(frozen=True)
class EmbedOutcome:
    """Result of EmbedService.build_embed.
    success=True => primary lookup succeeded; fields hold whatever dependents resolved.
    success=False => primary lookup failed; error set, fields carry only what the id alone gives.
    """
    success: bool
    fields: PreviewFields
    error: str | None = None


class EmbedService:
    def __init__(
        self,
        fetcher: RateLimitedFetcher,
        resolver: MetadataResolver,
        *,
        manga_endpoint: str,
    ) -> None:
        self._fetcher = fetcher
        self._resolver = resolver
        self._manga_endpoint = manga_endpoint

    async def build_embed(self, manga_id: str) -> EmbedOutcome:
        record: MangaDocument | None = None
        error: str | None = None
        try:
            record = await self._fetcher.fetch_record(self._manga_endpoint, manga_id, MangaDocument)
        except UpstreamError as exc:
            error = str(exc)

        fields = await self._resolver.resolve(record, manga_id)
        return EmbedOutcome(success=error is None, fields=fields, error=error)
