from __future__ import annotations

from typing import Any, Iterable, Mapping

from loguru import logger

from embed.app.core import SERVICE_NAME
from embed.app.domain.fetcher import RateLimitedFetcher, UpstreamError
from embed.app.domain.models import (
    AuthorDocument,
    CoverDocument,
    MangaDocument,
    PreviewFields,
    Relationship,
)

AUTHOR_RELATIONSHIP = "author"
COVER_RELATIONSHIP = "cover_art"
TITLE_SEPARATOR = " - "


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).warning("")


def pick_primary_language(titles: Mapping[str, str], preferred: Iterable[str] = ()) -> str | None:
    """First preferred language present in ``titles``, else the first delivered key."""
    for language in preferred:
        if language in titles:
            return language
    return next(iter(titles), None)


def pick_description(descriptions: Mapping[str, str], language: str | None) -> str:
    """Description in ``language`` if present, else the last entry in delivered order."""
    chosen = ""
    for lang, text in descriptions.items():
        chosen = text
        if lang == language:
            break
    return chosen


class MetadataResolver:
    """
    Folds a primary manga record and its dependent lookups into PreviewFields.

    Author and cover lookups go through the shared RateLimitedFetcher one at a
    time, in relationship order. A failed dependent lookup leaves its field as
    it was and is logged; it never fails the whole resolve.
    """

    def __init__(
        self,
        fetcher: RateLimitedFetcher,
        *,
        author_endpoint: str,
        cover_endpoint: str,
        cover_url_template: str,
        site_url_template: str,
        preferred_languages: Iterable[str] = (),
    ) -> None:
        self._fetcher = fetcher
        self._author_endpoint = author_endpoint
        self._cover_endpoint = cover_endpoint
        self._cover_url_template = cover_url_template
        self._site_url_template = site_url_template
        self._preferred_languages = tuple(preferred_languages)

    def canonical_url(self, manga_id: str) -> str:
        return self._site_url_template.format(manga_id)

    async def resolve(self, record: MangaDocument | None, manga_id: str) -> PreviewFields:
        canonical = self.canonical_url(manga_id)
        if record is None:
            return PreviewFields(canonical_url=canonical)

        attributes = record.data.attributes
        language = pick_primary_language(attributes.title, self._preferred_languages)
        title = attributes.title.get(language, "") if language is not None else ""
        description = pick_description(attributes.description, language)

        image_url = ""
        for relationship in record.data.relationships:
            if relationship.type == AUTHOR_RELATIONSHIP:
                author = await self._author_name(relationship, manga_id)
                if author is not None:
                    title = TITLE_SEPARATOR.join((title, author))
            elif relationship.type == COVER_RELATIONSHIP:
                file_name = await self._cover_file_name(relationship, manga_id)
                if file_name is not None:
                    image_url = self._cover_url_template.format(manga_id, file_name)

        return PreviewFields(
            title=title,
            description=description,
            canonical_url=canonical,
            image_url=image_url,
        )

    async def _author_name(self, relationship: Relationship, manga_id: str) -> str | None:
        try:
            document = await self._fetcher.fetch_record(
                self._author_endpoint, relationship.id, AuthorDocument
            )
        except UpstreamError as exc:
            _log(
                "dependent_lookup_failed",
                manga_id=manga_id,
                relationship_type=relationship.type,
                relationship_id=relationship.id,
                error=str(exc),
            )
            return None
        return document.data.attributes.name

    async def _cover_file_name(self, relationship: Relationship, manga_id: str) -> str | None:
        try:
            document = await self._fetcher.fetch_record(
                self._cover_endpoint, relationship.id, CoverDocument
            )
        except UpstreamError as exc:
            _log(
                "dependent_lookup_failed",
                manga_id=manga_id,
                relationship_type=relationship.type,
                relationship_id=relationship.id,
                error=str(exc),
            )
            return None
        return document.data.attributes.file_name
