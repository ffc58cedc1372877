"""
Integration tests against the live MangaDex API.

Requires network. Run with:
  pytest tests/integration -m integration -v
"""
from __future__ import annotations

import asyncio

import pytest

from embed.app.composition import create_app_dependencies
from embed.app.config.settings import Settings

# "Berserk"; long-lived title with author and cover relationships.
KNOWN_MANGA_ID = "801513ba-a712-498c-8f57-cae55b38cc92"
UNKNOWN_MANGA_ID = "00000000-0000-0000-0000-000000000000"


async def _build(manga_id: str):
    deps = create_app_dependencies(Settings(LOG_FILE=""))
    await deps.connect()
    try:
        return await deps.embed_service.build_embed(manga_id)
    finally:
        await deps.close()


@pytest.mark.integration
def test_known_manga_resolves_title_author_and_cover():
    outcome = asyncio.run(_build(KNOWN_MANGA_ID))

    assert outcome.success is True
    assert outcome.fields.title
    assert " - " in outcome.fields.title
    assert outcome.fields.canonical_url == f"https://mangadex.org/title/{KNOWN_MANGA_ID}"
    assert outcome.fields.image_url.startswith(f"https://uploads.mangadex.org/covers/{KNOWN_MANGA_ID}/")


@pytest.mark.integration
def test_unknown_manga_is_a_failed_outcome():
    outcome = asyncio.run(_build(UNKNOWN_MANGA_ID))

    assert outcome.success is False
    assert outcome.fields.canonical_url == f"https://mangadex.org/title/{UNKNOWN_MANGA_ID}"
    assert outcome.fields.title == ""
