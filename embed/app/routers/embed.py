from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import HTMLResponse
from loguru import logger

from embed.app.core import SERVICE_NAME
from embed.app.routers.templates import templates


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).error("")


embed_router = APIRouter(tags=["Embed"])


@embed_router.get(
    "/",
    response_class=HTMLResponse,
    summary="Landing page",
    description="Static page explaining how to turn a MangaDex title link into an embed link.",
)
async def index(request: Request) -> Response:
    return templates.TemplateResponse(request, "index.html", {})


async def _render_embed(request: Request, md_id: str) -> Response:
    service = getattr(request.app.state, "embed_service", None)
    if service is None:
        return Response(status_code=503, content="Embed service not available")

    outcome = await service.build_embed(md_id)
    if not outcome.success:
        _log("primary_lookup_failed", manga_id=md_id, error=outcome.error)

    return templates.TemplateResponse(
        request,
        "embed.html",
        outcome.fields.to_template_context(),
        status_code=200 if outcome.success else 400,
    )


_EMBED_RESPONSES: dict[int | str, dict[str, Any]] = {
    200: {"description": "Manga found; preview page rendered."},
    400: {"description": "Manga lookup failed; preview page rendered with whatever could be derived from the id."},
    503: {"description": "Service dependencies not initialized."},
}


@embed_router.get(
    "/title/{md_id}",
    response_class=HTMLResponse,
    summary="Render link preview",
    description="Fetches manga, author and cover metadata from MangaDex and renders Open Graph tags with a redirect to the title page.",
    responses=_EMBED_RESPONSES,
)
async def embed_title(request: Request, md_id: str) -> Response:
    return await _render_embed(request, md_id)


@embed_router.get(
    "/title/{md_id}/{manga_name}",
    response_class=HTMLResponse,
    summary="Render link preview (slugged URL)",
    description="Same as /title/{md_id}; the trailing name segment mirrors MangaDex URLs and is ignored.",
    responses=_EMBED_RESPONSES,
)
async def embed_title_with_name(request: Request, md_id: str, manga_name: str) -> Response:
    return await _render_embed(request, md_id)
