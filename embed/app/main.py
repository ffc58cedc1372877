from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from loguru import logger

from embed.app.composition import create_app_dependencies
from embed.app.config.settings import Settings
from embed.app.core import SERVICE_NAME
from embed.app.core.logging import configure_logging
from embed.app.routers.embed import embed_router
from embed.app.routers.health import health_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = getattr(app.state, "settings", None) or Settings()
    configure_logging(settings)
    logger.bind(service_name=SERVICE_NAME, event="embed_starting").info("")
    dependencies = create_app_dependencies(settings)
    await dependencies.connect()
    try:
        app.state.settings = settings
        app.state.dependencies = dependencies
        app.state.embed_service = dependencies.embed_service
        yield
    finally:
        logger.bind(service_name=SERVICE_NAME, event="embed_stopping").info("")
        app.state.embed_service = None
        await dependencies.close()


def create_app() -> FastAPI:
    application = FastAPI(
        title="MangaDex Embed",
        version="0.1.0",
        lifespan=lifespan,
    )

    @application.middleware("http")
    async def access_log(request: Request, call_next):
        response = await call_next(request)
        logger.bind(
            service_name=SERVICE_NAME,
            event="http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        ).info("")
        return response

    application.include_router(health_router)
    application.include_router(embed_router)
    return application


app = create_app()


def main() -> None:
    settings = Settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
