from fastapi import FastAPI
from fastapi.testclient import TestClient

from embed.app.config.settings import Settings
from embed.app.main import create_app
from embed.app.routers.health import health_router


def test_live_is_always_200(test_app):
    client = TestClient(test_app)
    r = client.get("/health/live")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_ready_503_when_components_missing():
    app = FastAPI()
    app.include_router(health_router)
    client = TestClient(app)
    r = client.get("/health/ready")
    assert r.status_code == 503


def test_ready_200_when_ready(test_app):
    client = TestClient(test_app)
    r = client.get("/health/ready")
    assert r.status_code == 200


def test_lifespan_wires_and_releases_embed_service():
    app = create_app()
    app.state.settings = Settings(LOG_FILE="")

    with TestClient(app) as client:
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert app.state.dependencies.fetcher.limiter.budget.burst == 5

    assert app.state.embed_service is None
