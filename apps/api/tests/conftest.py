from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from tubeloop.config import LinkConfig, PlayerConfig, SegmentConfig, Settings

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        log_dir=str(tmp_path / "logs"),
        player=PlayerConfig(provider="simulated"),
        segments=SegmentConfig(default_label_prefix="Loop"),
        links=LinkConfig(),
    )


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    from routes.health import router as health_router
    from routes.links import router as links_router

    test_app = FastAPI()
    test_app.state.settings = settings
    test_app.include_router(links_router)
    test_app.include_router(health_router)
    return test_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
