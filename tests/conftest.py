from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI

from tests.fakes import CapturingWatchSet, FakeSupervisor
from watcher.app.config.settings import Settings, load_settings
from watcher.app.routers.health import health_router
from watcher.app.routers.register import register_router


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return load_settings(
        REMOTE_URL="http://jobs.local/task/{key}/info",
        WEBHOOK_URL="http://hooks.local/webhook",
        POLL_INTERVAL=1,
        PENDING_DIR=str(tmp_path / "pending"),
    )


@pytest.fixture()
def test_app() -> FastAPI:
    app = FastAPI()
    app.state.watch_set = CapturingWatchSet()
    app.state.supervisor = FakeSupervisor()
    app.state.recovered = True
    app.include_router(health_router)
    app.include_router(register_router)
    return app
