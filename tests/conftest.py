"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.algorithms.state import DashboardState
from app.main import create_app
from app.publishers.broadcast import BroadcastHub
from app.utils.config import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment, pointing at an empty build dir."""
    return Settings(
        _env_file=None,
        static_dir=str(tmp_path / "dist"),
        anonymous_worker_name="Anonymous Worker",
        unknown_worker_id="Unknown",
        otel_enabled=False,
    )


@pytest.fixture
def state(settings):
    """Fresh dashboard state with no connections."""
    return DashboardState(settings)


@pytest.fixture
def hub(state) -> BroadcastHub:
    return state.hub


@pytest.fixture
def listener(state):
    """A connected client whose catch-up snapshot has already been consumed."""
    conn = state.connect()
    conn.pending()
    return conn


@pytest.fixture
def client(settings):
    """HTTP/WebSocket test client sharing one event loop for the whole test."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def sample_comment_payload():
    return {"userName": "Alice", "text": "hi", "workerId": "worker-1"}
