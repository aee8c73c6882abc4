"""Unit tests for the application entry point.

The TestClient is used without a ``with`` block so the lifespan (logging
setup and super admin bootstrap) does not run and no database is needed.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from infrastructure.database.dependencies import get_read_session
from main import app


def _session(execute: AsyncMock) -> AsyncMock:
    session = AsyncMock()
    transaction = AsyncMock()
    transaction.__aenter__.return_value = None
    transaction.__aexit__.return_value = False
    session.begin = MagicMock(return_value=transaction)
    session.execute = execute
    return session


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_request_id_is_generated(client):
    response = client.get("/health")

    assert len(response.headers["X-Request-ID"]) == 26


def test_health_db_connected(client):
    session = _session(AsyncMock())
    app.dependency_overrides[get_read_session] = lambda: session

    response = client.get("/health/db")

    assert response.json() == {"status": "ok", "connected": True}
    session.execute.assert_awaited_once()


def test_health_db_unreachable(client):
    session = _session(AsyncMock(side_effect=OSError("connection refused")))
    app.dependency_overrides[get_read_session] = lambda: session

    response = client.get("/health/db")

    body = response.json()
    assert body["connected"] is False
    assert body["error"] == "connection refused"


def test_routers_are_mounted():
    paths = {route.path for route in app.routes}

    assert "/iam/workspaces" in paths
    assert "/workspaces/{workspace_id}/tickets" in paths
