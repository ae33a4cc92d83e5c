"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from src.custody.main import app
from src.custody.services.rate_limiter import limiter


@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Turn off per-endpoint rate limits so repeated calls in a test are not throttled."""
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def client() -> TestClient:
    """
    Provide FastAPI test client for API testing.

    The lifespan is not run; tests inject collaborators through
    ``app.dependency_overrides``.

    Example:
        >>> def test_health(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    yield TestClient(app)
    app.dependency_overrides = {}
