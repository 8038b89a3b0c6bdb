import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.dday.clock import get_today  # noqa: E402
from src.dday.main import app  # noqa: E402
from src.dday.repositories import InMemoryRepository, get_repository  # noqa: E402

TODAY = date(2025, 3, 10)


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def client(repo):
    """TestClient with a fresh repository and the clock pinned to TODAY."""
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_today] = lambda: TODAY
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
