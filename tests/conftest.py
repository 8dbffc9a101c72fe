"""Pytest configuration and fixtures for inkroom tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from litestar import Litestar
from litestar.testing import TestClient

from inkroom.core.error_handling import get_exception_handlers
from inkroom.core.models import Drawing, Size
from inkroom.plugin import InkroomConfig, InkroomPlugin
from inkroom.realtime.manager import ConnectionManager
from inkroom.realtime.room import RoomRegistry
from inkroom.storage.memory import InMemoryStorage
from inkroom.web.health import HealthController

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


# Storage fixtures


@pytest.fixture
def storage() -> InMemoryStorage:
    """Create a fresh InMemoryStorage instance for each test."""
    return InMemoryStorage()


@pytest.fixture
def sample_drawing() -> Drawing:
    """Create a sample drawing for testing."""
    return Drawing(
        title="Whiteboard",
        size=Size(w=1280, h=720),
        background="#fafafa",
        strokes=[{"tool": "pen", "color": "#000", "points": [[0, 0], [10, 10]]}],
    )


# Realtime fixtures


@pytest.fixture
def registry() -> RoomRegistry:
    """Create an empty room registry."""
    return RoomRegistry()


@pytest.fixture
def manager(registry: RoomRegistry) -> ConnectionManager:
    """Create a connection manager over the test registry."""
    return ConnectionManager(registry)


# App and client fixtures


@pytest.fixture
def plugin(tmp_path: Path) -> InkroomPlugin:
    """Create the inkroom plugin with a static directory holding the pages."""
    (tmp_path / "index.html").write_text("<h1>lobby</h1>")
    (tmp_path / "room.html").write_text("<h1>room</h1>")
    return InkroomPlugin(InkroomConfig(storage=InMemoryStorage(), static_dir=tmp_path))


@pytest.fixture
def app(plugin: InkroomPlugin) -> Litestar:
    """Create a Litestar app with InkroomPlugin for testing."""
    return Litestar(
        route_handlers=[HealthController],
        plugins=[plugin],
        exception_handlers=get_exception_handlers(),
    )


@pytest.fixture
def client(app: Litestar) -> Iterator[TestClient[Litestar]]:
    """Create a test client for the app."""
    with TestClient(app=app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client: TestClient[Litestar]) -> TestClient[Litestar]:
    """A test client with a logged-in session."""
    response = client.post("/auth/register", json={"username": "ana", "password": "s3cret"})
    assert response.status_code == 200
    return client
