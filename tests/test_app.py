"""Tests for the application factory and its middleware."""

from __future__ import annotations

import warnings
from typing import TYPE_CHECKING

import pytest
from litestar.testing import TestClient

from inkroom.app import create_app

if TYPE_CHECKING:
    from pathlib import Path


class TestCreateApp:
    """Tests for create_app."""

    def test_correlation_id_echoed(self) -> None:
        """Test that a caller-supplied correlation id comes back on the response."""
        with TestClient(app=create_app()) as client:
            response = client.get("/health", headers={"X-Correlation-ID": "req-42"})

        assert response.status_code == 200
        assert response.headers["x-correlation-id"] == "req-42"

    def test_correlation_id_generated(self) -> None:
        """Test that a correlation id is generated when none is sent."""
        with TestClient(app=create_app()) as client:
            response = client.get("/api/stats")

        assert response.headers["x-correlation-id"]

    def test_error_body_carries_correlation_id(self) -> None:
        """Test that structured errors repeat the request's correlation id."""
        with TestClient(app=create_app()) as client:
            response = client.get("/nope", headers={"X-Request-ID": "trace-7"})

        assert response.status_code == 404
        assert response.json()["correlation_id"] == "trace-7"

    def test_websocket_disabled(self) -> None:
        """Test that the relay can be switched off."""
        app = create_app(enable_websocket=False)

        assert not any(route.path.startswith("/yjs") for route in app.routes)

    def test_database_backed(self, tmp_path: Path) -> None:
        """Test that a database URL switches storage and adds a health probe."""
        pytest.importorskip("aiosqlite")
        app = create_app(database_url=f"sqlite:///{tmp_path}/app.sqlite")

        with TestClient(app=app) as client:
            client.post("/auth/register", json={"username": "ana", "password": "s3cret"})
            created = client.post(
                "/api/drawings",
                json={"title": "Persisted", "size": {"w": 10, "h": 10}, "background": "#fff", "strokes": []},
            )
            health = client.get("/health").json()

            assert created.status_code == 201
            assert client.get(f"/api/drawings/{created.json()['id']}").json()["title"] == "Persisted"
            assert [c["name"] for c in health["components"]] == ["relay", "database"]
            assert health["ok"] is True

    def test_handler_parameters_declared_explicitly(self, tmp_path: Path) -> None:
        """Test that building and serving the app raises no deprecation for handler parameters."""
        (tmp_path / "index.html").write_text("<h1>lobby</h1>")
        (tmp_path / "room.html").write_text("<h1>room</h1>")

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            app = create_app(static_dir=str(tmp_path))
            with TestClient(app=app) as client:
                client.post("/auth/register", json={"username": "ana", "password": "s3cret"})
                assert client.get("/").status_code == 200
                assert client.get("/room/studio", follow_redirects=False).status_code == 200
                assert client.get("/api/rooms").status_code == 200
                with client.websocket_connect("/yjs/studio") as ws:
                    ws.receive_bytes()

        deprecated = [
            str(warning.message)
            for warning in caught
            if issubclass(warning.category, DeprecationWarning)
            and any(name in str(warning.message) for name in ("room_path", "static_dir", "placeholder_names"))
        ]
        assert deprecated == []
