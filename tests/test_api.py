"""Tests for the REST API controllers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import uuid4

from helpers import YjsPeer

if TYPE_CHECKING:
    from litestar import Litestar
    from litestar.testing import TestClient

    from inkroom.plugin import InkroomPlugin


def drawing_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Whiteboard",
        "size": {"w": 800, "h": 600},
        "background": "#ffffff",
        "strokes": [{"tool": "pen", "points": [[0, 0], [5, 5]]}],
    }
    payload.update(overrides)
    return payload


class TestDrawingController:
    """Tests for /api/drawings."""

    def test_list_empty(self, client: TestClient[Litestar]) -> None:
        """Test listing when nothing is stored."""
        response = client.get("/api/drawings")

        assert response.status_code == 200
        assert response.json() == []

    def test_create_requires_auth(self, client: TestClient[Litestar]) -> None:
        """Test that anonymous writes are rejected."""
        response = client.post("/api/drawings", json=drawing_payload())

        assert response.status_code == 401
        assert response.json()["message"] == "Auth required"

    def test_create_and_get(self, auth_client: TestClient[Litestar]) -> None:
        """Test creating a drawing and reading it back."""
        response = auth_client.post("/api/drawings", json=drawing_payload())

        assert response.status_code == 201
        drawing_id = response.json()["id"]

        response = auth_client.get(f"/api/drawings/{drawing_id}")
        assert response.status_code == 200
        assert response.json() == drawing_payload()

    def test_list_summaries(self, auth_client: TestClient[Litestar]) -> None:
        """Test that the listing carries summaries, newest update first."""
        first = auth_client.post("/api/drawings", json=drawing_payload(title="First")).json()["id"]
        second = auth_client.post("/api/drawings", json=drawing_payload(title="Second")).json()["id"]
        auth_client.put(f"/api/drawings/{first}", json={"title": "First, edited"})

        listing = auth_client.get("/api/drawings").json()

        assert [item["id"] for item in listing] == [first, second]
        assert listing[0]["title"] == "First, edited"
        assert set(listing[0]) == {"id", "title", "created_at", "updated_at"}

    def test_get_missing(self, client: TestClient[Litestar]) -> None:
        """Test reading an unknown drawing."""
        response = client.get(f"/api/drawings/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"] == "Not found"

    def test_invalid_size(self, auth_client: TestClient[Litestar]) -> None:
        """Test that non-positive sizes are rejected with details."""
        response = auth_client.post("/api/drawings", json=drawing_payload(size={"w": 0, "h": 600}))

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "invalid_payload"
        assert body["details"][0]["field"] == "size.w"

    def test_empty_title(self, auth_client: TestClient[Litestar]) -> None:
        """Test that an empty title is rejected."""
        response = auth_client.post("/api/drawings", json=drawing_payload(title=""))

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_payload"

    def test_missing_fields(self, auth_client: TestClient[Litestar]) -> None:
        """Test that payloads without required fields are rejected."""
        response = auth_client.post("/api/drawings", json={"title": "x"})

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_payload"

    def test_partial_update(self, auth_client: TestClient[Litestar]) -> None:
        """Test that PUT merges only the provided fields."""
        drawing_id = auth_client.post("/api/drawings", json=drawing_payload()).json()["id"]

        response = auth_client.put(f"/api/drawings/{drawing_id}", json={"background": "#000000"})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        stored = auth_client.get(f"/api/drawings/{drawing_id}").json()
        assert stored == drawing_payload(background="#000000")

    def test_update_missing(self, auth_client: TestClient[Litestar]) -> None:
        """Test updating an unknown drawing."""
        response = auth_client.put(f"/api/drawings/{uuid4()}", json={"title": "x"})

        assert response.status_code == 404

    def test_delete(self, auth_client: TestClient[Litestar]) -> None:
        """Test deleting a drawing, twice."""
        drawing_id = auth_client.post("/api/drawings", json=drawing_payload()).json()["id"]

        assert auth_client.delete(f"/api/drawings/{drawing_id}").json() == {"ok": True}
        assert auth_client.get(f"/api/drawings/{drawing_id}").status_code == 404
        assert auth_client.delete(f"/api/drawings/{drawing_id}").json() == {"ok": True}

    def test_delete_requires_auth(self, client: TestClient[Litestar]) -> None:
        """Test that anonymous deletes are rejected."""
        assert client.delete(f"/api/drawings/{uuid4()}").status_code == 401

    def test_png_export(self, auth_client: TestClient[Litestar]) -> None:
        """Test that only PNG data URLs are accepted."""
        url = f"/api/drawings/{uuid4()}/png"

        ok = auth_client.post(url, json={"dataUrl": "data:image/png;base64,iVBORw0KGgo="})
        bad = auth_client.post(url, json={"dataUrl": "data:image/jpeg;base64,abc"})
        missing = auth_client.post(url, json={})

        assert ok.status_code == 200
        assert ok.json() == {"ok": True}
        assert bad.status_code == 400
        assert bad.json()["message"] == "Invalid PNG dataUrl"
        assert missing.status_code == 400


class TestStatsController:
    """Tests for /api/stats."""

    def test_stats_empty(self, client: TestClient[Litestar]) -> None:
        """Test statistics of an empty store."""
        assert client.get("/api/stats").json() == {"count": 0, "lastUpdated": None}

    def test_stats(self, auth_client: TestClient[Litestar]) -> None:
        """Test that statistics follow the store."""
        auth_client.post("/api/drawings", json=drawing_payload())
        auth_client.post("/api/drawings", json=drawing_payload())

        stats = auth_client.get("/api/stats").json()

        assert stats["count"] == 2
        assert stats["lastUpdated"] is not None


class TestRoomController:
    """Tests for /api/rooms."""

    def test_rooms_not_cached(self, client: TestClient[Litestar]) -> None:
        """Test that the directory forbids caching."""
        response = client.get("/api/rooms")

        assert response.status_code == 200
        assert response.json() == []
        assert "no-store" in response.headers["cache-control"]

    def test_rooms_listing(self, client: TestClient[Litestar], plugin: InkroomPlugin) -> None:
        """Test that the directory reads the live presence sets."""
        room = plugin.registry.get_or_create("studio-123")
        ana = YjsPeer(name="Ana", color="#f00")
        room.awareness.apply_awareness_update(ana.awareness.encode_awareness_update([ana.client_id]), "test")
        guest = YjsPeer(name="guest")
        room.awareness.apply_awareness_update(guest.awareness.encode_awareness_update([guest.client_id]), "test")

        assert client.get("/api/rooms").json() == [
            {"name": "studio-123", "peers": [{"id": ana.client_id, "name": "Ana", "color": "#f00"}]}
        ]

    def test_save_room(self, auth_client: TestClient[Litestar], plugin: InkroomPlugin) -> None:
        """Test saving a live room document as a drawing."""
        room = plugin.registry.get_or_create("studio-123")
        peer = YjsPeer()
        peer.draw("stroke-1")
        room.doc.apply_update(peer.doc.get_update())

        response = auth_client.post("/api/rooms/studio-123/save", json={"title": "Snapshot"})

        assert response.status_code == 201
        stored = auth_client.get(f"/api/drawings/{response.json()['id']}").json()
        assert stored["title"] == "Snapshot"
        assert stored["strokes"] == ["stroke-1"]
        assert stored["size"] == {"w": 1280, "h": 720}

    def test_save_unknown_room(self, auth_client: TestClient[Litestar]) -> None:
        """Test saving a room nobody ever joined."""
        assert auth_client.post("/api/rooms/nowhere/save").status_code == 404

    def test_save_room_requires_auth(self, client: TestClient[Litestar], plugin: InkroomPlugin) -> None:
        """Test that anonymous saves are rejected."""
        plugin.registry.get_or_create("studio-123")

        assert client.post("/api/rooms/studio-123/save").status_code == 401


class TestPages:
    """Tests for the page routes, health and docs."""

    def test_room_gate_redirects(self, client: TestClient[Litestar]) -> None:
        """Test that anonymous visitors are sent to the lobby with a login prompt."""
        response = client.get("/room/studio-123", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/?room=studio-123&needLogin=1"

    def test_room_page(self, auth_client: TestClient[Litestar]) -> None:
        """Test that logged-in visitors get the room page."""
        response = auth_client.get("/room/studio-123")

        assert response.status_code == 200
        assert "room" in response.text

    def test_index_page(self, client: TestClient[Litestar]) -> None:
        """Test that the lobby is served from the static directory."""
        response = client.get("/")

        assert response.status_code == 200
        assert "lobby" in response.text

    def test_health(self, client: TestClient[Litestar]) -> None:
        """Test the liveness probe."""
        body = client.get("/health").json()

        assert body["ok"] is True
        assert body["status"] == "healthy"
        assert body["rooms"] == 0
        assert body["connections"] == 0

    def test_docs(self, client: TestClient[Litestar]) -> None:
        """Test the route summary."""
        body = client.get("/docs").json()

        assert body["note"] == "* requires auth"
        assert any("/api/rooms" in route for route in body["routes"])

    def test_unknown_route(self, client: TestClient[Litestar]) -> None:
        """Test that unrouted paths get a JSON 404."""
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["message"] == "Route not found"
