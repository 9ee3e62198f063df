"""Unit tests for the explorer API router (/api/explorer/*).

Uses FastAPI TestClient against a minimal app holding a real MapExplorer
over the built-in clusters and a placeholder surface; no network needed.
"""
from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from uhi_app.routers.explorer import router
from uhi_engine import MapExplorer
from uhi_engine.clusters import default_registry
from uhi_engine.surfaces import PlaceholderSurface


def _make_app(explorer=None, notifications=True):
    """Create a minimal FastAPI app with the explorer router."""
    app = FastAPI()
    app.include_router(router)
    app.state.explorer = explorer
    if explorer is not None and notifications:
        app.state.notifications = explorer.subscribe_notifications()
    return app


@pytest.fixture
def explorer():
    return MapExplorer(default_registry(), PlaceholderSurface())


@pytest.fixture
def client(explorer):
    return TestClient(_make_app(explorer))


@pytest.mark.unit
class TestUnavailable:

    @pytest.mark.parametrize("path", [
        "/api/explorer/clusters",
        "/api/explorer/selection",
        "/api/explorer/layers",
        "/api/explorer/surface",
        "/api/explorer/map",
    ])
    def test_503_without_explorer(self, path):
        client = TestClient(_make_app(None))
        assert client.get(path).status_code == 503


@pytest.mark.unit
class TestClusters:
    """GET /api/explorer/clusters[/id]"""

    def test_list(self, client):
        resp = client.get("/api/explorer/clusters")
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 7
        assert data[0]["id"] == "mumbai"
        assert data[0]["zone"] == "hot"
        assert data[0]["metrics"]["vegetation"] == 22.0

    def test_detail(self, client):
        resp = client.get("/api/explorer/clusters/pune")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "Pune"
        assert data["lat"] == pytest.approx(18.5204)
        assert len(data["boundary"]) == 6

    def test_detail_404(self, client):
        resp = client.get("/api/explorer/clusters/goa")
        assert resp.status_code == 404
        assert "goa" in resp.json()["detail"]


@pytest.mark.unit
class TestSelection:

    def test_select(self, client, explorer):
        resp = client.post("/api/explorer/clusters/nagpur-wardha/select")
        assert resp.status_code == 200
        data = resp.json()
        assert data["selected_id"] == "nagpur-wardha"
        assert data["active_marker_id"] == "nagpur-wardha"
        assert data["detail"]["name"] == "Nagpur-Wardha"
        assert explorer.surface.camera.zoom == 10.0

    def test_select_unknown_keeps_selection(self, client):
        client.post("/api/explorer/clusters/pune/select")
        resp = client.post("/api/explorer/clusters/goa/select")
        assert resp.status_code == 404
        assert client.get("/api/explorer/selection").json()["selected_id"] == "pune"

    def test_hover_and_leave(self, client):
        client.post("/api/explorer/clusters/pune/select")
        data = client.post("/api/explorer/clusters/mumbai/hover").json()
        assert data["selected_id"] == "pune"
        assert data["active_marker_id"] == "mumbai"
        data = client.delete("/api/explorer/clusters/mumbai/hover").json()
        assert data["active_marker_id"] is None
        assert data["detail"]["id"] == "pune"

    def test_marker_click_selects_and_focuses(self, client, explorer):
        resp = client.post("/api/explorer/clusters/pune/click")
        assert resp.status_code == 200
        data = resp.json()
        assert data["selected_id"] == "pune"
        assert data["active_marker_id"] == "pune"
        assert data["detail"]["name"] == "Pune"
        assert explorer.surface.camera.zoom == 10.0

    def test_marker_click_unknown_keeps_selection(self, client):
        client.post("/api/explorer/clusters/mumbai/select")
        resp = client.post("/api/explorer/clusters/goa/click")
        assert resp.status_code == 404
        assert "goa" in resp.json()["detail"]
        assert client.get("/api/explorer/selection").json()["selected_id"] == "mumbai"

    def test_hover_unknown(self, client):
        assert client.post("/api/explorer/clusters/goa/hover").status_code == 404

    def test_dismiss_popup(self, client):
        client.post("/api/explorer/clusters/pune/select")
        data = client.delete("/api/explorer/selection/popup").json()
        assert data == {
            "selected_id": "pune",
            "active_marker_id": None,
            "detail": data["detail"],
        }
        assert data["detail"]["id"] == "pune"

    def test_empty_selection(self, client):
        data = client.get("/api/explorer/selection").json()
        assert data == {"selected_id": None, "active_marker_id": None, "detail": None}


@pytest.mark.unit
class TestLayers:

    def test_get_layers(self, client):
        assert client.get("/api/explorer/layers").json() == {
            "intensity": True, "health": True, "vegetation": True, "boundaries": True,
        }

    def test_toggle(self, client):
        data = client.post("/api/explorer/layers/health/toggle").json()
        assert data["health"] is False
        assert data["intensity"] is True
        features = client.get("/api/explorer/drawables").json()["features"]
        layers = {f["properties"].get("layer") for f in features if f["properties"]["kind"] == "heatmap"}
        assert layers == {"intensity", "vegetation"}

    def test_toggle_unknown(self, client):
        resp = client.post("/api/explorer/layers/traffic/toggle")
        assert resp.status_code == 404
        assert all(client.get("/api/explorer/layers").json().values())

    def test_legend(self, client):
        data = client.get("/api/explorer/legend").json()
        assert [e["zone"] for e in data] == ["hot", "moderately-hot", "warm", "cold"]


@pytest.mark.unit
class TestSurface:

    def test_status_without_token(self, client):
        data = client.get("/api/explorer/surface").json()
        assert data["state"] == "uninitialized"
        assert data["kind"] == "placeholder"
        assert data["has_token"] is False

    def test_token_before_mount_does_not_start(self, client):
        data = client.post("/api/explorer/surface/token", json={"token": "pk.test"}).json()
        assert data["started"] is False
        assert data["has_token"] is True
        assert data["state"] == "uninitialized"

    def test_token_requires_body(self, client):
        assert client.post("/api/explorer/surface/token", json={}).status_code == 422

    def test_map_is_placeholder(self, client):
        client.post("/api/explorer/clusters/pune/select")
        resp = client.get("/api/explorer/map")
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert 'data-cluster="pune"' in resp.text

    def test_notifications_empty(self, client):
        assert client.get("/api/explorer/notifications").json() == []

    def test_notifications_without_queue(self, explorer):
        client = TestClient(_make_app(explorer, notifications=False))
        assert client.get("/api/explorer/notifications").json() == []
