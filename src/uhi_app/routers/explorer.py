"""Map explorer API: cluster list, selection, layer toggles and map view.

Every route reads the MapExplorer from ``app.state.explorer`` and answers
503 when it has not been created.  Unknown cluster ids and layer names are
404s; the explorer state is unchanged in both cases.
"""

from __future__ import annotations

import queue
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse
from loguru import logger
from pydantic import BaseModel

from uhi_engine.errors import NotFound, UnknownLayer

router = APIRouter(prefix="/api/explorer", tags=["explorer"])


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class ClusterSummary(BaseModel):
    """List row: id, name, zone, metrics."""
    id: str
    name: str
    zone: str
    metrics: dict[str, float]


class ClusterDetail(ClusterSummary):
    """Detail panel content for one cluster."""
    lat: float
    lng: float
    boundary: Optional[list[list[float]]] = None  # [[lat, lng], ...]


class SelectionResponse(BaseModel):
    selected_id: Optional[str] = None
    active_marker_id: Optional[str] = None
    detail: Optional[ClusterDetail] = None


class TokenRequest(BaseModel):
    """Map surface access token."""
    token: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _get_explorer(request: Request):
    explorer = getattr(request.app.state, "explorer", None)
    if explorer is None:
        raise HTTPException(status_code=503, detail="Map explorer not available")
    return explorer


def _detail(explorer, cluster) -> ClusterDetail:
    return ClusterDetail(
        id=cluster.id,
        name=cluster.name,
        zone=explorer.zones.zone_of(cluster).value,
        metrics=dict(cluster.metrics),
        lat=cluster.coordinates.lat,
        lng=cluster.coordinates.lng,
        boundary=[[p.lat, p.lng] for p in cluster.boundary] if cluster.boundary else None,
    )


def _selection(explorer) -> SelectionResponse:
    state = explorer.selection_state
    cluster = explorer.detail_panel()
    return SelectionResponse(
        selected_id=state.selected_id,
        active_marker_id=state.active_marker_id,
        detail=_detail(explorer, cluster) if cluster else None,
    )


# ---------------------------------------------------------------------------
# Clusters and selection
# ---------------------------------------------------------------------------

@router.get("/clusters", response_model=list[ClusterSummary])
async def list_clusters(request: Request):
    """Cluster list projection in registry order."""
    explorer = _get_explorer(request)
    return [ClusterSummary(**view.to_dict()) for view in explorer.clusters()]


@router.get("/clusters/{cluster_id}", response_model=ClusterDetail)
async def get_cluster(cluster_id: str, request: Request):
    explorer = _get_explorer(request)
    try:
        cluster = explorer.registry.get(cluster_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _detail(explorer, cluster)


@router.post("/clusters/{cluster_id}/select", response_model=SelectionResponse)
async def select_cluster(cluster_id: str, request: Request):
    """Commit a selection and fly the map to it."""
    explorer = _get_explorer(request)
    if not explorer.on_cluster_activated(cluster_id):
        raise HTTPException(status_code=404, detail=f"Cluster not found: {cluster_id}")
    return _selection(explorer)


@router.post("/clusters/{cluster_id}/click", response_model=SelectionResponse)
async def click_cluster_marker(cluster_id: str, request: Request):
    """Map marker click: routed through the surface's marker handlers."""
    explorer = _get_explorer(request)
    try:
        explorer.surface.click_marker(cluster_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _selection(explorer)


@router.post("/clusters/{cluster_id}/hover", response_model=SelectionResponse)
async def hover_cluster(cluster_id: str, request: Request):
    """Marker hover-enter: open the popup for this cluster."""
    explorer = _get_explorer(request)
    try:
        explorer.surface.hover_marker(cluster_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _selection(explorer)


@router.delete("/clusters/{cluster_id}/hover", response_model=SelectionResponse)
async def leave_cluster(cluster_id: str, request: Request):
    """Marker hover-leave."""
    explorer = _get_explorer(request)
    explorer.surface.leave_marker(cluster_id)
    return _selection(explorer)


@router.get("/selection", response_model=SelectionResponse)
async def get_selection(request: Request):
    return _selection(_get_explorer(request))


@router.delete("/selection/popup", response_model=SelectionResponse)
async def dismiss_popup(request: Request):
    """Close the popup; the committed selection and detail panel stay."""
    explorer = _get_explorer(request)
    explorer.synchronizer.deselect()
    return _selection(explorer)


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

@router.get("/layers")
async def get_layers(request: Request):
    explorer = _get_explorer(request)
    return explorer.layers.state.as_dict()


@router.post("/layers/{layer}/toggle")
async def toggle_layer(layer: str, request: Request):
    explorer = _get_explorer(request)
    try:
        state = explorer.toggle_layer(layer)
    except UnknownLayer as e:
        raise HTTPException(status_code=404, detail=str(e))
    return state.as_dict()


@router.get("/legend")
async def get_legend(request: Request):
    return _get_explorer(request).legend()


@router.get("/drawables")
async def get_drawables(request: Request):
    """Current frame as a GeoJSON FeatureCollection."""
    return _get_explorer(request).drawables_geojson()


# ---------------------------------------------------------------------------
# Map surface
# ---------------------------------------------------------------------------

@router.get("/surface")
async def get_surface(request: Request):
    return _get_explorer(request).surface.status()


@router.post("/surface/token")
async def set_surface_token(body: TokenRequest, request: Request):
    """Supply the map token.  Starts initialization if the view is mounted."""
    explorer = _get_explorer(request)
    started = explorer.configure(body.token) is not None
    if started:
        logger.info("Map token received, surface initializing")
    status = explorer.surface.status()
    status["started"] = started
    return status


@router.get("/map", response_class=HTMLResponse)
async def get_map(request: Request):
    """Rendered map, or the placeholder while the surface is not ready."""
    return HTMLResponse(content=_get_explorer(request).render_map())


@router.get("/notifications")
async def get_notifications(request: Request):
    """Drain pending surface-ready / surface-init-failed notifications."""
    explorer = _get_explorer(request)
    q: queue.Queue | None = getattr(request.app.state, "notifications", None)
    if q is None:
        return []
    return explorer.drain_notifications(q)
