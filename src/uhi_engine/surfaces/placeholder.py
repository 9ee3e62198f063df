"""Static placeholder surface.

Shown whenever no interactive surface is ready: no token configured,
initialization still pending, or initialization failed.  It performs no
I/O, but it still tracks drawables, selection and camera so the page keeps
reflecting what the user picked from the cluster list.
"""

from __future__ import annotations

import html

from uhi_engine.layers.drawables import Drawables
from uhi_engine.selection.state import SelectionState
from uhi_engine.surfaces.base import CameraState, MapSurface, SurfaceConfig


class PlaceholderSurface(MapSurface):
    kind = "placeholder"

    def __init__(self, message: str = "Interactive map unavailable. Provide a map token to enable it.") -> None:
        self.message = message
        self._drawables = Drawables()
        self._selection = SelectionState()
        self._camera: CameraState | None = None

    async def initialize(self, container: str, token: str, config: SurfaceConfig) -> None:
        self._camera = config.overview_camera

    def apply_layers(self, drawables: Drawables, selection: SelectionState) -> None:
        self._drawables = drawables
        self._selection = selection

    def set_camera(self, camera: CameraState) -> None:
        self._camera = camera

    def snapshot(self) -> dict:
        """Plain-data view of what the placeholder is showing."""
        return {
            "camera": self._camera.to_dict() if self._camera else None,
            "selection": self._selection.to_dict(),
            "layers": [h.layer for h in self._drawables.heatmaps],
            "markers": [
                {
                    "id": m.cluster_id,
                    "name": m.name,
                    "zone": m.zone.value,
                    "selected": m.cluster_id == self._selection.selected_id,
                    "popup": m.cluster_id == self._selection.active_marker_id,
                }
                for m in self._drawables.markers
            ],
        }

    def render(self) -> str:
        rows = []
        for m in self._drawables.markers:
            classes = []
            if m.cluster_id == self._selection.selected_id:
                classes.append("selected")
            if m.cluster_id == self._selection.active_marker_id:
                classes.append("active")
            rows.append(
                f'<li class="{" ".join(classes)}" data-cluster="{html.escape(m.cluster_id)}">'
                f'<span class="dot" style="background:{m.color}"></span>'
                f"{html.escape(m.name)} <small>{html.escape(m.zone.label)}</small></li>"
            )
        layers = ", ".join(html.escape(h.label) for h in self._drawables.heatmaps) or "none"
        focus = ""
        if self._camera is not None:
            c = self._camera
            focus = f"<p>View: {c.center.lat:.4f}, {c.center.lng:.4f} @ zoom {c.zoom:g}</p>"
        return (
            "<!DOCTYPE html><html><head><meta charset=\"utf-8\"><title>Map</title>"
            "<style>body{background:#242f3e;color:#e5e7eb;font-family:sans-serif}"
            ".dot{display:inline-block;width:10px;height:10px;border-radius:50%;margin-right:6px}"
            "li.selected{font-weight:bold}li.active{text-decoration:underline}</style></head>"
            f"<body><div class=\"placeholder\"><p>{html.escape(self.message)}</p>"
            f"<p>Active layers: {layers}</p>{focus}<ul>{''.join(rows)}</ul></div></body></html>"
        )

    def destroy(self) -> None:
        self._drawables = Drawables()
