"""Leaflet surface rendered through folium.

Heatmap layers become ``folium.plugins.HeatMap`` overlays fed with
``[lat, lng, weight]`` samples, zone outlines become ``folium.Polygon``
and clusters become zone-coloured ``folium.CircleMarker`` with a popup that
is open only for the active marker.

Initialization performs one network round trip: the tile provider's style
endpoint is fetched with the access token, so a bad token fails here
instead of producing a grey map.
"""

from __future__ import annotations

import html

import folium
import httpx
from folium.plugins import HeatMap
from loguru import logger

from uhi_engine.layers.drawables import Drawables, MarkerPrimitive
from uhi_engine.selection.state import SelectionState
from uhi_engine.surfaces.base import CameraState, MapSurface, SurfaceConfig

_USER_AGENT = "UHI-Explorer/0.1.0"
_MAPBOX_STYLE = "mapbox/dark-v11"
_TILES_URL = "https://api.mapbox.com/styles/v1/{style}/tiles/256/{{z}}/{{x}}/{{y}}@2x?access_token={token}"
_STYLE_URL = "https://api.mapbox.com/styles/v1/{style}?access_token={token}"
_ATTRIBUTION = "&copy; Mapbox &copy; OpenStreetMap contributors"


class FoliumSurface(MapSurface):
    kind = "folium"

    def __init__(
        self,
        style: str = _MAPBOX_STYLE,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.style = style
        self._transport = transport
        self._timeout = timeout
        self._tiles: str | None = None
        self._container: str | None = None
        self._camera: CameraState | None = None
        self._drawables = Drawables()
        self._selection = SelectionState()
        self._map: folium.Map | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self, container: str, token: str, config: SurfaceConfig) -> None:
        style_url = _STYLE_URL.format(style=self.style, token=token)
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            headers={"User-Agent": _USER_AGENT},
        ) as client:
            resp = await client.get(style_url)
            resp.raise_for_status()

        self._tiles = _TILES_URL.format(style=self.style, token=token)
        self._container = container
        self._camera = config.overview_camera
        self._map = self._build()
        logger.info(f"Folium surface ready in container '{container}'")

    def destroy(self) -> None:
        self._map = None
        self._tiles = None
        self._drawables = Drawables()

    @property
    def ready(self) -> bool:
        return self._map is not None

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def apply_layers(self, drawables: Drawables, selection: SelectionState) -> None:
        self._drawables = drawables
        self._selection = selection
        if self._tiles is not None:
            self._map = self._build()

    def set_camera(self, camera: CameraState) -> None:
        self._camera = camera
        if self._tiles is not None:
            self._map = self._build()

    def render(self) -> str:
        if self._map is None:
            raise RuntimeError("Folium surface is not initialized")
        return self._map.get_root().render()

    @property
    def map(self) -> folium.Map | None:
        return self._map

    def _build(self) -> folium.Map:
        camera = self._camera
        m = folium.Map(
            location=[camera.center.lat, camera.center.lng],
            zoom_start=camera.zoom,
            tiles=self._tiles,
            attr=_ATTRIBUTION,
        )

        for heatmap in self._drawables.heatmaps:
            group = folium.FeatureGroup(name=heatmap.label)
            HeatMap(
                [[p.position.lat, p.position.lng, p.weight] for p in heatmap],
                name=heatmap.label,
                radius=heatmap.style.radius,
                min_opacity=heatmap.style.min_opacity,
                gradient=heatmap.style.gradient_stops(),
            ).add_to(group)
            group.add_to(m)

        if self._drawables.polygons:
            zones = folium.FeatureGroup(name="Zone Boundaries")
            for polygon in self._drawables.polygons:
                folium.Polygon(
                    locations=[[p.lat, p.lng] for p in polygon.path],
                    color=polygon.color,
                    weight=2,
                    opacity=polygon.stroke_opacity,
                    fill=True,
                    fill_color=polygon.color,
                    fill_opacity=polygon.fill_opacity,
                    tooltip=polygon.name,
                ).add_to(zones)
            zones.add_to(m)

        markers = folium.FeatureGroup(name="Clusters")
        for marker in self._drawables.markers:
            self._marker(marker).add_to(markers)
        markers.add_to(m)

        folium.LayerControl(collapsed=True).add_to(m)
        return m

    def _marker(self, marker: MarkerPrimitive) -> folium.CircleMarker:
        selected = marker.cluster_id == self._selection.selected_id
        active = marker.cluster_id == self._selection.active_marker_id
        popup = None
        if active:
            popup = folium.Popup(_popup_html(marker), max_width=280, show=True)
        return folium.CircleMarker(
            location=[marker.position.lat, marker.position.lng],
            radius=12 if selected else 8,
            color="#ffffff" if selected else marker.color,
            weight=3 if selected else 1,
            fill=True,
            fill_color=marker.color,
            fill_opacity=0.9,
            tooltip=marker.name,
            popup=popup,
        )


def _popup_html(marker: MarkerPrimitive) -> str:
    rows = "".join(
        f"<p><b>{html.escape(label)}:</b> {html.escape(value)}</p>"
        for label, value in marker.details
    )
    return f"<h4>{html.escape(marker.name)}</h4>{rows}"
