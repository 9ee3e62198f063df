"""deck.gl surface rendered through pydeck on a Mapbox basemap.

Uses deck.gl's native primitives: ``HeatmapLayer`` for each active metric,
``PolygonLayer`` for zone outlines and ``ScatterplotLayer`` for markers.
The initialization round trip fetches the Mapbox style with the token.
"""

from __future__ import annotations

import httpx
import pydeck as pdk
from loguru import logger

from uhi_engine.layers.drawables import Drawables, HeatmapLayer, hex_to_rgba
from uhi_engine.selection.state import SelectionState
from uhi_engine.surfaces.base import CameraState, MapSurface, SurfaceConfig

_USER_AGENT = "UHI-Explorer/0.1.0"
_MAPBOX_STYLE = "mapbox/dark-v11"
_STYLE_URL = "https://api.mapbox.com/styles/v1/{style}?access_token={token}"


class DeckSurface(MapSurface):
    kind = "deck"

    def __init__(
        self,
        style: str = _MAPBOX_STYLE,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.style = style
        self._transport = transport
        self._timeout = timeout
        self._token: str | None = None
        self._camera: CameraState | None = None
        self._drawables = Drawables()
        self._selection = SelectionState()
        self._deck: pdk.Deck | None = None

    async def initialize(self, container: str, token: str, config: SurfaceConfig) -> None:
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            headers={"User-Agent": _USER_AGENT},
        ) as client:
            resp = await client.get(_STYLE_URL.format(style=self.style, token=token))
            resp.raise_for_status()

        self._token = token
        self._camera = config.overview_camera
        self._deck = self._build()
        logger.info(f"Deck surface ready in container '{container}'")

    def destroy(self) -> None:
        self._deck = None
        self._token = None
        self._drawables = Drawables()

    def apply_layers(self, drawables: Drawables, selection: SelectionState) -> None:
        self._drawables = drawables
        self._selection = selection
        if self._token is not None:
            self._deck = self._build()

    def set_camera(self, camera: CameraState) -> None:
        self._camera = camera
        if self._token is not None:
            self._deck = self._build()

    def render(self) -> str:
        if self._deck is None:
            raise RuntimeError("Deck surface is not initialized")
        return self._deck.to_html(as_string=True, notebook_display=False)

    @property
    def deck(self) -> pdk.Deck | None:
        return self._deck

    def _build(self) -> pdk.Deck:
        layers = [_heatmap_layer(h) for h in self._drawables.heatmaps]

        if self._drawables.polygons:
            layers.append(
                pdk.Layer(
                    "PolygonLayer",
                    data=[
                        {
                            "polygon": [p.to_geojson() for p in poly.path],
                            "name": poly.name,
                            "zone": poly.zone.label,
                            "fill": list(hex_to_rgba(poly.color, int(poly.fill_opacity * 255))),
                            "line": list(hex_to_rgba(poly.color, int(poly.stroke_opacity * 255))),
                        }
                        for poly in self._drawables.polygons
                    ],
                    id="zone-boundaries",
                    get_polygon="polygon",
                    get_fill_color="fill",
                    get_line_color="line",
                    line_width_min_pixels=1,
                    stroked=True,
                    filled=True,
                    pickable=True,
                )
            )

        selected = self._selection.selected_id
        active = self._selection.active_marker_id
        layers.append(
            pdk.Layer(
                "ScatterplotLayer",
                data=[
                    {
                        "position": m.position.to_geojson(),
                        "cluster_id": m.cluster_id,
                        "name": m.name,
                        "zone": m.zone.label,
                        "color": list(hex_to_rgba(m.color)),
                        "outline": [255, 255, 255, 255] if m.cluster_id == selected else [0, 0, 0, 0],
                        "radius": 12 if m.cluster_id in (selected, active) else 8,
                    }
                    for m in self._drawables.markers
                ],
                id="markers",
                get_position="position",
                get_fill_color="color",
                get_line_color="outline",
                get_radius="radius",
                radius_units="pixels",
                stroked=True,
                line_width_min_pixels=2,
                pickable=True,
            )
        )

        camera = self._camera
        return pdk.Deck(
            layers=layers,
            initial_view_state=pdk.ViewState(
                latitude=camera.center.lat,
                longitude=camera.center.lng,
                zoom=camera.zoom,
            ),
            map_provider="mapbox",
            map_style=f"mapbox://styles/{self.style}",
            api_keys={"mapbox": self._token},
            tooltip={"html": "<b>{name}</b><br/>{zone}"},
        )


def _heatmap_layer(heatmap: HeatmapLayer) -> pdk.Layer:
    return pdk.Layer(
        "HeatmapLayer",
        data=[
            {"position": p.position.to_geojson(), "weight": p.weight}
            for p in heatmap
        ],
        id=f"heatmap-{heatmap.layer}",
        get_position="position",
        get_weight="weight",
        radius_pixels=heatmap.style.radius,
        opacity=heatmap.style.opacity,
        color_range=[list(c[:3]) for c in heatmap.style.gradient],
        aggregation="SUM",
    )
