"""Drawable primitives handed from the compositor to a map surface.

All primitives are frozen values so that two compositions of the same
inputs compare equal field by field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from uhi_engine.clusters.cluster import Cluster, LatLng, MetricDomain
from uhi_engine.zones import Zone

RGBA = tuple[int, int, int, int]


def hex_to_rgba(color: str, alpha: int = 255) -> RGBA:
    """``"#ef4444"`` -> ``(239, 68, 68, alpha)``."""
    color = color.lstrip("#")
    return (int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16), alpha)


def css_rgba(rgba: RGBA) -> str:
    r, g, b, a = rgba
    return f"rgba({r}, {g}, {b}, {round(a / 255, 3):g})"


@dataclass(frozen=True)
class WeightedPoint:
    """One heatmap sample: a position and a weight in [0, 1]."""

    position: LatLng
    weight: float
    cluster_id: str


@dataclass(frozen=True)
class HeatmapStyle:
    """Rendering hints for heatmap layers.

    The gradient runs from transparent green through yellow and orange to
    red, evenly spaced.

    ``opacity`` is the opacity of the whole layer.  ``min_opacity`` is the
    alpha floor Leaflet.heat gives its faintest points; Leaflet.heat has no
    layer opacity, so the folium surface uses only the floor.
    """

    radius: int = 50
    opacity: float = 0.6
    min_opacity: float = 0.05
    gradient: tuple[RGBA, ...] = (
        (0, 255, 0, 0),
        (255, 255, 0, 255),
        (255, 165, 0, 255),
        (255, 0, 0, 255),
    )

    def gradient_stops(self) -> dict[float, str]:
        """Gradient as ``{stop: css colour}`` with stops spread over [0, 1]."""
        n = len(self.gradient)
        if n == 1:
            return {1.0: css_rgba(self.gradient[0])}
        return {round(i / (n - 1), 3): css_rgba(c) for i, c in enumerate(self.gradient)}


@dataclass(frozen=True)
class HeatmapLayer:
    """Weighted samples of one metric over all clusters.

    Points are produced lazily on each iteration; nothing is materialized
    until a surface asks for them.
    """

    layer: str
    label: str
    metric: MetricDomain
    clusters: tuple[Cluster, ...]
    style: HeatmapStyle = field(default_factory=HeatmapStyle)

    def points(self) -> Iterator[WeightedPoint]:
        for cluster in self.clusters:
            yield WeightedPoint(
                position=cluster.coordinates,
                weight=self.metric.normalize(cluster.metric(self.metric.name)),
                cluster_id=cluster.id,
            )

    def __iter__(self) -> Iterator[WeightedPoint]:
        return self.points()


@dataclass(frozen=True)
class MarkerPrimitive:
    """Point marker for one cluster, coloured by zone.

    ``details`` holds (label, formatted value) rows for the info popup.
    """

    cluster_id: str
    name: str
    position: LatLng
    zone: Zone
    color: str
    details: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class PolygonPrimitive:
    """Zone outline for one cluster.

    ``emphasized`` is False when the owning layer is off; the polygon is
    still drawn, at the muted opacities, to keep spatial context.
    """

    cluster_id: str
    name: str
    path: tuple[LatLng, ...]
    zone: Zone
    color: str
    fill_opacity: float
    stroke_opacity: float
    emphasized: bool

    def closed_ring(self) -> list[list[float]]:
        """GeoJSON ring: [lng, lat] pairs, first point repeated at the end."""
        ring = [p.to_geojson() for p in self.path]
        if ring and ring[0] != ring[-1]:
            ring.append(list(ring[0]))
        return ring


@dataclass(frozen=True)
class Drawables:
    """Everything a surface needs for one frame."""

    heatmaps: tuple[HeatmapLayer, ...] = ()
    markers: tuple[MarkerPrimitive, ...] = ()
    polygons: tuple[PolygonPrimitive, ...] = ()
    skipped_boundaries: tuple[str, ...] = ()

    def heatmap(self, layer: str) -> HeatmapLayer | None:
        for h in self.heatmaps:
            if h.layer == layer:
                return h
        return None

    def marker(self, cluster_id: str) -> MarkerPrimitive | None:
        for m in self.markers:
            if m.cluster_id == cluster_id:
                return m
        return None
