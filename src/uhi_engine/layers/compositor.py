"""LayerCompositor: turn clusters + layer visibility into drawables.

The compositor is a function of the registry, the visibility state and
its own configuration (bindings, zone scheme, styles).  It holds no cache;
the cluster set is small and recomposition is cheap.

Per frame it produces:

- one ``HeatmapLayer`` for every *active* binding that names a metric;
- one ``MarkerPrimitive`` per cluster, regardless of layer state;
- one ``PolygonPrimitive`` per cluster with a drawable boundary, emphasized
  while the polygon-owning layer is active and muted otherwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from loguru import logger

from uhi_engine.clusters.cluster import Cluster, LatLng
from uhi_engine.clusters.registry import ClusterRegistry
from uhi_engine.errors import MalformedBoundary
from uhi_engine.layers.bindings import DEFAULT_LAYER_BINDINGS, LayerBinding
from uhi_engine.layers.drawables import (
    Drawables,
    HeatmapLayer,
    HeatmapStyle,
    MarkerPrimitive,
    PolygonPrimitive,
)
from uhi_engine.layers.visibility import LayerVisibility
from uhi_engine.zones import ZoneScheme


@dataclass(frozen=True)
class PolygonStyle:
    fill_opacity: float = 0.35
    stroke_opacity: float = 0.9
    muted_fill_opacity: float = 0.08
    muted_stroke_opacity: float = 0.3


class LayerCompositor:
    """Builds ``Drawables`` from registry and visibility."""

    def __init__(
        self,
        bindings: Sequence[LayerBinding] = DEFAULT_LAYER_BINDINGS,
        zones: ZoneScheme | None = None,
        heatmap_style: HeatmapStyle | None = None,
        polygon_style: PolygonStyle | None = None,
        event_bus=None,
    ) -> None:
        self.bindings = tuple(bindings)
        owners = [b.name for b in self.bindings if b.owns_polygons]
        if len(owners) > 1:
            raise ValueError(f"More than one layer owns polygons: {owners}")
        self.polygon_owner: str | None = owners[0] if owners else None
        self.zones = zones or ZoneScheme()
        self.heatmap_style = heatmap_style or HeatmapStyle()
        self.polygon_style = polygon_style or PolygonStyle()
        self._event_bus = event_bus

    def compose(self, registry: ClusterRegistry, visibility: LayerVisibility) -> Drawables:
        """Compose one frame.

        Raises:
            UnknownLayer: If a binding names a layer missing from
                ``visibility`` (a configuration mismatch).
        """
        clusters = registry.list()
        polygons, skipped = self._polygons(clusters, visibility)
        return Drawables(
            heatmaps=self._heatmaps(registry, clusters, visibility),
            markers=self._markers(registry, clusters),
            polygons=polygons,
            skipped_boundaries=skipped,
        )

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------

    def _heatmaps(
        self,
        registry: ClusterRegistry,
        clusters: tuple[Cluster, ...],
        visibility: LayerVisibility,
    ) -> tuple[HeatmapLayer, ...]:
        layers = []
        for binding in self.bindings:
            if binding.metric is None or not visibility.is_active(binding.name):
                continue
            layers.append(
                HeatmapLayer(
                    layer=binding.name,
                    label=binding.label,
                    metric=registry.metric(binding.metric),
                    clusters=clusters,
                    style=self.heatmap_style,
                )
            )
        return tuple(layers)

    def _markers(
        self,
        registry: ClusterRegistry,
        clusters: tuple[Cluster, ...],
    ) -> tuple[MarkerPrimitive, ...]:
        domains = list(registry.metrics.values())
        markers = []
        for cluster in clusters:
            zone = self.zones.zone_of(cluster)
            details = tuple((d.label, d.format(cluster.metric(d.name))) for d in domains)
            markers.append(
                MarkerPrimitive(
                    cluster_id=cluster.id,
                    name=cluster.name,
                    position=cluster.coordinates,
                    zone=zone,
                    color=zone.color,
                    details=details,
                )
            )
        return tuple(markers)

    def _polygons(
        self,
        clusters: tuple[Cluster, ...],
        visibility: LayerVisibility,
    ) -> tuple[tuple[PolygonPrimitive, ...], tuple[str, ...]]:
        emphasized = self.polygon_owner is None or visibility.is_active(self.polygon_owner)
        style = self.polygon_style
        polygons = []
        skipped = []
        for cluster in clusters:
            if not cluster.has_boundary:
                continue
            try:
                path = polygon_path(cluster)
            except MalformedBoundary as e:
                logger.warning(f"Polygon omitted: {e}")
                if self._event_bus is not None:
                    self._event_bus.publish(
                        "diagnostic",
                        {"error": "MalformedBoundary", "cluster_id": e.cluster_id, "points": e.points},
                    )
                skipped.append(cluster.id)
                continue
            zone = self.zones.zone_of(cluster)
            polygons.append(
                PolygonPrimitive(
                    cluster_id=cluster.id,
                    name=cluster.name,
                    path=path,
                    zone=zone,
                    color=zone.color,
                    fill_opacity=style.fill_opacity if emphasized else style.muted_fill_opacity,
                    stroke_opacity=style.stroke_opacity if emphasized else style.muted_stroke_opacity,
                    emphasized=emphasized,
                )
            )
        return tuple(polygons), tuple(skipped)


def polygon_path(cluster: Cluster) -> tuple[LatLng, ...]:
    """Open vertex path of a cluster boundary.

    A repeated closing vertex is dropped and non-finite vertices are
    discarded before counting.

    Raises:
        MalformedBoundary: Fewer than three vertices remain.
    """
    path = [
        p for p in (cluster.boundary or ())
        if math.isfinite(p.lat) and math.isfinite(p.lng)
    ]
    if len(path) > 1 and path[0] == path[-1]:
        path = path[:-1]
    if len(path) < 3:
        raise MalformedBoundary(cluster.id, len(path))
    return tuple(path)
