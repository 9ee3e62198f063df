"""Export composed Drawables to a GeoJSON FeatureCollection dict (RFC 7946).

Uses only stdlib types.  Every feature carries a ``kind`` property
("heatmap", "polygon" or "marker") so a browser client can route it to the
right map layer.
"""

from __future__ import annotations

from uhi_engine.layers.drawables import (
    Drawables,
    HeatmapLayer,
    MarkerPrimitive,
    PolygonPrimitive,
)


def export_geojson(drawables: Drawables) -> dict:
    """Export drawables to a GeoJSON FeatureCollection dict.

    Draw order is preserved: heatmap samples, then polygons, then markers.
    """
    features: list[dict] = []
    for heatmap in drawables.heatmaps:
        features.extend(_heatmap_to_geojson(heatmap))
    for polygon in drawables.polygons:
        features.append(_polygon_to_geojson(polygon))
    for marker in drawables.markers:
        features.append(_marker_to_geojson(marker))

    return {
        "type": "FeatureCollection",
        "features": features,
    }


def _heatmap_to_geojson(heatmap: HeatmapLayer) -> list[dict]:
    return [
        {
            "type": "Feature",
            "id": f"{heatmap.layer}:{point.cluster_id}",
            "geometry": {
                "type": "Point",
                "coordinates": point.position.to_geojson(),
            },
            "properties": {
                "kind": "heatmap",
                "layer": heatmap.layer,
                "metric": heatmap.metric.name,
                "cluster_id": point.cluster_id,
                "weight": point.weight,
            },
        }
        for point in heatmap
    ]


def _polygon_to_geojson(polygon: PolygonPrimitive) -> dict:
    return {
        "type": "Feature",
        "id": f"polygon:{polygon.cluster_id}",
        "geometry": {
            "type": "Polygon",
            "coordinates": [polygon.closed_ring()],
        },
        "properties": {
            "kind": "polygon",
            "cluster_id": polygon.cluster_id,
            "name": polygon.name,
            "zone": polygon.zone.value,
            "color": polygon.color,
            "fillOpacity": polygon.fill_opacity,
            "opacity": polygon.stroke_opacity,
            "emphasized": polygon.emphasized,
        },
    }


def _marker_to_geojson(marker: MarkerPrimitive) -> dict:
    return {
        "type": "Feature",
        "id": f"marker:{marker.cluster_id}",
        "geometry": {
            "type": "Point",
            "coordinates": marker.position.to_geojson(),
        },
        "properties": {
            "kind": "marker",
            "cluster_id": marker.cluster_id,
            "name": marker.name,
            "zone": marker.zone.value,
            "color": marker.color,
        },
    }
