"""Build a ClusterRegistry from GeoJSON (RFC 7946) using stdlib json.

Each Feature becomes one cluster:

- ``Point`` geometry: the point is the representative coordinate.
- ``Polygon`` geometry: the outer ring is the boundary; the representative
  coordinate is ``properties.center`` ([lng, lat]) when given, otherwise the
  mean of the ring vertices.

Metric scores are read from ``properties.metrics`` when present, else from
top-level properties named after the catalogued metrics.  Features that
cannot be turned into a cluster are skipped with a warning.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from loguru import logger

from uhi_engine.clusters.cluster import Cluster, LatLng, MetricDomain
from uhi_engine.clusters.registry import ClusterRegistry


def parse_clusters(geojson_string: str, metrics: Iterable[MetricDomain]) -> list[Cluster]:
    """Parse a GeoJSON string into clusters.

    Args:
        geojson_string: Raw GeoJSON content.
        metrics: Metric catalogue; each feature must carry every metric.

    Returns:
        Clusters in feature order.

    Raises:
        ValueError: If the content is not valid JSON.
    """
    try:
        data = json.loads(geojson_string)
    except (json.JSONDecodeError, TypeError) as e:
        raise ValueError(f"Invalid cluster GeoJSON: {e}") from e

    metric_names = [m.name for m in metrics]

    if isinstance(data, dict) and data.get("type") == "FeatureCollection":
        raw_features = data.get("features", [])
    elif isinstance(data, dict) and data.get("type") == "Feature":
        raw_features = [data]
    else:
        raw_features = []

    clusters: list[Cluster] = []
    for idx, raw in enumerate(raw_features):
        cluster = _parse_feature(raw, idx, metric_names)
        if cluster is not None:
            clusters.append(cluster)
    return clusters


def load_registry(path: str | Path, metrics: Iterable[MetricDomain]) -> ClusterRegistry:
    """Read a GeoJSON file and build a registry from it."""
    metrics = list(metrics)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    clusters = parse_clusters(content, metrics)
    logger.info(f"Loaded {len(clusters)} clusters from {path}")
    return ClusterRegistry(clusters, metrics)


def _parse_feature(raw: dict, idx: int, metric_names: list[str]) -> Cluster | None:
    """Parse a single GeoJSON Feature dict into a Cluster."""
    if not isinstance(raw, dict):
        return None

    geometry = raw.get("geometry")
    if not isinstance(geometry, dict):
        logger.warning(f"Feature {idx}: no geometry, skipped")
        return None

    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}

    cluster_id = raw.get("id", properties.get("id", f"cluster-{idx}"))
    cluster_id = str(cluster_id)
    name = str(properties.get("name", cluster_id))

    source = properties.get("metrics")
    if not isinstance(source, dict):
        source = properties
    try:
        scores = {n: float(source[n]) for n in metric_names}
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Feature {cluster_id}: bad or missing metric ({e}), skipped")
        return None

    geom_type = geometry.get("type", "")
    coordinates = geometry.get("coordinates")
    try:
        if geom_type == "Point":
            return Cluster(cluster_id, name, LatLng.from_geojson(coordinates), scores)
        if geom_type == "Polygon":
            ring = [LatLng.from_geojson(p) for p in coordinates[0]]
            if len(ring) > 1 and ring[0] == ring[-1]:
                ring = ring[:-1]
            center = properties.get("center")
            if center is not None:
                point = LatLng.from_geojson(center)
            elif ring:
                point = LatLng(
                    lat=sum(p.lat for p in ring) / len(ring),
                    lng=sum(p.lng for p in ring) / len(ring),
                )
            else:
                logger.warning(f"Feature {cluster_id}: empty polygon, skipped")
                return None
            return Cluster(cluster_id, name, point, scores, boundary=tuple(ring))
    except (IndexError, TypeError, ValueError) as e:
        logger.warning(f"Feature {cluster_id}: bad coordinates ({e}), skipped")
        return None

    logger.warning(f"Feature {cluster_id}: unsupported geometry {geom_type!r}, skipped")
    return None
