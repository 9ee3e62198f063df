"""Built-in Maharashtra cluster set and metric catalogue.

Scores are the simulated values shown on the dashboard.  Outlines are
coarse hexagons around each cluster centre, sized to the region; they give
the polygon layer something to draw, not survey-grade borders.
"""

from __future__ import annotations

import math

from uhi_engine.clusters.cluster import Cluster, LatLng, MetricDomain
from uhi_engine.clusters.registry import ClusterRegistry

INTENSITY = MetricDomain("intensity", "UHI Score", 0.0, 10.0)
HEALTH = MetricDomain("health", "Health Risk", 0.0, 10.0)
VEGETATION = MetricDomain("vegetation", "Vegetation", 0.0, 100.0, inverse=True, unit="%")

DEFAULT_METRICS = (INTENSITY, HEALTH, VEGETATION)

# Geographic centre of Maharashtra; overview camera target.
STATE_CENTER = LatLng(19.7515, 75.7139)


def _outline(center: LatLng, radius_deg: float) -> tuple[LatLng, ...]:
    """Hexagonal outline around ``center``, longitude scaled for latitude."""
    lng_scale = 1.0 / math.cos(math.radians(center.lat))
    return tuple(
        LatLng(
            lat=round(center.lat + radius_deg * math.sin(math.radians(a)), 4),
            lng=round(center.lng + radius_deg * lng_scale * math.cos(math.radians(a)), 4),
        )
        for a in range(0, 360, 60)
    )


# (id, name, lat, lng, intensity, health, vegetation, outline radius)
_ROWS = [
    ("mumbai", "Mumbai", 19.0760, 72.8777, 8.5, 7.2, 22, 0.25),
    ("pune", "Pune", 18.5204, 73.8567, 7.8, 6.5, 28, 0.30),
    ("nagpur-wardha", "Nagpur-Wardha", 21.1458, 79.0882, 8.2, 7.0, 25, 0.45),
    ("nashik-ahmednagar", "Nashik-Ahmednagar", 19.9975, 73.7898, 7.5, 6.3, 30, 0.45),
    ("solapur-sangli", "Solapur-Sangli", 17.6599, 75.9064, 7.3, 6.0, 32, 0.45),
    ("aurangabad-jalna", "Aurangabad-Jalna", 19.8762, 75.3433, 7.9, 6.8, 26, 0.40),
    ("kolhapur-ichalkaranji", "Kolhapur-Ichalkaranji", 16.7050, 74.2433, 6.8, 5.5, 35, 0.30),
]


def default_clusters() -> list[Cluster]:
    clusters = []
    for cid, name, lat, lng, uhi, health, veg, radius in _ROWS:
        center = LatLng(lat, lng)
        clusters.append(
            Cluster(
                id=cid,
                name=name,
                coordinates=center,
                metrics={"intensity": uhi, "health": health, "vegetation": float(veg)},
                boundary=_outline(center, radius),
            )
        )
    return clusters


def default_registry() -> ClusterRegistry:
    """Registry of the seven Maharashtra clusters."""
    return ClusterRegistry(default_clusters(), DEFAULT_METRICS)
