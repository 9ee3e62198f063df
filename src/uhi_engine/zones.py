"""Zone classification: bucket a cluster's primary metric into heat zones.

Zones, lowest to highest: cold, warm, moderately-hot, hot.  Breakpoints
``lower < middle < upper`` are closed on the upper side, so a value equal to
a breakpoint lands in the lower zone::

    v <= lower            -> cold
    lower  < v <= middle  -> warm
    middle < v <= upper   -> moderately-hot
    v > upper             -> hot

NaN compares false against every breakpoint and therefore classifies cold.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uhi_engine.clusters.cluster import Cluster


class Zone(str, Enum):
    """Heat zone, ordered by ``rank``."""

    COLD = "cold"
    WARM = "warm"
    MODERATELY_HOT = "moderately-hot"
    HOT = "hot"

    @property
    def rank(self) -> int:
        return _ZONE_ORDER.index(self)

    @property
    def label(self) -> str:
        return _ZONE_LABELS[self]

    @property
    def color(self) -> str:
        """Hex colour used for markers, polygons and the legend."""
        return ZONE_COLORS[self]


_ZONE_ORDER = (Zone.COLD, Zone.WARM, Zone.MODERATELY_HOT, Zone.HOT)

_ZONE_LABELS = {
    Zone.HOT: "Hot",
    Zone.MODERATELY_HOT: "Moderately Hot",
    Zone.WARM: "Warm",
    Zone.COLD: "Cold",
}

# Red / orange / yellow / green, matching the dashboard legend.
ZONE_COLORS = {
    Zone.HOT: "#ef4444",
    Zone.MODERATELY_HOT: "#f97316",
    Zone.WARM: "#eab308",
    Zone.COLD: "#22c55e",
}

# Fallback for markers whose zone cannot be resolved.
UNCLASSIFIED_COLOR = "#3b82f6"


@dataclass(frozen=True)
class ZoneBreakpoints:
    """Ascending thresholds separating the four zones."""

    lower: float
    middle: float
    upper: float

    def __post_init__(self) -> None:
        values = (self.lower, self.middle, self.upper)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"Zone breakpoints must be finite: {values}")
        if not self.lower < self.middle < self.upper:
            raise ValueError(f"Zone breakpoints must be strictly ascending: {values}")

    @classmethod
    def from_sequence(cls, values) -> "ZoneBreakpoints":
        lower, middle, upper = (float(v) for v in values)
        return cls(lower, middle, upper)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.lower, self.middle, self.upper)


DEFAULT_BREAKPOINTS = ZoneBreakpoints(7.0, 7.5, 8.0)


def classify_zone(value: float, breakpoints: ZoneBreakpoints = DEFAULT_BREAKPOINTS) -> Zone:
    """Classify a primary-metric value into a zone."""
    if value > breakpoints.upper:
        return Zone.HOT
    if value > breakpoints.middle:
        return Zone.MODERATELY_HOT
    if value > breakpoints.lower:
        return Zone.WARM
    return Zone.COLD


@dataclass(frozen=True)
class ZoneScheme:
    """Which metric drives classification, and its breakpoints."""

    primary_metric: str = "intensity"
    breakpoints: ZoneBreakpoints = field(default=DEFAULT_BREAKPOINTS)

    def zone_of(self, cluster: Cluster) -> Zone:
        return classify_zone(cluster.metric(self.primary_metric), self.breakpoints)


def legend() -> list[dict]:
    """Legend entries, hottest first."""
    return [
        {"zone": zone.value, "label": zone.label, "color": zone.color}
        for zone in reversed(_ZONE_ORDER)
    ]
