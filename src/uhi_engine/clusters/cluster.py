"""Cluster records and the metric domains they are scored against.

Coordinates are held as ``LatLng`` and converted to GeoJSON order
([lng, lat]) only at export time.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence


@dataclass(frozen=True)
class LatLng:
    """A WGS84 point."""

    lat: float
    lng: float

    def to_geojson(self) -> list[float]:
        return [self.lng, self.lat]

    @classmethod
    def from_geojson(cls, coords: Sequence[float]) -> "LatLng":
        """Build from a GeoJSON position ``[lng, lat]`` (altitude ignored)."""
        return cls(lat=float(coords[1]), lng=float(coords[0]))


@dataclass(frozen=True)
class MetricDomain:
    """A named score with a known numeric range.

    Attributes:
        name: Key used in ``Cluster.metrics``.
        label: Human-readable label.
        minimum: Lower end of the domain.
        maximum: Upper end of the domain.
        inverse: True when a *higher* value is *better* (vegetation cover),
            so heat weight runs opposite to the raw value.
        unit: Display suffix, e.g. "%".
    """

    name: str
    label: str
    minimum: float
    maximum: float
    inverse: bool = False
    unit: str = ""

    def __post_init__(self) -> None:
        if not self.maximum > self.minimum:
            raise ValueError(
                f"Metric {self.name}: maximum ({self.maximum}) must exceed minimum ({self.minimum})"
            )

    def normalize(self, value: float) -> float:
        """Map ``value`` into a heat weight in [0, 1].

        Out-of-domain values clamp; NaN maps to 0.  Inverse metrics are
        flipped after clamping.
        """
        if math.isnan(value):
            return 0.0
        weight = (value - self.minimum) / (self.maximum - self.minimum)
        weight = min(max(weight, 0.0), 1.0)
        return 1.0 - weight if self.inverse else weight

    def format(self, value: float) -> str:
        return f"{value:g}{self.unit}"


@dataclass(frozen=True)
class Cluster:
    """A region of analysis.

    Attributes:
        id: Stable identifier, unique within a registry.
        name: Display label.
        coordinates: Representative point for markers and heat samples.
        metrics: Metric name -> score.  Stored read-only.
        boundary: Optional closed outline.  Not validated here; the
            compositor drops outlines it cannot draw.
    """

    id: str
    name: str
    coordinates: LatLng
    metrics: Mapping[str, float] = field(default_factory=dict)
    boundary: tuple[LatLng, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))
        if self.boundary is not None:
            object.__setattr__(self, "boundary", tuple(self.boundary))

    def metric(self, name: str) -> float:
        return self.metrics[name]

    @property
    def has_boundary(self) -> bool:
        return bool(self.boundary)
