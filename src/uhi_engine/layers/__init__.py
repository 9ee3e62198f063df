"""Map layer system: visibility state, compositor and drawable primitives."""

from uhi_engine.layers.bindings import DEFAULT_LAYER_BINDINGS, LayerBinding
from uhi_engine.layers.compositor import LayerCompositor, PolygonStyle
from uhi_engine.layers.drawables import (
    Drawables,
    HeatmapLayer,
    HeatmapStyle,
    MarkerPrimitive,
    PolygonPrimitive,
    WeightedPoint,
)
from uhi_engine.layers.visibility import LayerVisibility, LayerVisibilityStore

__all__ = [
    "DEFAULT_LAYER_BINDINGS",
    "Drawables",
    "HeatmapLayer",
    "HeatmapStyle",
    "LayerBinding",
    "LayerCompositor",
    "LayerVisibility",
    "LayerVisibilityStore",
    "MarkerPrimitive",
    "PolygonPrimitive",
    "PolygonStyle",
    "WeightedPoint",
]
