"""Layer bindings: the fixed set of thematic layers and what feeds them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayerBinding:
    """A toggleable layer.

    Attributes:
        name: Layer key, as used by the visibility state.
        label: Button / legend label.
        metric: Metric rendered as a heatmap, or None for non-heatmap layers.
        owns_polygons: True for the layer whose visibility controls zone
            polygon emphasis.  At most one binding should set this.
    """

    name: str
    label: str
    metric: str | None = None
    owns_polygons: bool = False


DEFAULT_LAYER_BINDINGS = (
    LayerBinding("intensity", "UHI Intensity", metric="intensity"),
    LayerBinding("health", "Health Risk", metric="health"),
    LayerBinding("vegetation", "Vegetation", metric="vegetation"),
    LayerBinding("boundaries", "Zone Boundaries", owns_polygons=True),
)


def layer_names(bindings) -> tuple[str, ...]:
    return tuple(b.name for b in bindings)
