"""Map rendering surfaces and the adapter that owns them.

Surfaces are interchangeable; ``create_surface`` picks one by name:

- ``folium``      Leaflet map with weighted-point heatmap overlays
- ``deck``        deck.gl map with native heatmap / polygon / scatter layers
- ``placeholder`` static, no network
"""

from __future__ import annotations

from uhi_engine.surfaces.adapter import MapSurfaceAdapter
from uhi_engine.surfaces.base import (
    CameraState,
    MapSurface,
    MarkerHandlers,
    SurfaceConfig,
    SurfaceState,
)
from uhi_engine.surfaces.placeholder import PlaceholderSurface

SURFACE_KINDS = ("folium", "deck", "placeholder")


def create_surface(kind: str, **kwargs) -> MapSurface:
    """Instantiate a surface by name.

    Raises:
        ValueError: If ``kind`` is not a known surface.
    """
    if kind == "folium":
        from uhi_engine.surfaces.folium_surface import FoliumSurface
        return FoliumSurface(**kwargs)
    elif kind == "deck":
        from uhi_engine.surfaces.deck_surface import DeckSurface
        return DeckSurface(**kwargs)
    elif kind == "placeholder":
        return PlaceholderSurface(**kwargs)
    else:
        raise ValueError(f"Unsupported map surface: {kind}")


__all__ = [
    "CameraState",
    "MapSurface",
    "MapSurfaceAdapter",
    "MarkerHandlers",
    "PlaceholderSurface",
    "SURFACE_KINDS",
    "SurfaceConfig",
    "SurfaceState",
    "create_surface",
]
