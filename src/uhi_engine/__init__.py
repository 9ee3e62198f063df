"""UHI explorer core: layer composition and selection sync for the heat map.

Subpackages:
    clusters: cluster records, registry, loaders, built-in data
    layers: visibility state, compositor, drawables, GeoJSON export
    selection: selection state and list/map synchronizer
    surfaces: map surfaces (folium, pydeck, placeholder) and their adapter
"""

from uhi_engine.errors import (
    ExplorerError,
    MalformedBoundary,
    NotFound,
    SurfaceInitFailed,
    UnknownLayer,
)
from uhi_engine.explorer import MapExplorer

__version__ = "0.1.0"

__all__ = [
    "ExplorerError",
    "MalformedBoundary",
    "MapExplorer",
    "NotFound",
    "SurfaceInitFailed",
    "UnknownLayer",
]
