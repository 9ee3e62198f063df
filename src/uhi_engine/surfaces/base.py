"""Map surface interface and the values shared by every implementation.

A ``MapSurface`` is one concrete rendering backend (Leaflet via folium,
deck.gl via pydeck, a static placeholder).  Surfaces know how to draw;
they do not manage their own lifecycle.  That belongs to
``MapSurfaceAdapter``, which is the only object allowed to hold one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from uhi_engine.clusters.cluster import LatLng
from uhi_engine.clusters.defaults import STATE_CENTER
from uhi_engine.layers.drawables import Drawables
from uhi_engine.selection.state import SelectionState


class SurfaceState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class CameraState:
    center: LatLng
    zoom: float

    def to_dict(self) -> dict:
        return {"lat": self.center.lat, "lng": self.center.lng, "zoom": self.zoom}


@dataclass(frozen=True)
class SurfaceConfig:
    """Per-instance surface configuration.

    Attributes:
        token: Access token for the tile / style provider.  None keeps the
            adapter uninitialized and the placeholder on screen.
        center: Overview camera centre.
        overview_zoom: Initial zoom.
        detail_zoom: Zoom used when focusing a selected cluster.
        focus_duration: Camera transition length in seconds.
        focus_fps: Camera transition frame rate.
    """

    token: str | None = None
    center: LatLng = STATE_CENTER
    overview_zoom: float = 7.0
    detail_zoom: float = 10.0
    focus_duration: float = 1.5
    focus_fps: int = 30

    @property
    def overview_camera(self) -> CameraState:
        return CameraState(self.center, self.overview_zoom)


@dataclass(frozen=True)
class MarkerHandlers:
    """Callbacks a surface fires for marker interaction, keyed by cluster id."""

    on_click: Callable[[str], Any]
    on_hover_enter: Callable[[str], Any]
    on_hover_leave: Callable[[str], Any]


class MapSurface(ABC):
    """A concrete rendering backend.

    Subclasses must set ``kind`` and implement:
    - initialize(): async setup, may perform network I/O and may raise
    - apply_layers(): replace drawn content with a new frame
    - set_camera(): move the viewport immediately
    - render(): current view as an HTML document
    """

    kind: str = "abstract"

    @abstractmethod
    async def initialize(self, container: str, token: str, config: SurfaceConfig) -> None:
        """Acquire native resources.  Raise on any failure."""

    @abstractmethod
    def apply_layers(self, drawables: Drawables, selection: SelectionState) -> None:
        """Draw ``drawables``, highlighting markers according to ``selection``."""

    @abstractmethod
    def set_camera(self, camera: CameraState) -> None:
        """Jump the viewport to ``camera``."""

    @abstractmethod
    def render(self) -> str:
        """Current view as HTML."""

    def destroy(self) -> None:
        """Release native resources.  Must be idempotent and safe in any state."""
