"""SelectionSynchronizer: keep list selection, map camera and popups in step.

- ``select(id)`` commits a cluster (selected + popup) and flies the camera
  to it at the detail zoom.
- ``deselect()`` closes the popup but keeps the committed selection, so the
  detail panel stays up.
- ``hover`` / ``unhover`` move only the popup.

Detail and popup content are never stored; they are looked up in the
registry on each call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from uhi_engine.clusters.cluster import Cluster
from uhi_engine.clusters.registry import ClusterRegistry
from uhi_engine.errors import NotFound
from uhi_engine.selection.state import SelectionState, SelectionStore
from uhi_engine.surfaces.base import MarkerHandlers

if TYPE_CHECKING:
    from uhi_engine.surfaces.adapter import MapSurfaceAdapter


class SelectionSynchronizer:
    def __init__(
        self,
        registry: ClusterRegistry,
        store: SelectionStore,
        surface: MapSurfaceAdapter,
        detail_zoom: float,
        overview_zoom: float,
        event_bus=None,
    ) -> None:
        if not detail_zoom > overview_zoom:
            raise ValueError(
                f"detail_zoom ({detail_zoom}) must be greater than overview_zoom ({overview_zoom})"
            )
        self._registry = registry
        self._store = store
        self._surface = surface
        self._event_bus = event_bus
        self.detail_zoom = detail_zoom
        self.overview_zoom = overview_zoom

    @property
    def state(self) -> SelectionState:
        return self._store.state

    def select(self, cluster_id: str) -> SelectionState:
        """Commit ``cluster_id`` and focus the map on it.

        Raises:
            NotFound: Unknown id; selection is left unchanged.
        """
        cluster = self._lookup(cluster_id, "select")
        state = self._store.commit(cluster.id)
        self._surface.focus(cluster.coordinates, self.detail_zoom)
        logger.debug(f"Selected {cluster.id}")
        return state

    def deselect(self) -> SelectionState:
        """Dismiss the popup; the committed selection stays."""
        return self._store.clear_active()

    def hover(self, cluster_id: str) -> SelectionState:
        cluster = self._lookup(cluster_id, "hover")
        return self._store.hover(cluster.id)

    def unhover(self, cluster_id: str) -> SelectionState:
        if self._store.state.active_marker_id != cluster_id:
            return self._store.state
        return self._store.clear_active()

    def detail(self) -> Cluster | None:
        """Cluster for the detail panel, read fresh from the registry."""
        selected = self._store.state.selected_id
        return self._registry.get(selected) if selected is not None else None

    def popup(self) -> Cluster | None:
        """Cluster whose popup is open, if any."""
        active = self._store.state.active_marker_id
        return self._registry.get(active) if active is not None else None

    def marker_handlers(self) -> MarkerHandlers:
        return MarkerHandlers(
            on_click=self.select,
            on_hover_enter=self.hover,
            on_hover_leave=self.unhover,
        )

    def _lookup(self, cluster_id: str, action: str) -> Cluster:
        try:
            return self._registry.get(cluster_id)
        except NotFound as e:
            logger.warning(f"{action} rejected: {e}")
            if self._event_bus is not None:
                self._event_bus.publish(
                    "diagnostic", {"error": "NotFound", "action": action, "cluster_id": cluster_id}
                )
            raise
