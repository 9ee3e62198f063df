"""MapExplorer: wires registry, layer state, selection and the map surface.

Change flow (all on the event-loop thread)::

    toggle_layer()  -> LayerVisibilityStore -> "layers-changed"
                    -> compose() -> MapSurfaceAdapter.update()
    select()/hover  -> SelectionStore -> "selection-changed"
                    -> MapSurfaceAdapter.update() (same drawables)

The explorer is also the seam to the host shell: it exposes the cluster
list projection, a single ``on_cluster_activated`` callback, and a queue of
``surface-ready`` / ``surface-init-failed`` notifications.
"""

from __future__ import annotations

import queue
from typing import Mapping, Sequence

from loguru import logger

from uhi_engine.clusters.cluster import Cluster
from uhi_engine.clusters.registry import ClusterRegistry, ClusterView
from uhi_engine.comms.event_bus import EventBus
from uhi_engine.errors import NotFound
from uhi_engine.layers.bindings import DEFAULT_LAYER_BINDINGS, LayerBinding, layer_names
from uhi_engine.layers.compositor import LayerCompositor
from uhi_engine.layers.drawables import Drawables
from uhi_engine.layers.exporters.geojson import export_geojson
from uhi_engine.layers.visibility import LayerVisibility, LayerVisibilityStore
from uhi_engine.selection.state import SelectionState, SelectionStore
from uhi_engine.selection.synchronizer import SelectionSynchronizer
from uhi_engine.surfaces.adapter import MapSurfaceAdapter
from uhi_engine.surfaces.base import MapSurface, SurfaceConfig
from uhi_engine.zones import ZoneScheme, legend

NOTIFICATION_EVENTS = ("surface-ready", "surface-init-failed")


class MapExplorer:
    """One map explorer view and all of its state."""

    def __init__(
        self,
        registry: ClusterRegistry,
        surface: MapSurface,
        config: SurfaceConfig | None = None,
        bindings: Sequence[LayerBinding] = DEFAULT_LAYER_BINDINGS,
        zones: ZoneScheme | None = None,
        initial_layers: Mapping[str, bool] | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        config = config or SurfaceConfig()
        self.registry = registry
        self.zones = zones or ZoneScheme()
        self.event_bus = event_bus or EventBus()
        self.compositor = LayerCompositor(bindings, self.zones, event_bus=self.event_bus)

        names = layer_names(bindings)
        flags = {name: True for name in names}
        if initial_layers:
            unknown = set(initial_layers) - set(names)
            if unknown:
                raise ValueError(f"Unknown layers in initial state: {sorted(unknown)}")
            flags.update(initial_layers)
        self.layers = LayerVisibilityStore(LayerVisibility(flags), self.event_bus)
        self.selection = SelectionStore(self.event_bus)

        self.surface = MapSurfaceAdapter(surface, config, self.event_bus)
        self.synchronizer = SelectionSynchronizer(
            registry,
            self.selection,
            self.surface,
            detail_zoom=config.detail_zoom,
            overview_zoom=config.overview_zoom,
            event_bus=self.event_bus,
        )
        self.surface.bind_markers(self.synchronizer.marker_handlers())

        self._drawables = self.compositor.compose(self.registry, self.layers.state)
        self.surface.update(self._drawables, self.selection.state)
        self.event_bus.add_listener(self._on_event)

    def _on_event(self, event_type: str, data: dict | None) -> None:
        if event_type == "layers-changed":
            self._drawables = self.compositor.compose(self.registry, self.layers.state)
            self.surface.update(self._drawables, self.selection.state)
        elif event_type == "selection-changed":
            self.surface.update(self._drawables, self.selection.state)

    # ------------------------------------------------------------------
    # Display shell contract
    # ------------------------------------------------------------------

    def clusters(self) -> list[ClusterView]:
        return self.registry.project(self.zones)

    def on_cluster_activated(self, cluster_id: str) -> bool:
        """List-click callback.  Returns False if the id was rejected."""
        try:
            self.synchronizer.select(cluster_id)
        except NotFound:
            return False
        return True

    def toggle_layer(self, layer: str) -> LayerVisibility:
        return self.layers.toggle(layer)

    def detail_panel(self) -> Cluster | None:
        return self.synchronizer.detail()

    def popup(self) -> Cluster | None:
        return self.synchronizer.popup()

    @property
    def selection_state(self) -> SelectionState:
        return self.selection.state

    @property
    def drawables(self) -> Drawables:
        return self._drawables

    def drawables_geojson(self) -> dict:
        return export_geojson(self._drawables)

    def legend(self) -> list[dict]:
        return legend()

    # ------------------------------------------------------------------
    # Surface lifecycle
    # ------------------------------------------------------------------

    def mount(self, container: str):
        return self.surface.mount(container)

    def configure(self, token: str | None):
        return self.surface.configure(token)

    def render_map(self) -> str:
        return self.surface.render()

    def destroy(self) -> None:
        self.event_bus.remove_listener(self._on_event)
        self.surface.destroy()
        logger.info("Map explorer torn down")

    # ------------------------------------------------------------------
    # Notification surface contract
    # ------------------------------------------------------------------

    def subscribe_notifications(self) -> queue.Queue:
        """Queue receiving only surface notifications; see ``drain_notifications``."""
        return self.event_bus.subscribe(NOTIFICATION_EVENTS)

    @staticmethod
    def drain_notifications(q: queue.Queue) -> list[dict]:
        """Pop all pending surface notifications from ``q``."""
        out = []
        while True:
            try:
                msg = q.get_nowait()
            except queue.Empty:
                return out
            if msg["type"] in NOTIFICATION_EVENTS:
                out.append(msg)
