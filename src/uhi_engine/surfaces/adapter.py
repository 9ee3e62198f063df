"""MapSurfaceAdapter: lifecycle owner for one rendering surface.

States::

    uninitialized --(token + container)--> initializing --ok--> ready
                                                    \\--error--> failed
    any --destroy()--> destroyed

The adapter is the only holder of the surface.  Everyone else talks to it
through ``update``, ``focus`` and the marker dispatch methods.  While the
surface is not ready every call lands on the placeholder instead, so the
page keeps tracking selection even with no map.

All methods must be called from the event loop thread.  ``mount`` /
``configure`` start initialization as a task on the running loop; the task
checks the liveness flag before touching any state, so a late result after
``destroy()`` is dropped.
"""

from __future__ import annotations

import asyncio

from loguru import logger

from uhi_engine.clusters.cluster import LatLng
from uhi_engine.errors import SurfaceInitFailed
from uhi_engine.layers.drawables import Drawables
from uhi_engine.selection.state import SelectionState
from uhi_engine.surfaces.base import (
    CameraState,
    MapSurface,
    MarkerHandlers,
    SurfaceConfig,
    SurfaceState,
)
from uhi_engine.surfaces.camera import transition_frames
from uhi_engine.surfaces.placeholder import PlaceholderSurface


class MapSurfaceAdapter:
    """Owns a MapSurface and its asynchronous initialization."""

    def __init__(
        self,
        surface: MapSurface,
        config: SurfaceConfig,
        event_bus=None,
        placeholder: PlaceholderSurface | None = None,
    ) -> None:
        self._surface = surface
        self._placeholder = placeholder or PlaceholderSurface()
        self._config = config
        self._event_bus = event_bus

        self._state = SurfaceState.UNINITIALIZED
        self._alive = True
        self._token: str | None = config.token
        self._container: str | None = None
        self._error: SurfaceInitFailed | None = None
        self._notified: set[str] = set()

        self._init_task: asyncio.Task | None = None
        self._focus_task: asyncio.Task | None = None

        self._camera = config.overview_camera
        self._drawables: Drawables | None = None
        self._selection = SelectionState()
        self._handlers: MarkerHandlers | None = None

        self._placeholder.set_camera(self._camera)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> SurfaceState:
        return self._state

    @property
    def kind(self) -> str:
        return self._surface.kind

    @property
    def camera(self) -> CameraState:
        return self._camera

    @property
    def error(self) -> SurfaceInitFailed | None:
        return self._error

    @property
    def is_ready(self) -> bool:
        return self._state is SurfaceState.READY

    @property
    def placeholder(self) -> PlaceholderSurface:
        return self._placeholder

    def status(self) -> dict:
        return {
            "state": self._state.value,
            "kind": self._surface.kind,
            "mounted": self._container is not None,
            "has_token": bool(self._token),
            "camera": self._camera.to_dict(),
            "error": str(self._error) if self._error else None,
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self, container: str) -> asyncio.Task | None:
        """Attach to a view container; starts initialization if a token is set."""
        if not self._alive:
            logger.debug("mount() on destroyed surface ignored")
            return None
        if self._container is None:
            self._container = container
        return self._maybe_start()

    def configure(self, token: str | None) -> asyncio.Task | None:
        """Supply the access token; starts initialization if mounted.

        No-op while initializing or ready, and after a failure.
        """
        if not self._alive:
            logger.debug("configure() on destroyed surface ignored")
            return None
        if self._state is not SurfaceState.UNINITIALIZED:
            logger.debug(f"configure() ignored in state {self._state.value}")
            return None
        self._token = token or None
        return self._maybe_start()

    def _maybe_start(self) -> asyncio.Task | None:
        if self._state is not SurfaceState.UNINITIALIZED:
            return None
        if not self._token or self._container is None:
            return None
        loop = asyncio.get_running_loop()
        self._state = SurfaceState.INITIALIZING
        logger.info(f"Initializing {self._surface.kind} surface in '{self._container}'")
        self._init_task = loop.create_task(self._initialize(self._container, self._token))
        return self._init_task

    async def _initialize(self, container: str, token: str) -> None:
        try:
            await self._surface.initialize(container, token, self._config)
        except asyncio.CancelledError:
            self._surface.destroy()
            raise
        except Exception as e:
            self._surface.destroy()
            if not self._alive:
                logger.debug(f"Surface init failed after destroy, ignored: {e}")
                return
            self._state = SurfaceState.FAILED
            self._error = SurfaceInitFailed(self._surface.kind, str(e))
            self._error.__cause__ = e
            logger.error(str(self._error))
            self._notify("surface-init-failed", {"surface": self._surface.kind, "reason": str(e)})
            return

        if not self._alive:
            # Late success after unmount: release what the surface just built.
            self._surface.destroy()
            logger.debug("Surface init completed after destroy, ignored")
            return

        self._state = SurfaceState.READY
        self._surface.set_camera(self._camera)
        self._draw()
        logger.info(f"{self._surface.kind} surface ready")
        self._notify("surface-ready", {"surface": self._surface.kind})

    def destroy(self) -> None:
        """Release the surface from any state.  Idempotent."""
        if not self._alive:
            return
        self._alive = False
        for task in (self._init_task, self._focus_task):
            if task is not None and not task.done():
                task.cancel()
        self._surface.destroy()
        self._placeholder.destroy()
        self._state = SurfaceState.DESTROYED
        logger.info(f"{self._surface.kind} surface destroyed")

    def _notify(self, event_type: str, data: dict) -> None:
        if event_type in self._notified:
            return
        self._notified.add(event_type)
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def update(self, drawables: Drawables, selection: SelectionState) -> None:
        """Push a new frame to whichever surface is showing."""
        if not self._alive:
            return
        self._drawables = drawables
        self._selection = selection
        self._draw()

    def _draw(self) -> None:
        if self._drawables is None:
            return
        target = self._surface if self._state is SurfaceState.READY else self._placeholder
        target.apply_layers(self._drawables, self._selection)

    def render(self) -> str:
        if self._state is SurfaceState.READY:
            return self._surface.render()
        return self._placeholder.render()

    # ------------------------------------------------------------------
    # Camera
    # ------------------------------------------------------------------

    def focus(self, center: LatLng, zoom: float) -> asyncio.Task | None:
        """Start a bounded camera transition.  Fire-and-forget.

        A new request cancels any transition still in flight.  When the
        surface is not ready, or no loop is running, the camera jumps.
        """
        if not self._alive:
            return None
        target = CameraState(center, zoom)
        if self._focus_task is not None and not self._focus_task.done():
            self._focus_task.cancel()
            logger.debug("Camera transition superseded")
        self._focus_task = None

        if self._state is not SurfaceState.READY:
            self._camera = target
            self._placeholder.set_camera(target)
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._camera = target
            self._surface.set_camera(target)
            return None
        self._focus_task = loop.create_task(self._fly(target))
        return self._focus_task

    async def _fly(self, target: CameraState) -> None:
        frames = transition_frames(
            self._camera, target, self._config.focus_duration, self._config.focus_fps
        )
        for delay, camera in frames:
            await asyncio.sleep(delay)
            if not self._alive or self._state is not SurfaceState.READY:
                return
            self._camera = camera
            self._surface.set_camera(camera)

    # ------------------------------------------------------------------
    # Marker interaction
    # ------------------------------------------------------------------

    def bind_markers(self, handlers: MarkerHandlers) -> None:
        self._handlers = handlers

    def click_marker(self, cluster_id: str):
        return self._require_handlers().on_click(cluster_id)

    def hover_marker(self, cluster_id: str):
        return self._require_handlers().on_hover_enter(cluster_id)

    def leave_marker(self, cluster_id: str):
        return self._require_handlers().on_hover_leave(cluster_id)

    def _require_handlers(self) -> MarkerHandlers:
        if self._handlers is None:
            raise RuntimeError("No marker handlers bound")
        return self._handlers
