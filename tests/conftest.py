"""Shared fixtures for explorer tests."""

from __future__ import annotations

import asyncio

import pytest

from uhi_engine.clusters import Cluster, ClusterRegistry, LatLng, MetricDomain
from uhi_engine.layers.drawables import Drawables
from uhi_engine.selection.state import SelectionState
from uhi_engine.surfaces.base import CameraState, MapSurface, SurfaceConfig
from uhi_engine.zones import ZoneBreakpoints, ZoneScheme


class FakeSurface(MapSurface):
    """In-memory surface recording every call.

    Initialization can be held open with ``gate`` (an asyncio.Event set by
    the test), made to fail with ``fail``, or made ``stubborn`` so that it
    ignores cancellation and completes anyway once the gate opens.
    """

    kind = "fake"

    def __init__(self, fail: Exception | None = None, gate=None, stubborn: bool = False):
        self.fail = fail
        self.gate = gate
        self.stubborn = stubborn
        self.init_calls: list[tuple[str, str]] = []
        self.frames: list[tuple[Drawables, SelectionState]] = []
        self.cameras: list[CameraState] = []
        self.destroy_calls = 0
        self.handle: object | None = None

    async def initialize(self, container: str, token: str, config: SurfaceConfig) -> None:
        self.init_calls.append((container, token))
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                if not self.stubborn:
                    raise
                await self.gate.wait()
        if self.fail is not None:
            raise self.fail
        self.handle = object()

    def apply_layers(self, drawables: Drawables, selection: SelectionState) -> None:
        self.frames.append((drawables, selection))

    def set_camera(self, camera: CameraState) -> None:
        self.cameras.append(camera)

    def render(self) -> str:
        return "<html>fake map</html>"

    def destroy(self) -> None:
        self.destroy_calls += 1
        self.handle = None


SCORE = MetricDomain("score", "Score", 0.0, 10.0)
TEST_ZONES = ZoneScheme(primary_metric="score", breakpoints=ZoneBreakpoints(3.0, 6.0, 8.0))


@pytest.fixture
def fake_surface_cls():
    return FakeSurface


@pytest.fixture
def score_metric():
    return SCORE


@pytest.fixture
def test_zones():
    return TEST_ZONES


@pytest.fixture
def ab_registry():
    """Two clusters: A scores 9 (hot), B scores 2 (cold); domain 0-10."""
    return ClusterRegistry(
        [
            Cluster("A", "Alpha", LatLng(19.0, 73.0), {"score": 9.0}),
            Cluster("B", "Bravo", LatLng(18.0, 74.0), {"score": 2.0}),
        ],
        [SCORE],
    )


@pytest.fixture
def fast_config():
    """Surface config with a short focus transition."""
    return SurfaceConfig(
        token=None,
        center=LatLng(19.75, 75.71),
        overview_zoom=7.0,
        detail_zoom=10.0,
        focus_duration=0.05,
        focus_fps=20,
    )
