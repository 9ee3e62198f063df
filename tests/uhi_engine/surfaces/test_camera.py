"""Tests for camera easing and transition frames."""

import pytest

from uhi_engine.clusters import LatLng
from uhi_engine.surfaces import CameraState
from uhi_engine.surfaces.camera import ease_in_out, interpolate, transition_frames

START = CameraState(LatLng(19.75, 75.71), 7.0)
END = CameraState(LatLng(19.07, 72.88), 10.0)


class TestEasing:

    def test_endpoints(self):
        assert ease_in_out(0.0) == 0.0
        assert ease_in_out(1.0) == 1.0
        assert ease_in_out(0.5) == pytest.approx(0.5)

    def test_clamped(self):
        assert ease_in_out(-1.0) == 0.0
        assert ease_in_out(2.0) == 1.0

    def test_monotonic(self):
        samples = [ease_in_out(i / 20) for i in range(21)]
        assert samples == sorted(samples)

    def test_interpolate_midpoint_zoom(self):
        mid = interpolate(START, END, 0.5)
        assert mid.zoom == pytest.approx(8.5)


class TestTransitionFrames:

    def test_last_frame_is_target(self):
        frames = transition_frames(START, END, 1.0, fps=30)
        assert frames[-1][1] == END
        assert len(frames) == 30

    def test_delays_sum_to_duration(self):
        frames = transition_frames(START, END, 1.5, fps=30)
        assert sum(d for d, _ in frames) == pytest.approx(1.5)

    def test_zoom_moves_toward_target(self):
        zooms = [c.zoom for _, c in transition_frames(START, END, 0.5, fps=20)]
        assert zooms == sorted(zooms)
        assert 7.0 < zooms[0] <= 10.0

    def test_zero_duration_jumps(self):
        assert transition_frames(START, END, 0.0) == [(0.0, END)]

    def test_short_duration_single_frame(self):
        frames = transition_frames(START, END, 0.01, fps=30)
        assert len(frames) == 1
        assert frames[0][1] == END
