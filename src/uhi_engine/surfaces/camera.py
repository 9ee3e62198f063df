"""Camera transitions: eased interpolation between two viewports."""

from __future__ import annotations

from uhi_engine.clusters.cluster import LatLng
from uhi_engine.surfaces.base import CameraState


def ease_in_out(t: float) -> float:
    """Cubic ease-in-out on [0, 1]."""
    t = min(max(t, 0.0), 1.0)
    if t < 0.5:
        return 4 * t * t * t
    return 1 - (-2 * t + 2) ** 3 / 2


def interpolate(start: CameraState, end: CameraState, t: float) -> CameraState:
    k = ease_in_out(t)
    return CameraState(
        center=LatLng(
            lat=start.center.lat + (end.center.lat - start.center.lat) * k,
            lng=start.center.lng + (end.center.lng - start.center.lng) * k,
        ),
        zoom=start.zoom + (end.zoom - start.zoom) * k,
    )


def transition_frames(
    start: CameraState,
    end: CameraState,
    duration: float,
    fps: int = 30,
) -> list[tuple[float, CameraState]]:
    """Frames of a bounded camera move as ``(delay_before, camera)`` pairs.

    The total of all delays equals ``duration`` and the last frame is
    exactly ``end``.  A non-positive duration yields a single jump.
    """
    if duration <= 0 or fps <= 0:
        return [(0.0, end)]
    steps = max(1, int(round(duration * fps)))
    delay = duration / steps
    frames = [(delay, interpolate(start, end, i / steps)) for i in range(1, steps)]
    frames.append((delay, end))
    return frames
