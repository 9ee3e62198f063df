"""Exceptions raised by the explorer core.

Every error here is recoverable.  The operation that raised it is rejected
and the state it would have touched is left as it was.
"""

from __future__ import annotations


class ExplorerError(Exception):
    """Base class for all explorer core errors."""


class NotFound(ExplorerError, KeyError):
    """A cluster id is not present in the registry."""

    def __init__(self, cluster_id: str) -> None:
        super().__init__(f"Cluster not found: {cluster_id}")
        self.cluster_id = cluster_id

    def __str__(self) -> str:
        return self.args[0]


class UnknownLayer(ExplorerError, KeyError):
    """A layer name outside the fixed layer set was referenced."""

    def __init__(self, layer: str) -> None:
        super().__init__(f"Unknown layer: {layer}")
        self.layer = layer

    def __str__(self) -> str:
        return self.args[0]


class SurfaceInitFailed(ExplorerError):
    """The rendering surface could not be initialized."""

    def __init__(self, surface: str, reason: str) -> None:
        super().__init__(f"Map surface '{surface}' failed to initialize: {reason}")
        self.surface = surface
        self.reason = reason


class MalformedBoundary(ExplorerError, ValueError):
    """A cluster boundary has fewer than three distinct vertices."""

    def __init__(self, cluster_id: str, points: int) -> None:
        super().__init__(
            f"Boundary of cluster {cluster_id} has {points} point(s), need at least 3"
        )
        self.cluster_id = cluster_id
        self.points = points
