"""ClusterRegistry: read-only, ordered collection of clusters.

The registry is frozen at construction: no add/remove, and the cluster
records themselves are immutable, so any number of readers may share it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from uhi_engine.clusters.cluster import Cluster, MetricDomain
from uhi_engine.errors import NotFound
from uhi_engine.zones import Zone, ZoneScheme


@dataclass(frozen=True)
class ClusterView:
    """List-row projection handed to the display shell."""

    id: str
    name: str
    zone: Zone
    metrics: dict

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "zone": self.zone.value,
            "metrics": dict(self.metrics),
        }


class ClusterRegistry:
    """Immutable registry of clusters scored against a metric catalogue."""

    def __init__(self, clusters: Iterable[Cluster], metrics: Iterable[MetricDomain]) -> None:
        self._metrics: dict[str, MetricDomain] = {}
        for domain in metrics:
            if domain.name in self._metrics:
                raise ValueError(f"Duplicate metric: {domain.name}")
            self._metrics[domain.name] = domain

        self._clusters: tuple[Cluster, ...] = tuple(clusters)
        self._by_id: dict[str, Cluster] = {}
        for cluster in self._clusters:
            if cluster.id in self._by_id:
                raise ValueError(f"Duplicate cluster id: {cluster.id}")
            missing = [name for name in self._metrics if name not in cluster.metrics]
            if missing:
                raise ValueError(f"Cluster {cluster.id} is missing metrics: {', '.join(missing)}")
            self._by_id[cluster.id] = cluster

    def list(self) -> tuple[Cluster, ...]:
        """All clusters in configuration order."""
        return self._clusters

    def get(self, cluster_id: str) -> Cluster:
        """Look up a cluster.

        Raises:
            NotFound: If no cluster has this id.
        """
        try:
            return self._by_id[cluster_id]
        except KeyError:
            raise NotFound(cluster_id) from None

    def ids(self) -> tuple[str, ...]:
        return tuple(c.id for c in self._clusters)

    @property
    def metrics(self) -> Mapping[str, MetricDomain]:
        return dict(self._metrics)

    def metric(self, name: str) -> MetricDomain:
        """Domain of a catalogued metric. Raises KeyError if unknown."""
        return self._metrics[name]

    def project(self, zones: ZoneScheme) -> list[ClusterView]:
        """Display-shell projection ``{id, name, zone, metrics}`` per cluster."""
        return [
            ClusterView(
                id=c.id,
                name=c.name,
                zone=zones.zone_of(c),
                metrics=dict(c.metrics),
            )
            for c in self._clusters
        ]

    def __contains__(self, cluster_id: object) -> bool:
        return cluster_id in self._by_id

    def __iter__(self) -> Iterator[Cluster]:
        return iter(self._clusters)

    def __len__(self) -> int:
        return len(self._clusters)
