"""Cluster records, the read-only registry, and registry loaders."""

from uhi_engine.clusters.cluster import Cluster, LatLng, MetricDomain
from uhi_engine.clusters.registry import ClusterRegistry, ClusterView
from uhi_engine.clusters.loader import load_registry, parse_clusters
from uhi_engine.clusters.defaults import DEFAULT_METRICS, STATE_CENTER, default_registry

__all__ = [
    "Cluster",
    "ClusterRegistry",
    "ClusterView",
    "DEFAULT_METRICS",
    "LatLng",
    "MetricDomain",
    "STATE_CENTER",
    "default_registry",
    "load_registry",
    "parse_clusters",
]
