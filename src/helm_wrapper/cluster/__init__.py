"""Cluster-side helm version detection."""

from helm_wrapper.cluster.probe import ClusterProbe, KubernetesTillerProbe
from helm_wrapper.cluster.version import VersionMatcher

__all__ = [
    "ClusterProbe",
    "KubernetesTillerProbe",
    "VersionMatcher",
]
