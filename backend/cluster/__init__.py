"""
Hierarchical point clustering for map viewports.

Two phases: `build_cluster_index` once per point set, then `query`,
`expansion_zoom`, `children` and `leaves` against the ready, immutable index.
"""

from cluster.build import build_cluster_index
from cluster.errors import ClusterError, DuplicatePointId, InvalidGeometry, UnknownCluster
from cluster.expansion import children, expansion_zoom
from cluster.leaves import leaves
from cluster.options import ClusterOptions
from cluster.query import query
from cluster.types import ClusterId, ClusterIndex, Feature

__all__ = [
    "ClusterError",
    "ClusterId",
    "ClusterIndex",
    "ClusterOptions",
    "DuplicatePointId",
    "Feature",
    "InvalidGeometry",
    "UnknownCluster",
    "build_cluster_index",
    "children",
    "expansion_zoom",
    "leaves",
    "query",
]
