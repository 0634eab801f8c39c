from __future__ import annotations

from cluster.types import ClusterId, ClusterIndex, Feature


def expansion_zoom(index: ClusterIndex, cluster_id: ClusterId) -> int:
    """
    Smallest zoom above the cluster's own level at which its members are no longer
    a single merged feature.

    Not clamped for presentation; the finest level holds only points, so the result
    never exceeds `max_zoom`. Raises `UnknownCluster` for ids not in the index.
    """
    node = index.cluster_node(cluster_id)
    zoom = cluster_id.zoom
    while zoom < index.max_zoom:
        zoom += 1
        if len(node.children) != 1:
            return zoom
        node = index.level(zoom).nodes[node.children[0]]
        if not node.is_cluster:
            return zoom
    return index.max_zoom


def children(index: ClusterIndex, cluster_id: ClusterId) -> list[Feature]:
    """
    Features at the next-finer level that `cluster_id` was merged from.
    """
    node = index.cluster_node(cluster_id)
    finer = cluster_id.zoom + 1
    return [index.feature_at(finer, i) for i in node.children]
