from __future__ import annotations

from typing import Iterable, Iterator

from cluster.errors import UnknownCluster
from cluster.types import ClusterId, ClusterIndex, FeatureId
from layers.types import PointFeature, PointId


def leaves(
    index: ClusterIndex,
    ids: Iterable[FeatureId],
    limit: int | None = None,
    offset: int = 0,
) -> list[PointFeature]:
    """
    Source points under the given feature ids, flattened and de-duplicated.

    Cluster ids expand recursively; point ids resolve to themselves. Order is
    first-seen (ids in the given order, children depth-first). `limit=None` means
    no cap; the result is only truncated when a limit is passed.
    """
    if limit is not None and limit <= 0:
        return []
    # Resolve every id up front so an unknown one fails before any work.
    positions = [_resolve(index, fid) for fid in ids]

    seen: set[PointId] = set()
    skipped = 0
    out: list[PointFeature] = []
    for kind, ref in positions:
        it = _point_positions(index, ref) if kind == "cluster" else iter((ref,))
        for pos in it:
            p = index.points[pos]
            if p.id in seen:
                continue
            seen.add(p.id)
            if skipped < offset:
                skipped += 1
                continue
            out.append(p)
            if limit is not None and len(out) >= limit:
                return out
    return out


def _resolve(index: ClusterIndex, fid: FeatureId) -> tuple[str, ClusterId | int]:
    if isinstance(fid, ClusterId):
        index.cluster_node(fid)
        return "cluster", fid
    pos = index.point_position(fid)
    if pos is None:
        raise UnknownCluster(fid)
    return "point", pos


def _point_positions(index: ClusterIndex, cluster_id: ClusterId) -> Iterator[int]:
    # Depth-first over child links, left to right.
    stack = [(cluster_id.zoom, cluster_id.index)]
    while stack:
        zoom, i = stack.pop()
        node = index.level(zoom).nodes[i]
        if not node.is_cluster:
            yield node.point
            continue
        stack.extend((zoom + 1, c) for c in reversed(node.children))
