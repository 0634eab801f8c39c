from __future__ import annotations

import logging
import threading
import time
from typing import Iterable

from cluster.build import build_cluster_index
from cluster.errors import UnknownCluster
from cluster.expansion import children as cluster_children
from cluster.expansion import expansion_zoom as cluster_expansion_zoom
from cluster.leaves import leaves as cluster_leaves
from cluster.options import ClusterOptions
from cluster.query import query as cluster_query
from cluster.types import ClusterId, ClusterIndex, Feature, FeatureId
from engine.types import BuildReport, Viewport
from layers.types import PointFeature


logger = logging.getLogger(__name__)


class ClusterEngine:
    """
    Holds the current clustered snapshot of a point set.

    `load` builds a complete new index off to the side and then publishes it with a
    single reference assignment, so concurrent readers see either the old or the new
    snapshot. Reads take no lock.
    """

    def __init__(self, options: ClusterOptions) -> None:
        self.options = options
        self._snapshot: ClusterIndex | None = None
        self._lock = threading.RLock()

    @property
    def snapshot(self) -> ClusterIndex | None:
        return self._snapshot

    def load(self, points: Iterable[PointFeature], *, strict: bool = False) -> BuildReport:
        t0 = time.perf_counter()
        # Serialize writers; readers keep using the previous snapshot meanwhile.
        with self._lock:
            index = build_cluster_index(points, self.options, strict=strict)
            self._snapshot = index
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug("Published snapshot with %d points", len(index.points))
        return BuildReport(
            points=len(index.points),
            dropped_ids=index.dropped_ids,
            min_zoom=index.min_zoom,
            max_zoom=index.max_zoom,
            elapsed_ms=elapsed_ms,
        )

    def query(self, viewport: Viewport) -> list[Feature]:
        index = self._snapshot
        if index is None:
            # Nothing loaded yet: render nothing rather than fail.
            return []
        return cluster_query(index, viewport.bbox, viewport.zoom)

    def expansion_zoom(self, cluster_id: ClusterId) -> int:
        return cluster_expansion_zoom(self._require(cluster_id), cluster_id)

    def children(self, cluster_id: ClusterId) -> list[Feature]:
        return cluster_children(self._require(cluster_id), cluster_id)

    def leaves(
        self,
        ids: Iterable[FeatureId],
        limit: int | None = None,
        offset: int = 0,
    ) -> list[PointFeature]:
        ids = list(ids)
        index = self._snapshot
        if index is None:
            if ids:
                raise UnknownCluster(ids[0])
            return []
        return cluster_leaves(index, ids, limit=limit, offset=offset)

    def _require(self, cluster_id: ClusterId) -> ClusterIndex:
        index = self._snapshot
        if index is None:
            raise UnknownCluster(cluster_id)
        return index
