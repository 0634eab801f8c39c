from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, NamedTuple, TypeAlias, Union

from shapely.strtree import STRtree

from cluster.errors import UnknownCluster
from cluster.options import ClusterOptions
from layers.types import PointFeature, PointId, id_sort_key


FeatureKind = Literal["cluster", "point"]


class ClusterId(NamedTuple):
    """
    Arena slot of a cluster: `nodes[index]` of the level built for `zoom`.

    Being its own type keeps it apart from point ids (plain str/int).
    """

    zoom: int
    index: int

    def __str__(self) -> str:
        return f"cluster/{self.zoom}/{self.index}"

    @classmethod
    def parse(cls, raw: str) -> "ClusterId":
        parts = (raw or "").strip().split("/")
        if len(parts) != 3 or parts[0] != "cluster":
            raise UnknownCluster(raw)
        try:
            return cls(zoom=int(parts[1]), index=int(parts[2]))
        except ValueError:
            raise UnknownCluster(raw) from None


FeatureId: TypeAlias = Union[ClusterId, PointId]


@dataclass(frozen=True)
class Node:
    # Web-Mercator world coordinates in [0, 1].
    x: float
    y: float
    lon: float
    lat: float
    count: int
    # Index into `ClusterIndex.points`; -1 for clusters.
    point: int = -1
    # Indices into the next-finer level's `nodes`.
    children: tuple[int, ...] = ()

    @property
    def is_cluster(self) -> bool:
        return self.point < 0


@dataclass(frozen=True)
class ZoomLevel:
    zoom: int
    nodes: tuple[Node, ...]
    tree: STRtree = field(repr=False)


@dataclass(frozen=True)
class Feature:
    """
    What a viewport query returns: a cluster or an unclustered point.
    """

    id: FeatureId
    kind: FeatureKind
    lon: float
    lat: float
    count: int
    props: dict[str, Any]

    @property
    def is_cluster(self) -> bool:
        return self.kind == "cluster"


@dataclass(frozen=True)
class ClusterIndex:
    """
    Immutable multi-resolution index: one `ZoomLevel` per integer zoom.

    Built by `cluster.build.build_cluster_index`; never mutated afterwards.
    """

    options: ClusterOptions
    # Valid points, sorted by id.
    points: tuple[PointFeature, ...]
    levels: dict[int, ZoomLevel] = field(repr=False)
    dropped_ids: tuple[PointId, ...] = ()
    _point_pos: dict[PointId, int] = field(default_factory=dict, repr=False)

    @property
    def min_zoom(self) -> int:
        return self.options.min_zoom

    @property
    def max_zoom(self) -> int:
        return self.options.max_zoom

    @property
    def dropped(self) -> int:
        return len(self.dropped_ids)

    def level(self, zoom: int) -> ZoomLevel:
        return self.levels[int(zoom)]

    def point_position(self, point_id: PointId) -> int | None:
        return self._point_pos.get(point_id)

    def cluster_node(self, cluster_id: ClusterId) -> Node:
        if not isinstance(cluster_id, ClusterId):
            raise UnknownCluster(cluster_id)
        lvl = self.levels.get(cluster_id.zoom)
        if lvl is None or not 0 <= cluster_id.index < len(lvl.nodes):
            raise UnknownCluster(cluster_id)
        node = lvl.nodes[cluster_id.index]
        if not node.is_cluster:
            raise UnknownCluster(cluster_id)
        return node

    def feature_at(self, zoom: int, index: int) -> Feature:
        node = self.levels[zoom].nodes[index]
        if node.is_cluster:
            cid = ClusterId(zoom=zoom, index=index)
            return Feature(
                id=cid,
                kind="cluster",
                lon=node.lon,
                lat=node.lat,
                count=node.count,
                props=cluster_properties(cid, node.count),
            )
        p = self.points[node.point]
        return Feature(id=p.id, kind="point", lon=p.lon, lat=p.lat, count=1, props=p.props)


def cluster_properties(cluster_id: ClusterId, count: int) -> dict[str, Any]:
    return {
        "cluster": True,
        "cluster_id": str(cluster_id),
        "point_count": int(count),
        "point_count_abbreviated": abbreviate_count(count),
    }


def abbreviate_count(count: int) -> str:
    if count >= 1_000_000:
        return f"{round(count / 1_000_000)}M"
    if count >= 10_000:
        return f"{round(count / 1_000)}k"
    if count >= 1_000:
        return f"{round(count / 100) / 10}k"
    return str(count)


def feature_sort_key(fid: FeatureId) -> tuple:
    # Clusters first (by zoom, index), then points by id.
    if isinstance(fid, ClusterId):
        return (0, fid.zoom, fid.index, 0, 0, "")
    return (1, 0, 0) + id_sort_key(fid)
