from __future__ import annotations

import logging
import time
from typing import Iterable

from shapely.geometry import Point
from shapely.strtree import STRtree

from cluster.errors import DuplicatePointId, InvalidGeometry
from cluster.options import ClusterOptions
from cluster.types import ClusterIndex, Node, ZoomLevel
from geo.mercator import project_many, unproject, world_radius
from layers.types import PointFeature, PointId, id_sort_key


logger = logging.getLogger(__name__)


def build_cluster_index(
    points: Iterable[PointFeature],
    options: ClusterOptions,
    *,
    strict: bool = False,
) -> ClusterIndex:
    """
    Build one clustered level per integer zoom in `[min_zoom, max_zoom]`.

    The finest level (`max_zoom`) holds every point unclustered. Each coarser level is
    derived from the next-finer one by greedily merging nodes whose projected pixel
    distance at that zoom is within `options.radius`.

    Points with invalid coordinates are dropped and reported via `dropped_ids`, unless
    `strict` is set, in which case the first one raises `InvalidGeometry`.
    """
    t0 = time.perf_counter()
    valid, dropped = _validate(points, strict=strict)
    valid.sort(key=lambda p: id_sort_key(p.id))
    point_pos = {p.id: i for i, p in enumerate(valid)}

    coords = project_many([p.lon for p in valid], [p.lat for p in valid])
    finest = tuple(
        Node(x=x, y=y, lon=float(p.lon), lat=float(p.lat), count=1, point=i)
        for i, (p, (x, y)) in enumerate(zip(valid, coords))
    )

    levels: dict[int, ZoomLevel] = {options.max_zoom: _make_level(options.max_zoom, finest)}
    for z in range(options.max_zoom - 1, options.min_zoom - 1, -1):
        nodes = _cluster_level(levels[z + 1], zoom=z, options=options)
        levels[z] = _make_level(z, nodes)
        logger.debug("zoom %d: %d features", z, len(nodes))

    if dropped:
        logger.warning(
            "Dropped %d point(s) with invalid coordinates (first: %r)",
            len(dropped),
            dropped[0],
        )
    logger.info(
        "Built cluster index: %d points, %d dropped, zoom %d..%d in %.1f ms",
        len(valid),
        len(dropped),
        options.min_zoom,
        options.max_zoom,
        (time.perf_counter() - t0) * 1000.0,
    )

    return ClusterIndex(
        options=options,
        points=tuple(valid),
        levels=levels,
        dropped_ids=tuple(dropped),
        _point_pos=point_pos,
    )


def _validate(
    points: Iterable[PointFeature], *, strict: bool
) -> tuple[list[PointFeature], list[PointId]]:
    seen: set[PointId] = set()
    valid: list[PointFeature] = []
    dropped: list[PointId] = []
    for p in points:
        if p.id in seen:
            raise DuplicatePointId(p.id)
        seen.add(p.id)
        if p.has_valid_position():
            valid.append(p)
            continue
        if strict:
            raise InvalidGeometry(p.id, p.lon, p.lat)
        dropped.append(p.id)
    return valid, dropped


def _make_level(zoom: int, nodes: tuple[Node, ...]) -> ZoomLevel:
    geoms = [Point(n.x, n.y) for n in nodes]
    return ZoomLevel(zoom=zoom, nodes=nodes, tree=STRtree(geoms))


def _cluster_level(finer: ZoomLevel, *, zoom: int, options: ClusterOptions) -> tuple[Node, ...]:
    r = world_radius(options.radius, extent=options.extent, zoom=zoom)
    src = finer.nodes
    visited = [False] * len(src)
    out: list[Node] = []

    for i, p in enumerate(src):
        if visited[i]:
            continue
        visited[i] = True

        neighbors = [
            j
            for j in within(finer.tree, p.x, p.y, r)
            if not visited[j]
        ]
        total = p.count + sum(src[j].count for j in neighbors)

        if total >= options.min_points:
            wx = p.x * p.count
            wy = p.y * p.count
            for j in neighbors:
                visited[j] = True
                wx += src[j].x * src[j].count
                wy += src[j].y * src[j].count
            x = wx / total
            y = wy / total
            lon, lat = unproject(x, y)
            out.append(
                Node(x=x, y=y, lon=lon, lat=lat, count=total, children=(i, *neighbors))
            )
            continue

        out.append(_carry(p, i))
        for j in neighbors:
            visited[j] = True
            out.append(_carry(src[j], j))

    return tuple(out)


def _carry(node: Node, index: int) -> Node:
    # Unmerged node moved to the coarser level; clusters keep a link to themselves below.
    if node.is_cluster:
        return Node(
            x=node.x,
            y=node.y,
            lon=node.lon,
            lat=node.lat,
            count=node.count,
            children=(index,),
        )
    return Node(x=node.x, y=node.y, lon=node.lon, lat=node.lat, count=1, point=node.point)


def within(tree: STRtree, x: float, y: float, r: float) -> list[int]:
    """
    Indices of tree geometries within distance `r` of (x, y), ascending.
    """
    idxs = tree.query(Point(x, y), predicate="dwithin", distance=r)
    return sorted(int(i) for i in idxs)
