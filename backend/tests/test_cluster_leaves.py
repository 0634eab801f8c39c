from __future__ import annotations

import pytest

from cluster.build import build_cluster_index
from cluster.errors import UnknownCluster
from cluster.leaves import leaves
from cluster.options import ClusterOptions
from cluster.query import query
from geo.aoi import BBox
from layers.types import PointFeature


WORLD = BBox(min_lon=-180.0, min_lat=-85.0, max_lon=180.0, max_lat=85.0)


def _grid_index():
    # 5x5 grid, ~11m spacing around Leicester: one cluster at low zoom.
    points = [
        PointFeature(
            id=f"crime-{r}-{c}",
            lon=-1.1316 + c * 0.0001,
            lat=52.6297 + r * 0.0001,
            props={"category": "drugs" if (r + c) % 2 else "burglary"},
        )
        for r in range(5)
        for c in range(5)
    ]
    return build_cluster_index(points, ClusterOptions(max_zoom=20, radius=75)), points


def test_empty_ids_give_empty_result():
    index, _points = _grid_index()
    assert leaves(index, []) == []
    assert leaves(index, set()) == []


def test_cluster_leaves_are_not_capped_by_default():
    index, points = _grid_index()
    [cluster] = query(index, WORLD, 5)
    got = leaves(index, [cluster.id])
    assert len(got) == len(points) == 25
    assert {p.id for p in got} == {p.id for p in points}


def test_overlapping_ids_are_deduplicated_in_first_seen_order():
    index, _points = _grid_index()
    [cluster] = query(index, WORLD, 5)
    everything = leaves(index, [cluster.id])

    assert leaves(index, [cluster.id, cluster.id]) == everything

    first = everything[0]
    got = leaves(index, [first.id, cluster.id])
    assert got[0] == first
    assert len(got) == 25


def test_nested_clusters_from_different_levels_overlap():
    index, _points = _grid_index()
    [coarse] = query(index, WORLD, 5)
    finer = [f for f in query(index, WORLD, 16) if f.is_cluster]
    assert finer

    got = leaves(index, [f.id for f in finer] + [coarse.id])
    assert len(got) == 25
    assert len({p.id for p in got}) == 25


def test_limit_and_offset_page_through_leaves():
    index, _points = _grid_index()
    [cluster] = query(index, WORLD, 5)
    everything = leaves(index, [cluster.id])

    assert leaves(index, [cluster.id], limit=10) == everything[:10]
    assert leaves(index, [cluster.id], limit=10, offset=20) == everything[20:]
    assert leaves(index, [cluster.id], limit=0) == []


def test_unknown_ids_raise():
    index, _points = _grid_index()
    with pytest.raises(UnknownCluster):
        leaves(index, ["no-such-crime"])
