from __future__ import annotations

from cluster.build import build_cluster_index
from cluster.options import ClusterOptions
from cluster.query import query
from cluster.types import ClusterId
from geo.aoi import BBox
from layers.types import PointFeature


def _index(points: list[PointFeature], *, max_zoom: int = 5):
    return build_cluster_index(points, ClusterOptions(max_zoom=max_zoom, radius=50))


def test_antimeridian_bbox_returns_both_sides():
    index = _index(
        [
            PointFeature(id="east", lon=175.0, lat=0.0, props={}),
            PointFeature(id="west", lon=-175.0, lat=0.0, props={}),
            PointFeature(id="mid", lon=0.0, lat=0.0, props={}),
        ]
    )
    bbox = BBox(min_lon=170.0, min_lat=-10.0, max_lon=-170.0, max_lat=10.0)
    assert [f.id for f in query(index, bbox, 5)] == ["east", "west"]


def test_antimeridian_edge_points_are_not_duplicated():
    index = _index(
        [
            PointFeature(id="dateline-e", lon=180.0, lat=1.0, props={}),
            PointFeature(id="dateline-w", lon=-180.0, lat=-1.0, props={}),
        ]
    )
    bbox = BBox(min_lon=179.0, min_lat=-5.0, max_lon=-179.0, max_lat=5.0)
    ids = [f.id for f in query(index, bbox, 5)]
    assert ids == ["dateline-e", "dateline-w"]


def test_bbox_filters_by_position():
    index = _index(
        [
            PointFeature(id="in", lon=-1.13, lat=52.63, props={}),
            PointFeature(id="out", lon=2.35, lat=48.85, props={}),
        ]
    )
    bbox = BBox(min_lon=-1.5, min_lat=52.0, max_lon=-0.5, max_lat=53.0)
    assert [f.id for f in query(index, bbox, 5)] == ["in"]


def test_empty_or_outside_bbox_returns_empty():
    index = _index([PointFeature(id="p", lon=0.0, lat=0.0, props={})])
    assert query(index, BBox(min_lon=0.0, min_lat=-1.0, max_lon=0.0, max_lat=1.0), 5) == []
    assert query(index, BBox(min_lon=-10.0, min_lat=91.0, max_lon=10.0, max_lat=95.0), 5) == []


def test_zoom_is_floored_and_clamped():
    points = [
        PointFeature(id="a", lon=0.0, lat=0.0, props={}),
        PointFeature(id="b", lon=0.0001, lat=0.0001, props={}),
    ]
    index = build_cluster_index(points, ClusterOptions(min_zoom=2, max_zoom=20, radius=50))
    world = BBox(min_lon=-180.0, min_lat=-85.0, max_lon=180.0, max_lat=85.0)

    [low] = query(index, world, 0.5)
    assert low.id == ClusterId(zoom=2, index=0)
    [c] = query(index, world, 3.99)
    assert c.id == ClusterId(zoom=3, index=0)
    assert [f.id for f in query(index, world, 42)] == ["a", "b"]


def test_ordering_is_stable_and_sorted_by_id():
    points = [
        PointFeature(id=p_id, lon=lon, lat=10.0, props={})
        for p_id, lon in [("b", 20.0), (3, 10.0), ("a", 30.0), (1, 40.0)]
    ]
    index = _index(points)
    bbox = BBox(min_lon=0.0, min_lat=0.0, max_lon=50.0, max_lat=20.0)

    first = query(index, bbox, 5)
    assert [f.id for f in first] == [1, 3, "a", "b"]
    assert query(index, bbox, 5) == first


def test_clusters_sort_before_points():
    points = [
        PointFeature(id="a", lon=0.0, lat=0.0, props={}),
        PointFeature(id="b", lon=0.0001, lat=0.0001, props={}),
        PointFeature(id="0-lonely", lon=-60.0, lat=0.0, props={}),
    ]
    index = build_cluster_index(points, ClusterOptions(max_zoom=20, radius=50))
    world = BBox(min_lon=-180.0, min_lat=-85.0, max_lon=180.0, max_lat=85.0)
    feats = query(index, world, 4)
    assert [f.kind for f in feats] == ["cluster", "point"]
    assert feats[1].id == "0-lonely"


def test_polar_points_outside_bbox_are_not_returned():
    index = _index(
        [
            PointFeature(id="arctic", lon=5.0, lat=89.0, props={}),
            PointFeature(id="svalbard", lon=5.0, lat=85.5, props={}),
            PointFeature(id="oslo", lon=5.0, lat=60.0, props={}),
        ]
    )
    # Both polar points project onto the map's top edge, like an 85.06 bbox edge.
    below = BBox(min_lon=0.0, min_lat=0.0, max_lon=10.0, max_lat=85.06)
    assert [f.id for f in query(index, below, 5)] == ["oslo"]

    band = BBox(min_lon=0.0, min_lat=86.0, max_lon=10.0, max_lat=89.5)
    assert [f.id for f in query(index, band, 5)] == ["arctic"]


def test_non_finite_zoom_returns_empty():
    index = _index([PointFeature(id="p", lon=0.0, lat=0.0, props={})])
    world = BBox(min_lon=-180.0, min_lat=-85.0, max_lon=180.0, max_lat=85.0)
    assert query(index, world, float("nan")) == []
    assert query(index, world, float("inf")) == []
