from __future__ import annotations

from typing import Any, Iterable

from cluster.types import Feature
from render.style import ClusterStyle


def feature_collection(
    features: Iterable[Feature], *, style: ClusterStyle | None = None
) -> dict[str, Any]:
    """
    GeoJSON FeatureCollection for a map source, clusters and points mixed.

    Cluster ids are serialized as `cluster/<zoom>/<index>`; renderers pass them back
    through `ClusterId.parse`.
    """
    s = style or ClusterStyle()
    return {
        "type": "FeatureCollection",
        "features": [geojson_feature(f, style=s) for f in features],
    }


def geojson_feature(f: Feature, *, style: ClusterStyle) -> dict[str, Any]:
    if f.is_cluster:
        color, radius = style.for_count(f.count)
        props: dict[str, Any] = {
            **f.props,
            "circle_color": color,
            "circle_radius": radius,
        }
        fid: Any = str(f.id)
    else:
        props = {
            "cluster": False,
            **f.props,
            "circle_color": style.for_category(f.props.get("category")),
        }
        fid = f.id
    return {
        "type": "Feature",
        "id": fid,
        "properties": props,
        "geometry": {"type": "Point", "coordinates": [f.lon, f.lat]},
    }
