from __future__ import annotations

from typing import Any, Iterable

from cluster.leaves import leaves
from cluster.types import ClusterIndex, Feature, FeatureId
from layers.types import PointFeature


def unique_features(features: Iterable[Feature]) -> list[Feature]:
    """
    Drop repeated features (a renderer may report the same one once per tile).
    """
    seen: set[FeatureId] = set()
    out: list[Feature] = []
    for f in features:
        if f.id in seen:
            continue
        seen.add(f.id)
        out.append(f)
    return out


def visible_leaves(
    index: ClusterIndex,
    rendered: Iterable[Feature],
    *,
    text: str | None = None,
    text_prop: str = "category",
    limit: int | None = None,
) -> list[PointFeature]:
    """
    Points under the rendered clusters, for the side listing.

    Only clusters are expanded; `text` keeps points whose `text_prop` contains it
    (case-insensitive).
    """
    cluster_ids = [f.id for f in unique_features(rendered) if f.is_cluster]
    pts = leaves(index, cluster_ids)
    needle = (text or "").strip().lower()
    if needle:
        pts = [p for p in pts if needle in str(p.props.get(text_prop) or "").lower()]
    if limit is not None:
        pts = pts[: max(0, limit)]
    return pts


def listing_rows(points: Iterable[PointFeature]) -> list[dict[str, Any]]:
    return [
        {
            "id": p.id,
            "crimeId": p.props.get("crimeId", p.id),
            "category": p.props.get("category"),
        }
        for p in points
    ]
