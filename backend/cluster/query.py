from __future__ import annotations

import math

from shapely.geometry import box as shapely_box

from cluster.types import ClusterIndex, Feature, FeatureId, feature_sort_key
from geo.aoi import BBox
from geo.mercator import project_many, resolve_zoom


def query(index: ClusterIndex, bbox: BBox, zoom: float) -> list[Feature]:
    """
    Features of the level nearest `zoom` whose position lies inside `bbox`.

    A bbox crossing the antimeridian is scanned as two ranges; the union is
    de-duplicated by id and returned sorted by id. A non-finite zoom, like an
    empty bbox, yields no features.
    """
    if bbox.is_empty() or not math.isfinite(zoom):
        return []
    z = resolve_zoom(zoom, index.min_zoom, index.max_zoom)
    level = index.level(z)
    if not level.nodes:
        return []

    south, north = bbox.lat_range()
    by_id: dict[FeatureId, Feature] = {}
    for west, east in bbox.lon_ranges():
        (x0, y_top), (x1, y_bottom) = project_many([west, east], [north, south])
        # Envelope scan; polar bands may collapse the box to a line.
        hits = level.tree.query(shapely_box(x0, y_top, x1, y_bottom))
        for i in hits:
            node = level.nodes[int(i)]
            # Mercator clamps polar latitudes onto the map edge; re-check in degrees.
            if not (south <= node.lat <= north and west <= node.lon <= east):
                continue
            f = index.feature_at(z, int(i))
            by_id.setdefault(f.id, f)

    return [by_id[k] for k in sorted(by_id.keys(), key=feature_sort_key)]
