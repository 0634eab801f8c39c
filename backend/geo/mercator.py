from __future__ import annotations

import math
from functools import lru_cache
from typing import Sequence

from pyproj import Transformer


_MAX_MERCATOR_LAT = 85.05112878
# Half the EPSG:3857 world width in meters.
_ORIGIN_SHIFT = 20037508.342789244


@lru_cache(maxsize=1)
def transformer_4326_to_3857() -> Transformer:
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


@lru_cache(maxsize=1)
def transformer_3857_to_4326() -> Transformer:
    return Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def resolve_zoom(view_zoom: float, min_zoom: int, max_zoom: int) -> int:
    """
    Integer index level for a (fractional) map zoom: floor, then clamp to the built range.
    """
    z = math.floor(float(view_zoom))
    return max(int(min_zoom), min(int(max_zoom), z))


def world_radius(radius_px: float, *, extent: int, zoom: int) -> float:
    """
    A pixel radius at `zoom` expressed in unit-square world coordinates.
    """
    return float(radius_px) / (float(extent) * 2.0 ** int(zoom))


def project(lon: float, lat: float) -> tuple[float, float]:
    """
    Lon/lat (EPSG:4326) to Web-Mercator world coordinates in [0, 1] x [0, 1].

    x grows eastwards from the antimeridian, y grows southwards from the top edge.
    """
    return project_many([lon], [lat])[0]


def project_many(
    lons: Sequence[float], lats: Sequence[float]
) -> list[tuple[float, float]]:
    if not lons:
        return []
    # Clamp to WebMercator-supported latitudes.
    clamped = [max(-_MAX_MERCATOR_LAT, min(_MAX_MERCATOR_LAT, float(v))) for v in lats]
    xs, ys = transformer_4326_to_3857().transform(
        [float(v) for v in lons], clamped
    )
    out: list[tuple[float, float]] = []
    for mx, my in zip(_as_list(xs), _as_list(ys)):
        x = (float(mx) / _ORIGIN_SHIFT + 1.0) / 2.0
        y = (1.0 - float(my) / _ORIGIN_SHIFT) / 2.0
        out.append((min(max(x, 0.0), 1.0), min(max(y, 0.0), 1.0)))
    return out


def unproject(x: float, y: float) -> tuple[float, float]:
    """
    Inverse of `project`: world coordinates back to (lon, lat) degrees.
    """
    mx = (2.0 * float(x) - 1.0) * _ORIGIN_SHIFT
    my = (1.0 - 2.0 * float(y)) * _ORIGIN_SHIFT
    lon, lat = transformer_3857_to_4326().transform(mx, my)
    return float(lon), float(lat)


def _as_list(values) -> list[float]:
    if isinstance(values, (int, float)):
        return [float(values)]
    return [float(v) for v in values]
