from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class BBox:
    """
    WGS84 bounding box in lon/lat degrees.

    Convention used throughout this repo:
    - minLon, minLat, maxLon, maxLat (west, south, east, north)

    `min_lon > max_lon` is meaningful: the box crosses the antimeridian.
    """

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_wsen(cls, bbox: tuple[float, float, float, float] | list[float]) -> "BBox":
        w, s, e, n = bbox
        return cls(min_lon=float(w), min_lat=float(s), max_lon=float(e), max_lat=float(n))

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_lon, self.min_lat, self.max_lon, self.max_lat)

    def is_empty(self) -> bool:
        vals = self.as_tuple()
        if any(math.isnan(v) for v in vals):
            return True
        if self.min_lon == self.max_lon:
            return True
        s = max(-90.0, min(90.0, self.min_lat))
        n = max(-90.0, min(90.0, self.max_lat))
        return s >= n

    def lon_ranges(self) -> list[tuple[float, float]]:
        """
        Non-wrapping longitude ranges covered by this box.

        Longitudes are wrapped into [-180, 180); a span of 360 degrees or more covers
        the whole globe, and a box crossing the antimeridian yields two ranges.
        """
        if self.max_lon - self.min_lon >= 360.0:
            return [(-180.0, 180.0)]
        west = wrap_lon(self.min_lon)
        east = 180.0 if self.max_lon == 180.0 else wrap_lon(self.max_lon)
        if west > east:
            return [(west, 180.0), (-180.0, east)]
        return [(west, east)]

    def lat_range(self) -> tuple[float, float]:
        s = max(-90.0, min(90.0, self.min_lat))
        n = max(-90.0, min(90.0, self.max_lat))
        return s, n


def wrap_lon(lon: float) -> float:
    return ((float(lon) + 180.0) % 360.0 + 360.0) % 360.0 - 180.0
