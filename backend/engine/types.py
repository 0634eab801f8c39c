from __future__ import annotations

from dataclasses import dataclass

from geo.aoi import BBox
from layers.types import PointId


@dataclass(frozen=True)
class Viewport:
    """
    The caller's current map view, passed explicitly into each query.
    """

    bbox: BBox
    zoom: float


@dataclass(frozen=True)
class BuildReport:
    """
    What a (re)load produced: kept point count, dropped ids and the built zoom range.
    """

    points: int
    dropped_ids: tuple[PointId, ...]
    min_zoom: int
    max_zoom: int
    elapsed_ms: float

    @property
    def dropped(self) -> int:
        return len(self.dropped_ids)
