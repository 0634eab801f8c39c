from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, TypeAlias, Union


PointId: TypeAlias = Union[str, int]


@dataclass(frozen=True)
class PointFeature:
    """
    A loaded point event (e.g. one crime incident).

    `props` is opaque to the clustering engine; only `id` and the position matter.
    """

    id: PointId
    lon: float
    lat: float
    props: dict[str, Any]

    def has_valid_position(self) -> bool:
        lon = self.lon
        lat = self.lat
        if not isinstance(lon, (int, float)) or not isinstance(lat, (int, float)):
            return False
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return False
        return -180.0 <= lon <= 180.0 and -90.0 <= lat <= 90.0


def id_sort_key(pid: PointId) -> tuple[int, int, str]:
    """
    Total order over mixed int/str point ids: ints first (numerically), then strings.
    """
    if isinstance(pid, int) and not isinstance(pid, bool):
        return (0, pid, "")
    return (1, 0, str(pid))
