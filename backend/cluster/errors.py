from __future__ import annotations

from typing import Any


class ClusterError(Exception):
    """Base class for clustering engine errors."""


class InvalidGeometry(ClusterError, ValueError):
    def __init__(self, point_id: Any, lon: Any, lat: Any) -> None:
        self.point_id = point_id
        self.lon = lon
        self.lat = lat
        super().__init__(f"Invalid coordinates for point {point_id!r}: lon={lon!r}, lat={lat!r}")


class DuplicatePointId(ClusterError, ValueError):
    def __init__(self, point_id: Any) -> None:
        self.point_id = point_id
        super().__init__(f"Duplicate point id: {point_id!r}")


class UnknownCluster(ClusterError, LookupError):
    def __init__(self, cluster_id: Any) -> None:
        self.cluster_id = cluster_id
        super().__init__(f"No cluster with id {cluster_id!r}")
