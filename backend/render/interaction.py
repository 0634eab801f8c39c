from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cluster.types import ClusterId, Feature
from engine.in_memory import ClusterEngine
from profiles.types import PresentationPolicy


@dataclass(frozen=True)
class ViewTransition:
    center_lon: float
    center_lat: float
    zoom: float
    duration_ms: int


@dataclass(frozen=True)
class PointDetail:
    id: Any
    lon: float
    lat: float
    props: dict[str, Any]


def resolve_click(
    engine: ClusterEngine, feature: Feature, *, policy: PresentationPolicy
) -> ViewTransition | PointDetail:
    """
    Cluster click -> ease to its expansion zoom (capped by policy); point click -> details.
    """
    if not feature.is_cluster:
        return PointDetail(id=feature.id, lon=feature.lon, lat=feature.lat, props=feature.props)

    cid = feature.id
    if not isinstance(cid, ClusterId):
        cid = ClusterId.parse(str(cid))
    zoom = transition_zoom(engine.expansion_zoom(cid), policy.maxTransitionZoom)
    return ViewTransition(
        center_lon=feature.lon,
        center_lat=feature.lat,
        zoom=zoom,
        duration_ms=policy.transitionDurationMs,
    )


def transition_zoom(expansion_zoom: int, max_zoom: float) -> float:
    return float(min(expansion_zoom, max_zoom))
