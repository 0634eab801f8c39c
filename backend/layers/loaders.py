from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from cluster.errors import DuplicatePointId
from layers.types import PointFeature, PointId


logger = logging.getLogger(__name__)


def load_police_crimes(path: Path, *, limit: int | None = None) -> list[PointFeature]:
    """
    Input: a data.police.uk `crimes-street` JSON array.

    Each record has `id`, `category`, `month` and `location: {latitude, longitude,
    street: {id, name}}` with coordinates as strings. Unparsable coordinates become
    NaN so the index builder reports the record as dropped.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of crimes: {path}")
    records = data if limit is None else data[: max(0, int(limit))]

    out: list[PointFeature] = []
    for crime in records:
        crime = crime or {}
        loc = crime.get("location") or {}
        street = loc.get("street") or {}
        cid = crime.get("id")
        if cid is None:
            continue

        props: dict[str, Any] = {
            "crimeId": cid,
            "category": crime.get("category"),
            "month": crime.get("month"),
            "street": street.get("name"),
            "persistent_id": crime.get("persistent_id") or None,
        }
        out.append(
            PointFeature(
                id=cid,
                lon=_to_float(loc.get("longitude")),
                lat=_to_float(loc.get("latitude")),
                props=props,
            )
        )

    ensure_unique_ids(out)
    logger.info("Loaded %d crimes from %s", len(out), path)
    return out


def load_geojson_points(path: Path) -> list[PointFeature]:
    """
    Input: a GeoJSON FeatureCollection; only `Point` geometries are kept.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    features = data.get("features") or []

    out: list[PointFeature] = []
    for i, feature in enumerate(features):
        geom = (feature or {}).get("geometry") or {}
        props = (feature or {}).get("properties") or {}
        if geom.get("type") != "Point":
            continue
        coords = geom.get("coordinates") or []
        if len(coords) < 2:
            continue

        fid = (feature or {}).get("id")
        if fid is None:
            fid = props.get("id", f"point-{i}")
        out.append(
            PointFeature(id=fid, lon=_to_float(coords[0]), lat=_to_float(coords[1]), props=props)
        )

    ensure_unique_ids(out)
    return out


def ensure_unique_ids(points: Iterable[PointFeature]) -> None:
    seen: set[PointId] = set()
    for p in points:
        if p.id in seen:
            raise DuplicatePointId(p.id)
        seen.add(p.id)


def _to_float(v: Any) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return float("nan")
