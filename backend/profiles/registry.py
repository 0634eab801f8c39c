from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable

import yaml

from profiles.types import ClusterProfile


_DEFAULT_PROFILE_ID = "crime_map_r50"


def _repo_root() -> Path:
    # .../backend/profiles/registry.py -> repo root is 2 levels up
    return Path(__file__).resolve().parents[2]


def _profiles_root() -> Path:
    raw = (os.getenv("CRIMEMAP_PROFILES_DIR") or "").strip()
    if raw:
        return Path(raw)
    return _repo_root() / "profiles"


@dataclass(frozen=True)
class ProfileEntry:
    config: ClusterProfile
    # Absolute path to profile.yaml on disk (useful for debugging).
    path: Path


def _iter_profile_yaml_files() -> Iterable[Path]:
    root = _profiles_root()
    if not root.exists():
        return []
    # Convention: profiles/*/profile.yaml
    return root.glob("*/profile.yaml")


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid profile yaml root: {path}")
    return data


@lru_cache(maxsize=1)
def get_registry() -> dict[str, ProfileEntry]:
    out: dict[str, ProfileEntry] = {}
    for p in sorted(_iter_profile_yaml_files(), key=lambda x: str(x)):
        cfg = ClusterProfile.model_validate(_load_yaml(p))
        if not cfg.enabled:
            continue
        if cfg.id in out:
            raise ValueError(f"Duplicate profile id {cfg.id!r}: {p}")
        out[cfg.id] = ProfileEntry(config=cfg, path=p)
    return out


def default_profile_id() -> str:
    reg = get_registry()
    if _DEFAULT_PROFILE_ID in reg:
        return _DEFAULT_PROFILE_ID
    # Fall back to stable ordering.
    return next(iter(reg.keys()), _DEFAULT_PROFILE_ID)


def list_profiles() -> list[ClusterProfile]:
    return [e.config for e in get_registry().values()]


def get_profile(profile_id: str | None) -> ClusterProfile:
    reg = get_registry()
    if not reg:
        raise RuntimeError("No profiles discovered under `profiles/*/profile.yaml`")
    pid = (profile_id or "").strip() or default_profile_id()
    if pid not in reg:
        raise KeyError(f"Unknown profile: {pid!r}")
    return reg[pid].config


def clear_registry_cache() -> None:
    """
    Clear in-memory profile registry cache.

    Profile YAML changes (or a changed CRIMEMAP_PROFILES_DIR) are otherwise not picked
    up until the process restarts.
    """
    get_registry.cache_clear()
