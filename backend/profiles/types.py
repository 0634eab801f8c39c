from __future__ import annotations

from pydantic import BaseModel, Field

from cluster.options import ClusterOptions


class CountBucket(BaseModel):
    # Applies to clusters with point_count >= minCount.
    minCount: int = Field(ge=0)
    color: str
    radius: float = Field(gt=0.0)


class PresentationPolicy(BaseModel):
    """
    Renderer-side choices: cluster styling buckets and the zoom ceiling for
    click-to-expand transitions.
    """

    maxTransitionZoom: float = Field(ge=0.0, le=30.0)
    transitionDurationMs: int = Field(default=1000, ge=0)
    countBuckets: list[CountBucket] = Field(
        default_factory=lambda: [
            CountBucket(minCount=0, color="#51bbd6", radius=20),
            CountBucket(minCount=100, color="#f1f075", radius=30),
            CountBucket(minCount=750, color="#f28cb1", radius=40),
        ]
    )
    # Point category -> marker color; anything missing uses `defaultCategoryColor`.
    categoryColors: dict[str, str] = Field(default_factory=dict)
    defaultCategoryColor: str = "#FF0000"


class ClusterProfile(BaseModel):
    id: str
    title: str
    enabled: bool = True
    clustering: ClusterOptions
    presentation: PresentationPolicy
