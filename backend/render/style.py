from __future__ import annotations

from dataclasses import dataclass, field

from profiles.types import CountBucket, PresentationPolicy


@dataclass(frozen=True)
class ClusterStyle:
    """
    Step styling for cluster circles by `point_count`, plus marker colors by category.
    """

    # (min_count, color, radius), ascending by min_count.
    buckets: tuple[tuple[int, str, float], ...] = (
        (0, "#51bbd6", 20.0),
        (100, "#f1f075", 30.0),
        (750, "#f28cb1", 40.0),
    )
    category_colors: dict[str, str] = field(default_factory=dict)
    default_color: str = "#FF0000"

    @classmethod
    def from_policy(cls, policy: PresentationPolicy) -> "ClusterStyle":
        return cls(
            buckets=_sorted_buckets(policy.countBuckets),
            category_colors=dict(policy.categoryColors),
            default_color=policy.defaultCategoryColor,
        )

    def for_count(self, count: int) -> tuple[str, float]:
        color, radius = self.buckets[0][1], self.buckets[0][2]
        for min_count, c, r in self.buckets:
            if count >= min_count:
                color, radius = c, r
        return color, radius

    def for_category(self, category: str | None) -> str:
        return self.category_colors.get(category or "", self.default_color)


def _sorted_buckets(buckets: list[CountBucket]) -> tuple[tuple[int, str, float], ...]:
    if not buckets:
        return ClusterStyle.buckets
    ordered = sorted(buckets, key=lambda b: b.minCount)
    return tuple((b.minCount, b.color, float(b.radius)) for b in ordered)
