from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ClusterOptions(BaseModel):
    """
    Build-time clustering parameters.

    `radius` and `max_zoom` have no defaults: different map entry points have used
    different values, so callers (or a profile) always choose them explicitly.
    """

    model_config = ConfigDict(frozen=True)

    min_zoom: int = Field(default=0, ge=0, le=30)
    max_zoom: int = Field(ge=0, le=30)
    # Cluster radius in pixels, relative to `extent`.
    radius: float = Field(gt=0.0)
    # Pixel size of one tile; supercluster-compatible default.
    extent: int = Field(default=512, gt=0)
    min_points: int = Field(default=2, ge=2)

    @model_validator(mode="after")
    def _check_zoom_range(self) -> "ClusterOptions":
        if self.min_zoom > self.max_zoom:
            raise ValueError(
                f"min_zoom ({self.min_zoom}) must not exceed max_zoom ({self.max_zoom})"
            )
        return self
