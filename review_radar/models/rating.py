"""
Rating models for Review Radar.
Observations are per-platform samples; AggregatedScore is the merged view.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PlatformRatingObservation(BaseModel):
    """
    One rating sample for a product on one platform.

    `rating` is on a 0-5 scale. A zero rating or zero review count means
    "no data" and is dropped by the aggregator.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    platform: str = Field(min_length=1)
    rating: float = Field(ge=0.0, le=5.0)
    review_count: int = Field(ge=0)
    verified: bool = False  # read from the product's own page
    source_url: Optional[str] = None
    trust_weight: float = Field(ge=1.0, le=10.0, default=5.0)

    @property
    def has_data(self) -> bool:
        return self.rating > 0 and self.review_count > 0


class AggregatedScore(BaseModel):
    """Weighted cross-platform score, rebuilt from scratch per request."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    overall_score: float = Field(ge=0.0, le=5.0, default=0.0)
    total_review_count: int = Field(ge=0, default=0)
    confidence_score: float = Field(ge=0.0, le=1.0, default=0.0)
    platform_breakdown: List[PlatformRatingObservation] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "AggregatedScore":
        """Insufficient-data result."""
        return cls()


class RatingSample(BaseModel):
    """Rating value and review count read from a single page."""
    rating: float = Field(ge=0.0, le=5.0)
    review_count: int = Field(ge=0, default=0)
