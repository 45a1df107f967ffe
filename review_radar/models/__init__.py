"""Models package initialization."""
from review_radar.models.product import (
    CandidateFact,
    CascadeReport,
    DetectedProduct,
    ExtractionMethod,
    StrategyOutcome,
    StrategyResult,
)
from review_radar.models.rating import AggregatedScore, PlatformRatingObservation, RatingSample

__all__ = [
    "CandidateFact",
    "CascadeReport",
    "DetectedProduct",
    "ExtractionMethod",
    "StrategyOutcome",
    "StrategyResult",
    "AggregatedScore",
    "PlatformRatingObservation",
    "RatingSample",
]
