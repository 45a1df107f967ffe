"""
Rating Aggregator for Review Radar.

Merges per-platform rating observations into one weighted score plus a
confidence estimate. Every call rebuilds the result from the full list.
"""
import math
from typing import Dict, Iterable, List, Optional

from review_radar.models.rating import AggregatedScore, PlatformRatingObservation
from review_radar.utils.logger import LayerLogger, NullLayerLogger

# Policy constants. These were tuned empirically, not derived, and may need
# recalibration against real data.
MAX_LOG_WEIGHT = 5.0
CONFIDENCE_PLATFORM_TARGET = 5
CONFIDENCE_REVIEW_LOG_TARGET = 3.0
MAX_CONFIDENCE = 0.95


def effective_weight(observation: PlatformRatingObservation) -> float:
    """Trust weight damped by log10 of the sample size, capped at MAX_LOG_WEIGHT."""
    return observation.trust_weight * min(math.log10(observation.review_count + 1), MAX_LOG_WEIGHT)


def confidence_score(platform_count: int, total_review_count: int) -> float:
    """
    Half breadth (independent platforms), half depth (total reviews).

    Clamped to [0, MAX_CONFIDENCE]: every input is third-party data.
    """
    if platform_count <= 0 or total_review_count <= 0:
        return 0.0
    breadth = min(platform_count / CONFIDENCE_PLATFORM_TARGET, 1.0)
    depth = min(math.log10(total_review_count + 1) / CONFIDENCE_REVIEW_LOG_TARGET, 1.0)
    score = 0.5 * breadth + 0.5 * depth
    return round(max(0.0, min(score, MAX_CONFIDENCE)), 2)


def _prefer(current: PlatformRatingObservation, challenger: PlatformRatingObservation) -> bool:
    """True if challenger should replace current for the same platform."""
    if challenger.review_count != current.review_count:
        return challenger.review_count > current.review_count
    return challenger.verified and not current.verified


def deduplicate(observations: Iterable[PlatformRatingObservation]) -> List[PlatformRatingObservation]:
    """
    One observation per platform (case-insensitive).

    The highest review count wins, then the verified one, then the first
    seen. Platforms keep the order in which they first appeared.
    """
    by_platform: Dict[str, PlatformRatingObservation] = {}
    for observation in observations:
        key = observation.platform.strip().lower()
        current = by_platform.get(key)
        if current is None or _prefer(current, observation):
            by_platform[key] = observation
    return list(by_platform.values())


class RatingAggregator:
    """Stateless aggregator; the logger is its only collaborator."""

    def __init__(self, logger: Optional[LayerLogger] = None):
        self.logger = logger or NullLayerLogger()

    def aggregate(self, observations: Iterable[PlatformRatingObservation]) -> AggregatedScore:
        observations = list(observations)
        usable = [o for o in observations if o.has_data]
        dropped = len(observations) - len(usable)
        if dropped:
            self.logger.log_decision(
                decision="observations_dropped",
                reason="zero rating or zero review count",
                dropped=dropped,
            )

        breakdown = deduplicate(usable)
        if not breakdown:
            self.logger.log_aggregation(len(observations), 0, 0.0, 0.0)
            return AggregatedScore.empty()

        weights = [effective_weight(o) for o in breakdown]
        weight_sum = sum(weights)
        if weight_sum > 0:
            overall = sum(o.rating * w for o, w in zip(breakdown, weights)) / weight_sum
            overall = round(overall, 1)
        else:
            overall = 0.0

        total_reviews = sum(o.review_count for o in breakdown)
        confidence = confidence_score(len(breakdown), total_reviews)

        self.logger.log_aggregation(
            len(observations),
            len(breakdown),
            overall,
            confidence,
            platforms=[o.platform for o in breakdown],
            total_review_count=total_reviews,
        )

        return AggregatedScore(
            overall_score=overall,
            total_review_count=total_reviews,
            confidence_score=confidence,
            platform_breakdown=breakdown,
        )


def aggregate_ratings(
    observations: Iterable[PlatformRatingObservation],
    logger: Optional[LayerLogger] = None,
) -> AggregatedScore:
    """Aggregate observations into one AggregatedScore."""
    return RatingAggregator(logger=logger).aggregate(observations)
