import math

from review_radar.models.rating import PlatformRatingObservation
from review_radar.ratings.aggregator import (
    MAX_CONFIDENCE,
    aggregate_ratings,
    confidence_score,
    deduplicate,
    effective_weight,
)


def test_empty_input_gives_zero_score() -> None:
    score = aggregate_ratings([])
    assert score.overall_score == 0
    assert score.total_review_count == 0
    assert score.confidence_score == 0
    assert score.platform_breakdown == []


def test_zero_review_count_contributes_nothing(observation) -> None:
    with_empty = aggregate_ratings([
        observation("Amazon", 4.0, 200, trust_weight=9),
        observation("Walmart", 1.0, 0, trust_weight=7),
    ])
    alone = aggregate_ratings([observation("Amazon", 4.0, 200, trust_weight=9)])
    assert with_empty == alone
    assert [o.platform for o in with_empty.platform_breakdown] == ["Amazon"]


def test_zero_rating_is_dropped(observation) -> None:
    score = aggregate_ratings([observation("Target", 0.0, 50)])
    assert score.platform_breakdown == []
    assert score.confidence_score == 0


def test_deduplicate_keeps_highest_review_count(observation) -> None:
    score = aggregate_ratings([
        observation("Amazon", 3.0, 10),
        observation("amazon", 4.6, 1000),
    ])
    assert len(score.platform_breakdown) == 1
    assert score.platform_breakdown[0].review_count == 1000
    assert score.total_review_count == 1000


def test_deduplicate_tie_prefers_verified_then_first(observation) -> None:
    unverified = observation("Etsy", 4.0, 20, source_url="first")
    verified = observation("Etsy", 4.8, 20, verified=True)
    later = observation("etsy", 2.0, 20, source_url="later")
    assert deduplicate([unverified, verified]) == [verified]
    assert deduplicate([unverified, later]) == [unverified]


def test_weighted_mean_example(observation) -> None:
    a = observation("Platform A", 4.5, 1000, trust_weight=9)
    b = observation("Platform B", 3.0, 10, trust_weight=4)
    score = aggregate_ratings([a, b])

    wa = 9 * math.log10(1001)
    wb = 4 * math.log10(11)
    expected = (4.5 * wa + 3.0 * wb) / (wa + wb)
    assert score.overall_score == round(expected, 1)
    assert abs(score.overall_score - 4.5) < abs(score.overall_score - 3.0)


def test_log_weight_is_capped(observation) -> None:
    huge = observation("Amazon", 4.0, 10 ** 9, trust_weight=9)
    assert effective_weight(huge) == 9 * 5.0


def test_confidence_formula() -> None:
    expected = 0.5 * (2 / 5) + 0.5 * (math.log10(101) / 3)
    assert confidence_score(2, 100) == round(expected, 2)
    assert confidence_score(0, 100) == 0.0
    assert confidence_score(3, 0) == 0.0


def test_confidence_is_capped() -> None:
    assert confidence_score(50, 10 ** 8) == MAX_CONFIDENCE


def test_confidence_bounds_over_many_inputs() -> None:
    for platforms in range(0, 12):
        for total in (0, 1, 9, 99, 5_000, 10 ** 7):
            assert 0.0 <= confidence_score(platforms, total) <= MAX_CONFIDENCE


def test_breakdown_keeps_first_seen_order(observation) -> None:
    score = aggregate_ratings([
        observation("Newegg", 4.0, 5),
        observation("Amazon", 4.2, 10),
        observation("newegg", 4.1, 50),
    ])
    assert [o.platform for o in score.platform_breakdown] == ["newegg", "Amazon"]


def test_observation_accepts_camel_case_payload() -> None:
    observation = PlatformRatingObservation.model_validate(
        {"platform": "Walmart", "rating": 4.1, "reviewCount": 321, "trustWeight": 7}
    )
    assert observation.review_count == 321
    assert observation.trust_weight == 7
