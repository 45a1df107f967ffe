"""Ratings package initialization."""
from review_radar.ratings.aggregator import RatingAggregator, aggregate_ratings, confidence_score, deduplicate
from review_radar.ratings.collector import RatingCollector, RatingSuggester
from review_radar.ratings.page_ratings import extract_page_rating

__all__ = [
    "RatingAggregator",
    "aggregate_ratings",
    "confidence_score",
    "deduplicate",
    "RatingCollector",
    "RatingSuggester",
    "extract_page_rating",
]
