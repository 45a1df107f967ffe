"""
Rating extraction from a single product or search page.

Layered like the product-data extraction it grew out of: JSON-LD
aggregateRating is trusted most, then the retailer's own rating widgets,
then microdata, then generic rating-looking elements.
"""
import json
import math
import re
from typing import Any, Optional, Tuple

from bs4 import Tag

from review_radar.adapters.markup_source import MarkupSource
from review_radar.extraction.images import has_type, iter_jsonld_nodes
from review_radar.models.rating import RatingSample
from review_radar.platforms import PlatformProfile

RATING_SCALE = 5.0

_OUT_OF_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:out of|/)\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")
_COUNT_RE = re.compile(r"\d{1,3}(?:,\d{3})+|\d+")

GENERIC_RATING_SELECTORS = (
    ".rating",
    ".stars",
    ".product-rating",
    "[class*='rating']",
    "[class*='stars']",
)

_RATING_ATTRIBUTES = ("content", "title", "aria-label", "data-rating")


def normalize_rating(value: Any, best: Any = RATING_SCALE) -> Optional[float]:
    """
    Scale a rating to 0-5.

    Returns None when the value is not numeric or falls outside the scale.
    """
    try:
        rating = float(value)
        best_rating = float(best) if best not in (None, "") else RATING_SCALE
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(rating) and math.isfinite(best_rating)):
        return None
    if best_rating <= 0 or rating < 0 or rating > best_rating:
        return None
    if best_rating != RATING_SCALE:
        rating = rating * RATING_SCALE / best_rating
    return round(rating, 2)


def parse_review_count(text: Any) -> int:
    """First integer in a text like "12,345 ratings"; 0 if none."""
    if isinstance(text, (int, float)):
        return max(0, int(text)) if math.isfinite(text) else 0
    if not text:
        return 0
    match = _COUNT_RE.search(str(text))
    if not match:
        return 0
    return int(match.group(0).replace(",", ""))


def parse_rating_text(text: Optional[str]) -> Optional[float]:
    """Rating from "4.5 out of 5 stars", "4.5/5" or a bare "4.5"."""
    if not text:
        return None
    match = _OUT_OF_RE.search(text)
    if match:
        return normalize_rating(match.group(1), match.group(2))
    match = _NUMBER_RE.search(text)
    if match:
        return normalize_rating(match.group(0))
    return None


def _element_text(element: Tag) -> str:
    for attribute in _RATING_ATTRIBUTES:
        value = element.get(attribute)
        if value:
            return str(value)
    return element.get_text(" ", strip=True)


def _first_rating(source: MarkupSource, selectors) -> Tuple[Optional[float], Optional[Tag]]:
    for selector in selectors:
        element = source.select_one(selector)
        if element is None:
            continue
        rating = parse_rating_text(_element_text(element))
        if rating is not None:
            return rating, element
    return None, None


def _first_count(source: MarkupSource, selectors) -> int:
    for selector in selectors:
        element = source.select_one(selector)
        if element is None:
            continue
        count = parse_review_count(_element_text(element))
        if count:
            return count
    return 0


def _sample(rating: Optional[float], review_count: int) -> Optional[RatingSample]:
    if rating is None:
        return None
    return RatingSample(rating=rating, review_count=max(0, review_count))


def _from_structured_data(source: MarkupSource) -> Optional[RatingSample]:
    for block in source.structured_data_blocks():
        try:
            data = json.loads(block)
        except (json.JSONDecodeError, RecursionError):
            continue
        for node in iter_jsonld_nodes(data):
            if not has_type(node, "Product"):
                continue
            aggregate = node.get("aggregateRating")
            if not isinstance(aggregate, dict):
                continue
            rating = normalize_rating(aggregate.get("ratingValue"), aggregate.get("bestRating", RATING_SCALE))
            count = parse_review_count(aggregate.get("reviewCount") or aggregate.get("ratingCount"))
            sample = _sample(rating, count)
            if sample is not None:
                return sample
    return None


def _from_profile(source: MarkupSource, profile: PlatformProfile) -> Optional[RatingSample]:
    if not profile.rating_selectors:
        return None
    rating, _ = _first_rating(source, profile.rating_selectors)
    if rating is None:
        return None
    return _sample(rating, _first_count(source, profile.review_count_selectors))


def _from_microdata(source: MarkupSource) -> Optional[RatingSample]:
    rating, _ = _first_rating(source, ("[itemprop='ratingValue']",))
    if rating is None:
        return None
    count = _first_count(source, ("[itemprop='reviewCount']", "[itemprop='ratingCount']"))
    return _sample(rating, count)


def _from_generic(source: MarkupSource) -> Optional[RatingSample]:
    rating, element = _first_rating(source, GENERIC_RATING_SELECTORS)
    if rating is None:
        return None

    # Review counts usually sit right next to the stars
    count = 0
    sibling = element.find_next_sibling()
    if sibling is not None:
        count = parse_review_count(sibling.get_text(" ", strip=True))
    return _sample(rating, count)


def extract_page_rating(
    source: MarkupSource,
    profile: Optional[PlatformProfile] = None,
) -> Optional[RatingSample]:
    """Best rating sample on the page, or None if nothing rating-like is found."""
    sample = _from_structured_data(source)
    if sample is None and profile is not None:
        sample = _from_profile(source, profile)
    if sample is None:
        sample = _from_microdata(source)
    if sample is None:
        sample = _from_generic(source)
    return sample
