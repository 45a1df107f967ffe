"""Extraction package initialization."""
from review_radar.extraction.cascade import ExtractionCascade, detect_product
from review_radar.extraction.images import ImageResolver
from review_radar.extraction.normalizer import normalize_title
from review_radar.extraction.strategies import (
    DomSelectorStrategy,
    ExtractionStrategy,
    MetaTagStrategy,
    PageTitleStrategy,
    StructuredDataStrategy,
    default_strategies,
)

__all__ = [
    "ExtractionCascade",
    "detect_product",
    "ImageResolver",
    "normalize_title",
    "DomSelectorStrategy",
    "ExtractionStrategy",
    "MetaTagStrategy",
    "PageTitleStrategy",
    "StructuredDataStrategy",
    "default_strategies",
]
