"""
Fact Normalizer for Review Radar.
Cleans an accepted candidate title before it becomes a DetectedProduct.
"""
import re

MAX_TITLE_LENGTH = 150
ELLIPSIS = "..."

_WHITESPACE_RE = re.compile(r"\s+")
_PRICE_RE = re.compile(r"\$\d+(?:\.\d+)?")
_DISCOUNT_RE = re.compile(r"\(\d+% Off\)", re.IGNORECASE)
# Trailing "#ABC123" or "(ABC123)" tokens, possibly several in a row
_SKU_SUFFIX_RE = re.compile(r"(?:\s+(?:#\w+|\(\w+\)))+$")


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def strip_price_fragments(text: str) -> str:
    """Remove inline prices ($NN.NN) and discount annotations ((NN% Off))."""
    text = _PRICE_RE.sub(" ", text)
    text = _DISCOUNT_RE.sub(" ", text)
    return collapse_whitespace(text)


def strip_sku_suffix(text: str) -> str:
    """Remove trailing SKU/model tokens such as "#B08MVGF24M" or "(WH1000XM4)"."""
    return _SKU_SUFFIX_RE.sub("", text).strip()


def truncate_title(text: str, limit: int = MAX_TITLE_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def normalize_title(raw: str) -> str:
    """
    Normalize a raw candidate title.

    Steps run in a fixed order: whitespace collapse, price/discount removal,
    SKU suffix removal, truncation. Applying this to its own output returns
    the same string.
    """
    if not raw:
        return ""
    title = collapse_whitespace(raw)
    title = strip_price_fragments(title)
    title = strip_sku_suffix(title)
    return truncate_title(title)
