"""
Product title extraction strategies.

Each strategy inspects a MarkupSource and returns a tagged StrategyResult.
Strategies never raise for bad page content: malformed structured data is
reported as MALFORMED_INPUT, a miss as NOT_FOUND.
"""
import json
from typing import Any, List, Optional

from review_radar.adapters.markup_source import MarkupSource
from review_radar.extraction.images import first_image_url, has_type
from review_radar.extraction.normalizer import collapse_whitespace, strip_price_fragments
from review_radar.extraction.selectors import (
    META_TITLE_SELECTORS,
    META_TITLE_SEPARATORS,
    NON_PRODUCT_HEADING_PHRASES,
    PAGE_TITLE_SEPARATORS,
    SITE_AFFIXES,
    title_selectors_for,
)
from review_radar.models.product import CandidateFact, ExtractionMethod, StrategyResult
from review_radar.platforms import find_platform

MAX_CANDIDATE_LENGTH = 250


def _text(value: Any) -> Optional[str]:
    """Trimmed string value of a JSON-LD literal, or None."""
    if isinstance(value, dict):
        value = value.get("@value")
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _within(text: Optional[str], lower: int, upper: int, inclusive_upper: bool = False) -> bool:
    """lower < len(text) < upper (or <= upper when inclusive_upper)."""
    if not text:
        return False
    length = len(text)
    if inclusive_upper:
        return lower < length <= upper
    return lower < length < upper


class ExtractionStrategy:
    """Base class: one way of finding a product title on a page."""

    name = "strategy"

    def attempt(self, source: MarkupSource) -> StrategyResult:
        raise NotImplementedError

    def _found(
        self,
        title: str,
        method: ExtractionMethod,
        image: Optional[str] = None,
        selector: Optional[str] = None,
    ) -> StrategyResult:
        candidate = CandidateFact(title=title, image=image, method=method, selector=selector)
        return StrategyResult.found(self.name, candidate)


class StructuredDataStrategy(ExtractionStrategy):
    """
    JSON-LD product detection.

    Per block, in order: a top-level Product, the leaf of a BreadcrumbList,
    a Product inside an @graph container, then any object that carries a
    name next to offers/price/sku.
    """

    name = "structured_data"
    selector = "script[type='application/ld+json']"

    def attempt(self, source: MarkupSource) -> StrategyResult:
        blocks = source.structured_data_blocks()
        if not blocks:
            return StrategyResult.not_found(self.name, "no structured data blocks")

        malformed = 0
        for block in blocks:
            try:
                data = json.loads(block)
            except (json.JSONDecodeError, RecursionError):
                malformed += 1
                continue

            result = self._from_document(data)
            if result is not None:
                return result

        if malformed == len(blocks):
            return StrategyResult.malformed(
                self.name, f"all {malformed} structured data blocks are invalid JSON"
            )
        return StrategyResult.not_found(
            self.name,
            f"no product in {len(blocks)} blocks ({malformed} invalid)",
        )

    def _from_document(self, data: Any) -> Optional[StrategyResult]:
        if isinstance(data, list):
            for item in data:
                result = self._from_document(item)
                if result is not None:
                    return result
            return None

        if not isinstance(data, dict):
            return None

        if has_type(data, "Product"):
            result = self._from_product(data, ExtractionMethod.STRUCTURED_DATA)
            if result is not None:
                return result

        if has_type(data, "BreadcrumbList"):
            result = self._from_breadcrumbs(data)
            if result is not None:
                return result

        graph = data.get("@graph")
        if isinstance(graph, list):
            for member in graph:
                if not isinstance(member, dict):
                    continue
                for node in (member, member.get("mainEntity")):
                    if isinstance(node, dict) and has_type(node, "Product"):
                        result = self._from_product(node, ExtractionMethod.STRUCTURED_DATA_GRAPH)
                        if result is not None:
                            return result

        # Non-standard product-like objects
        if any(key in data for key in ("offers", "price", "sku")):
            return self._from_product(data, ExtractionMethod.STRUCTURED_DATA)

        return None

    def _from_product(self, node: dict, method: ExtractionMethod) -> Optional[StrategyResult]:
        name = _text(node.get("name"))
        if not _within(name, 0, MAX_CANDIDATE_LENGTH, inclusive_upper=True):
            return None
        return self._found(name, method, image=first_image_url(node.get("image")), selector=self.selector)

    def _from_breadcrumbs(self, node: dict) -> Optional[StrategyResult]:
        items = node.get("itemListElement")
        if not isinstance(items, list) or not items:
            return None

        # The leaf breadcrumb is usually the product itself
        leaf = items[-1]
        if not isinstance(leaf, dict):
            return None
        item = leaf.get("item")
        name = _text(item.get("name")) if isinstance(item, dict) else None
        name = name or _text(leaf.get("name"))

        if not _within(name, 0, MAX_CANDIDATE_LENGTH, inclusive_upper=True):
            return None
        return self._found(name, ExtractionMethod.BREADCRUMB_LIST, selector=self.selector)


class MetaTagStrategy(ExtractionStrategy):
    """Product title from social/product meta tags."""

    name = "meta_tags"

    def __init__(self, selectors: Optional[List[str]] = None):
        self.selectors = list(selectors or META_TITLE_SELECTORS)

    def attempt(self, source: MarkupSource) -> StrategyResult:
        for selector in self.selectors:
            content = source.meta_content(selector)
            if not content or len(content) <= 5:
                continue

            title = self._strip_site_name(content)
            if title is None:
                continue
            if len(title) > MAX_CANDIDATE_LENGTH:
                continue
            return self._found(title, ExtractionMethod.META_TAG, selector=selector)

        return StrategyResult.not_found(self.name, "no usable product meta tag")

    def _strip_site_name(self, content: str) -> Optional[str]:
        """
        Drop a trailing site name ("Product - Site" / "Product | Site").

        Returns None when the leading segment is too short to be a title.
        """
        positions = [
            (content.find(separator), separator)
            for separator in META_TITLE_SEPARATORS
            if separator in content
        ]
        if not positions:
            return content

        _, separator = min(positions)
        head = content.split(separator, 1)[0].strip()
        return head if len(head) > 5 else None


class DomSelectorStrategy(ExtractionStrategy):
    """
    Product title from known e-commerce title elements.

    Retailer-specific selectors for the page's own platform are probed first,
    then the generic table; plain <h1> headings are the last resort.
    """

    name = "dom_selectors"

    def attempt(self, source: MarkupSource) -> StrategyResult:
        profile = find_platform(source.url)

        for selector in title_selectors_for(profile):
            element = source.select_one(selector)
            if element is None:
                continue
            text = element.get_text().strip()
            if _within(text, 5, MAX_CANDIDATE_LENGTH, inclusive_upper=True):
                return self._found(text, ExtractionMethod.DOM_SELECTOR, selector=selector)

        for heading in source.select("h1"):
            text = heading.get_text().strip()
            if not _within(text, 10, 200):
                continue
            if any(phrase in text for phrase in NON_PRODUCT_HEADING_PHRASES):
                continue
            return self._found(text, ExtractionMethod.GENERIC_HEADING, selector="h1")

        return StrategyResult.not_found(self.name, "no title element matched")


class PageTitleStrategy(ExtractionStrategy):
    """
    Product title carved out of the document <title>.

    Assumes the product name precedes the site name.
    """

    name = "page_title"

    def attempt(self, source: MarkupSource) -> StrategyResult:
        raw = source.title
        if not raw:
            return StrategyResult.not_found(self.name, "page has no title")

        title = collapse_whitespace(raw)
        if len(title) < 5:
            return StrategyResult.not_found(self.name, "page title too short")

        for separator in PAGE_TITLE_SEPARATORS:
            if separator in title:
                title = title.split(separator, 1)[0].strip()
                break

        title = strip_site_affixes(title)
        title = strip_price_fragments(title)

        if not _within(title, 5, 200):
            return StrategyResult.not_found(self.name, "cleaned page title out of bounds")
        return self._found(title, ExtractionMethod.PAGE_TITLE, selector="title")


def _is_boundary(char: str) -> bool:
    return not char.isalnum()


def strip_site_affixes(title: str) -> str:
    """Remove known retailer names from either end of a title, on word boundaries."""
    for affix in SITE_AFFIXES:
        if title.endswith(affix) and len(title) > len(affix):
            if _is_boundary(title[-len(affix) - 1]):
                title = title[:-len(affix)].strip(" :|-")
        if title.startswith(affix) and len(title) > len(affix):
            if _is_boundary(title[len(affix)]):
                title = title[len(affix):].strip(" :|-")
    return title.strip()


def default_strategies() -> List[ExtractionStrategy]:
    """The cascade's strategies in priority order."""
    return [
        StructuredDataStrategy(),
        MetaTagStrategy(),
        DomSelectorStrategy(),
        PageTitleStrategy(),
    ]
