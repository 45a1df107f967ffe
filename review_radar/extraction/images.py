"""
Image resolution for Review Radar.

Runs only when a title was accepted without an image. Sources are tried in
order: meta tags, structured data, retailer primary-image selectors, then the
largest plausible <img> on the page.
"""
import json
from typing import Any, Iterator, Optional
from urllib.parse import urljoin

from review_radar.adapters.markup_source import MarkupSource, PageImage
from review_radar.extraction.selectors import (
    IMAGE_EXCLUSION_KEYWORDS,
    META_IMAGE_SELECTORS,
    image_selectors_for,
)
from review_radar.platforms import find_platform
from review_radar.utils.logger import LayerLogger, NullLayerLogger

MIN_IMAGE_SIDE = 100
MIN_IMAGE_AREA = 10_000


def first_image_url(image: Any) -> Optional[str]:
    """
    Normalize a JSON-LD `image` value to one URL.

    Handles a string, an ImageObject, or an array of either (first usable).
    """
    if isinstance(image, str):
        return image.strip() or None
    if isinstance(image, dict):
        url = image.get("url") or image.get("contentUrl") or image.get("@id")
        return url.strip() if isinstance(url, str) and url.strip() else None
    if isinstance(image, list):
        for item in image:
            url = first_image_url(item)
            if url:
                return url
    return None


def iter_jsonld_nodes(data: Any) -> Iterator[dict]:
    """Yield every typed node of a JSON-LD document, descending into @graph and arrays."""
    if isinstance(data, list):
        for item in data:
            yield from iter_jsonld_nodes(item)
    elif isinstance(data, dict):
        if "@graph" in data:
            yield from iter_jsonld_nodes(data["@graph"])
        if "@type" in data:
            yield data


def has_type(node: dict, type_name: str) -> bool:
    """True if a JSON-LD node's @type (string or list) includes type_name."""
    declared = node.get("@type")
    if isinstance(declared, list):
        return any(isinstance(t, str) and t.lower() == type_name.lower() for t in declared)
    return isinstance(declared, str) and declared.lower() == type_name.lower()


def _is_excluded(image: PageImage) -> bool:
    haystack = f"{image.src} {image.alt} {image.css_class}".lower()
    return any(keyword in haystack for keyword in IMAGE_EXCLUSION_KEYWORDS)


class ImageResolver:
    """Lower-priority image cascade."""

    def __init__(self, logger: Optional[LayerLogger] = None):
        self.logger = logger or NullLayerLogger()

    def resolve(self, source: MarkupSource) -> Optional[str]:
        """Return an absolute image URL for the page's product, or None."""
        for step in (
            self._from_meta_tags,
            self._from_structured_data,
            self._from_primary_selectors,
            self._from_largest_image,
        ):
            image = step(source)
            if not image:
                continue
            try:
                absolute = urljoin(source.url, image)
            except ValueError:
                self.logger.log_fallback(
                    from_source=step.__name__.lstrip("_"),
                    to_source="next_image_source",
                    reason="unparsable image URL",
                    url=source.url,
                )
                continue
            self.logger.log_decision(
                decision="image_resolved",
                reason=step.__name__.lstrip("_"),
                url=source.url,
            )
            return absolute

        self.logger.log_action("image_resolution", "no_image_found", url=source.url)
        return None

    def _from_meta_tags(self, source: MarkupSource) -> Optional[str]:
        for selector in META_IMAGE_SELECTORS:
            content = source.meta_content(selector)
            if content:
                return content
        return None

    def _from_structured_data(self, source: MarkupSource) -> Optional[str]:
        for block in source.structured_data_blocks():
            try:
                data = json.loads(block)
            except (json.JSONDecodeError, RecursionError):
                continue
            for node in iter_jsonld_nodes(data):
                if has_type(node, "Product"):
                    image = first_image_url(node.get("image"))
                    if image:
                        return image
        return None

    def _from_primary_selectors(self, source: MarkupSource) -> Optional[str]:
        profile = find_platform(source.url)
        for selector in image_selectors_for(profile):
            element = source.select_one(selector)
            if element is None:
                continue
            if element.name != "img":
                element = element.find("img") or element
            src = element.get("src") or element.get("data-src") or element.get("content")
            if src:
                return str(src)
        return None

    def _from_largest_image(self, source: MarkupSource) -> Optional[str]:
        best: Optional[PageImage] = None
        for image in source.images():
            if image.width is None or image.height is None:
                continue
            if image.width < MIN_IMAGE_SIDE or image.height < MIN_IMAGE_SIDE:
                continue
            if image.area < MIN_IMAGE_AREA or _is_excluded(image):
                continue
            if best is None or image.area > best.area:
                best = image
        return best.src if best else None
