"""
Selector and phrase tables used by the extraction strategies.

Retailer-specific selectors live in `review_radar.platforms.PLATFORMS`; this
module holds the generic lists and merges the two in probing order.
"""
from typing import List, Optional, Tuple

from review_radar.platforms import PLATFORMS, PlatformProfile

STRUCTURED_DATA_SELECTOR = "script[type='application/ld+json']"

META_TITLE_SELECTORS: Tuple[str, ...] = (
    "meta[property='og:title']",
    "meta[name='twitter:title']",
    "meta[name='title']",
    "meta[property='product:title']",
    "meta[itemprop='name']",
)

META_IMAGE_SELECTORS: Tuple[str, ...] = (
    "meta[property='og:image']",
    "meta[property='og:image:secure_url']",
    "meta[name='twitter:image']",
    "meta[property='product:image']",
    "meta[itemprop='image']",
)

# Title/site separators accepted inside meta titles
META_TITLE_SEPARATORS: Tuple[str, ...] = (" - ", " | ")

# Page <title> separators, tried in this order
PAGE_TITLE_SEPARATORS: Tuple[str, ...] = (" - ", " | ", " – ", " • ", " › ", " :: ")

# Retailer names and shop boilerplate stripped from either end of a page title
SITE_AFFIXES: Tuple[str, ...] = (
    "Amazon.com", "Amazon", "Walmart.com", "Walmart", "Target", "Best Buy",
    "Newegg.com", "Newegg", "eBay", "Etsy", "Home Depot", "Lowe's",
    "Shop", "Online Shopping", "Free Shipping", "Official Site",
)

GENERIC_TITLE_SELECTORS: Tuple[str, ...] = (
    "h1.product-title",
    "h1.product-name",
    "h1.product_title",
    "#productTitle",
    ".product-title h1",
    ".product-name h1",
    ".product_title h1",
    "[data-testid='product-title']",
    "[data-automation='product-title']",
    ".title[itemprop='name']",
    "[itemprop='name']",
    # Retail layouts seen across several stores
    "h1.heading-5",
    ".sku-title h1",
    ".shop-product-title h1",
    "[data-track='product-title']",
    ".heading-5.v-fw-regular",
    "[data-testid='heading-product-title']",
    "#title",
    ".product-title-word-break",
    ".prod-ProductTitle",
    "[data-test='product-title']",
    "h1[data-test='product-title']",
    "span[data-test='product-title']",
    ".product-title",
    ".product-name",
    "h1.title",
    "h1.name",
    "h1.main-title",
)

GENERIC_IMAGE_SELECTORS: Tuple[str, ...] = (
    ".product-image img",
    "img.product-image",
    ".product-photo img",
    ".product-hero-image img",
    "[itemprop='image']",
)

# Headings containing these are page chrome, not product names
NON_PRODUCT_HEADING_PHRASES: Tuple[str, ...] = (
    "Shopping Cart",
    "Checkout",
    "Login",
    "Sign in",
)

# Images whose URL, alt text or class contain these are never product shots
IMAGE_EXCLUSION_KEYWORDS: Tuple[str, ...] = (
    "logo",
    "icon",
    "pixel",
    "tracking",
    "banner",
    "sprite",
)


def _dedupe(selectors: List[str]) -> List[str]:
    seen = set()
    ordered = []
    for selector in selectors:
        if selector not in seen:
            seen.add(selector)
            ordered.append(selector)
    return ordered


def title_selectors_for(profile: Optional[PlatformProfile]) -> List[str]:
    """Title selectors in probing order: the page's own retailer first, then generic."""
    selectors: List[str] = []
    if profile is not None:
        selectors.extend(profile.title_selectors)
    selectors.extend(GENERIC_TITLE_SELECTORS)
    return _dedupe(selectors)


def image_selectors_for(profile: Optional[PlatformProfile]) -> List[str]:
    """
    Primary-image selectors in probing order.

    When the retailer is unknown every table entry is tried, since layouts
    are frequently shared by white-label storefronts.
    """
    selectors: List[str] = []
    if profile is not None:
        selectors.extend(profile.image_selectors)
    else:
        for known in PLATFORMS:
            selectors.extend(known.image_selectors)
    selectors.extend(GENERIC_IMAGE_SELECTORS)
    return _dedupe(selectors)
