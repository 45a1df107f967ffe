"""
Platform identification for Review Radar.

Known retailers are described declaratively: how to recognise their host,
how much to trust their ratings, and which selectors hold the product title,
primary image and rating on their pages. Supporting a new retailer is a
table change, not a code change.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote_plus, urlparse

UNKNOWN_SOURCE = "Unknown Source"

# Trust weight for platforms not in the table (same as the source-page default)
DEFAULT_TRUST_WEIGHT = 5.0


@dataclass(frozen=True)
class PlatformProfile:
    """Declarative description of one retailer."""
    name: str
    display_name: str
    host_keywords: Tuple[str, ...]
    trust_weight: float
    title_selectors: Tuple[str, ...] = ()
    image_selectors: Tuple[str, ...] = ()
    rating_selectors: Tuple[str, ...] = ()
    review_count_selectors: Tuple[str, ...] = ()
    search_url: Optional[str] = None  # format string with {query}

    def matches_host(self, host: str) -> bool:
        host = host.lower()
        return any(keyword in host for keyword in self.host_keywords)

    def build_search_url(self, query: str) -> Optional[str]:
        if not self.search_url:
            return None
        return self.search_url.format(query=quote_plus(query))


# Priority order matters: the first profile whose keyword appears in the host wins.
PLATFORMS: Tuple[PlatformProfile, ...] = (
    PlatformProfile(
        name="Amazon",
        display_name="Amazon.com",
        host_keywords=("amazon",),
        trust_weight=9.0,
        title_selectors=("#productTitle", "#title", ".product-title-word-break"),
        image_selectors=("#landingImage", "#imgBlkFront", ".image.featured-item img"),
        rating_selectors=("#acrPopover", ".a-icon-alt"),
        review_count_selectors=("#acrCustomerReviewText", ".totalRatingCount"),
        search_url="https://www.amazon.com/s?k={query}",
    ),
    PlatformProfile(
        name="Walmart",
        display_name="Walmart.com",
        host_keywords=("walmart",),
        trust_weight=7.0,
        title_selectors=("[data-testid='product-title']", ".prod-ProductTitle"),
        image_selectors=("[data-testid='hero-image']", "#main-image"),
        rating_selectors=("[itemprop='ratingValue']", ".stars-container"),
        review_count_selectors=("[itemprop='reviewCount']", ".stars-reviews-count"),
        search_url="https://www.walmart.com/search?q={query}",
    ),
    PlatformProfile(
        name="Best Buy",
        display_name="BestBuy.com",
        host_keywords=("bestbuy",),
        trust_weight=8.0,
        title_selectors=(
            ".sku-title h1",
            "h1.heading-5",
            ".shop-product-title h1",
            "[data-track='product-title']",
            "[data-testid='heading-product-title']",
        ),
        image_selectors=(".primary-image", ".carousel-main-img"),
        rating_selectors=(".customer-rating",),
        review_count_selectors=(".customer-review-count",),
        search_url="https://www.bestbuy.com/site/searchpage.jsp?st={query}",
    ),
    PlatformProfile(
        name="Target",
        display_name="Target.com",
        host_keywords=("target",),
        trust_weight=7.0,
        title_selectors=(
            "h1[data-test='product-title']",
            "span[data-test='product-title']",
            "[data-test='product-title']",
        ),
        image_selectors=("[data-test='product-image'] img", "[data-test='image'] img"),
        rating_selectors=("[data-test='ratingValue']",),
        review_count_selectors=("[data-test='reviewCount']",),
        search_url="https://www.target.com/s?searchTerm={query}",
    ),
    PlatformProfile(
        name="eBay",
        display_name="eBay.com",
        host_keywords=("ebay",),
        trust_weight=5.0,
        title_selectors=("h1.x-item-title__mainTitle", "#itemTitle"),
        image_selectors=("#icImg", ".ux-image-carousel-item img"),
        rating_selectors=(".ux-summary__start--rating", ".reviews-star-rating"),
        review_count_selectors=(".ux-summary__count",),
    ),
    PlatformProfile(
        name="Newegg",
        display_name="Newegg.com",
        host_keywords=("newegg",),
        trust_weight=6.0,
        title_selectors=(".product-title", ".product-name"),
        image_selectors=(".product-view-img-original", ".mainSlide img"),
        rating_selectors=(".product-rating-num",),
        review_count_selectors=(".product-rating-count",),
        search_url="https://www.newegg.com/p/pl?d={query}",
    ),
    PlatformProfile(
        name="Etsy",
        display_name="Etsy.com",
        host_keywords=("etsy",),
        trust_weight=5.0,
        title_selectors=("h1[data-buy-box-listing-title]",),
        image_selectors=(".listing-page-image img", ".carousel-image"),
    ),
    PlatformProfile(
        name="Home Depot",
        display_name="HomeDepot.com",
        host_keywords=("homedepot",),
        trust_weight=6.0,
        title_selectors=(".product-details__title", "h1.product-title__title"),
        image_selectors=(".mediagallery__mainimage img",),
    ),
    PlatformProfile(
        name="Lowe's",
        display_name="Lowes.com",
        host_keywords=("lowes",),
        trust_weight=6.0,
        title_selectors=("h1.product-brand-description",),
    ),
    PlatformProfile(
        name="Costco",
        display_name="Costco.com",
        host_keywords=("costco",),
        trust_weight=6.0,
        title_selectors=("h1[automation-id='productName']",),
    ),
)


def _host_of(url: str) -> Optional[str]:
    """Lowercase host of a URL, or None if it cannot be parsed."""
    if not url or not isinstance(url, str):
        return None
    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"http://{candidate}"
    try:
        host = urlparse(candidate).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def _synthesized_label(host: str) -> Optional[str]:
    """First host label after a leading www., capitalized."""
    labels = [label for label in host.split(".") if label]
    if labels and labels[0] == "www":
        labels = labels[1:]
    if not labels:
        return None
    label = labels[0]
    return label[:1].upper() + label[1:]


def find_platform(url_or_name: str) -> Optional[PlatformProfile]:
    """
    Find the profile for a URL or a platform name.

    Names are compared case-insensitively against both the short and display
    names, so "best buy", "BestBuy.com" and "https://www.bestbuy.com/..." all
    resolve to the same profile.
    """
    if not url_or_name:
        return None

    lowered = url_or_name.strip().lower()
    for profile in PLATFORMS:
        if lowered in (profile.name.lower(), profile.display_name.lower()):
            return profile

    # Bare names that matched nothing above are not hosts
    if "." not in lowered:
        return None

    host = _host_of(url_or_name)
    if not host:
        return None
    for profile in PLATFORMS:
        if profile.matches_host(host):
            return profile
    return None


def identify_platform(url: str) -> str:
    """
    Map a page URL to its platform display name.

    Known retailers get their canonical display name; anything else gets a
    synthesized "<Label>.com". Never raises.
    """
    host = _host_of(url)
    if not host:
        return UNKNOWN_SOURCE

    for profile in PLATFORMS:
        if profile.matches_host(host):
            return profile.display_name

    label = _synthesized_label(host)
    return f"{label}.com" if label else UNKNOWN_SOURCE


def platform_name(url: str) -> str:
    """Short platform name used for deduplication and trust weighting."""
    host = _host_of(url)
    if not host:
        return UNKNOWN_SOURCE

    for profile in PLATFORMS:
        if profile.matches_host(host):
            return profile.name

    return _synthesized_label(host) or UNKNOWN_SOURCE


def trust_weight_for(platform: str) -> float:
    """Trust weight for a platform name or URL."""
    profile = find_platform(platform)
    return profile.trust_weight if profile else DEFAULT_TRUST_WEIGHT
