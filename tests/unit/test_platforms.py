import pytest

from review_radar.platforms import (
    DEFAULT_TRUST_WEIGHT,
    UNKNOWN_SOURCE,
    find_platform,
    identify_platform,
    platform_name,
    trust_weight_for,
)


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://www.amazon.com/dp/B0863TXGM3", "Amazon.com"),
        ("https://smile.amazon.co.uk/gp/product/X", "Amazon.com"),
        ("https://www.bestbuy.com/site/sony/6408356.p", "BestBuy.com"),
        ("https://WWW.WALMART.COM/ip/123", "Walmart.com"),
        ("https://www.lowes.com/pd/drill/1", "Lowes.com"),
        ("https://www.crateandbarrel.com/chair", "Crateandbarrel.com"),
        ("https://shop.example.org/item", "Shop.com"),
    ],
)
def test_identify_platform(url: str, expected: str) -> None:
    assert identify_platform(url) == expected


@pytest.mark.parametrize("garbage", ["", "   ", "http://", "http://[::1", None])
def test_identify_platform_never_raises(garbage) -> None:
    assert identify_platform(garbage) == UNKNOWN_SOURCE


def test_platform_name_is_short_name() -> None:
    assert platform_name("https://www.bestbuy.com/site/x") == "Best Buy"
    assert platform_name("https://www.crateandbarrel.com/chair") == "Crateandbarrel"


def test_find_platform_by_name_or_url() -> None:
    assert find_platform("best buy").name == "Best Buy"
    assert find_platform("BestBuy.com").name == "Best Buy"
    assert find_platform("https://www.target.com/p/-/A-1").name == "Target"
    assert find_platform("Targeted Coupons") is None


def test_trust_weight_for() -> None:
    assert trust_weight_for("Amazon") == 9.0
    assert trust_weight_for("Some Boutique") == DEFAULT_TRUST_WEIGHT
