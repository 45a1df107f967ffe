from unittest.mock import AsyncMock, MagicMock

import pytest

from review_radar.adapters.markup_source import HTMLMarkupSource
from review_radar.adapters.page_fetcher import PageFetchError
from review_radar.platforms import find_platform
from review_radar.ratings.collector import RatingCollector
from review_radar.utils.logger import NullLayerLogger
from tests.conftest import ld_json, page

SOURCE_URL = "https://www.amazon.com/dp/B0863TXGM3"


def rated_page(url: str, rating: str, count: str) -> HTMLMarkupSource:
    head = ld_json(
        '{"@type": "Product", "name": "Headphones", '
        f'"aggregateRating": {{"ratingValue": "{rating}", "reviewCount": "{count}"}}}}'
    )
    return HTMLMarkupSource.from_html(page(head=head), url)


def fake_fetcher(pages: dict) -> MagicMock:
    """Fetcher serving pages keyed by URL prefix; anything else fails."""
    async def fetch(url: str):
        for prefix, value in pages.items():
            if url.startswith(prefix):
                if isinstance(value, Exception):
                    raise value
                return value(url)
        raise PageFetchError(url, "HTTP 404", status_code=404)

    fetcher = MagicMock()
    fetcher.fetch = AsyncMock(side_effect=fetch)
    return fetcher


def collector_with(fetcher, suggester=None) -> RatingCollector:
    return RatingCollector(fetcher=fetcher, suggester=suggester, concurrency=3, logger=NullLayerLogger())


def test_search_targets_exclude_source_platform() -> None:
    collector = collector_with(MagicMock())
    names = [p.name for p in collector.search_targets(None)]
    assert names == ["Amazon", "Walmart", "Best Buy", "Target", "Newegg"]

    names = [p.name for p in collector.search_targets(find_platform(SOURCE_URL))]
    assert "Amazon" not in names


@pytest.mark.asyncio
async def test_collect_source_and_search_probes() -> None:
    fetcher = fake_fetcher({
        SOURCE_URL: lambda url: rated_page(url, "4.6", "58,112"),
        "https://www.walmart.com/search": lambda url: rated_page(url, "4.4", "900"),
        "https://www.bestbuy.com/site/searchpage.jsp": PageFetchError("bb", "timeout"),
    })
    observations = await collector_with(fetcher).collect("Sony WH-1000XM4", SOURCE_URL)

    by_platform = {o.platform: o for o in observations}
    assert set(by_platform) == {"Amazon", "Walmart"}
    assert by_platform["Amazon"].verified is True
    assert by_platform["Amazon"].review_count == 58112
    assert by_platform["Amazon"].trust_weight == 9.0
    assert by_platform["Walmart"].verified is False
    assert by_platform["Walmart"].source_url.startswith("https://www.walmart.com/search?q=Sony+WH-1000XM4")
    # source page plus Walmart, Best Buy, Target and Newegg searches
    assert fetcher.fetch.await_count == 5


@pytest.mark.asyncio
async def test_unexpected_probe_error_becomes_missing_observation() -> None:
    fetcher = fake_fetcher({
        SOURCE_URL: RuntimeError("parser exploded"),
        "https://www.target.com": lambda url: rated_page(url, "4.0", "12"),
    })
    observations = await collector_with(fetcher).collect("Sony WH-1000XM4", SOURCE_URL)
    assert [o.platform for o in observations] == ["Target"]


@pytest.mark.asyncio
async def test_suggester_fills_missing_platforms() -> None:
    fetcher = fake_fetcher({SOURCE_URL: lambda url: rated_page(url, "4.6", "100")})
    suggester = MagicMock()
    suggester.suggest_platform_ratings = AsyncMock(return_value=[
        {"platform": "Walmart", "rating": 4.2, "reviewCount": "1,500", "url": "https://www.walmart.com/ip/1"},
        {"platform": "Amazon", "rating": 1.0, "reviewCount": 5},
        {"platform": "Newegg", "rating": 9.5, "reviewCount": 10},
    ])

    observations = await collector_with(fetcher, suggester).collect("Sony WH-1000XM4", SOURCE_URL)

    suggester.suggest_platform_ratings.assert_awaited_once()
    requested = suggester.suggest_platform_ratings.call_args.args[1]
    assert requested == ["Walmart", "Best Buy", "Target", "Newegg"]
    assert [(o.platform, o.verified) for o in observations] == [("Amazon", True), ("Walmart", False)]
    assert observations[1].review_count == 1500


@pytest.mark.asyncio
async def test_failing_suggester_is_ignored() -> None:
    fetcher = fake_fetcher({})
    suggester = MagicMock()
    suggester.suggest_platform_ratings = AsyncMock(side_effect=RuntimeError("quota"))
    observations = await collector_with(fetcher, suggester).collect("Sony WH-1000XM4", SOURCE_URL)
    assert observations == []


@pytest.mark.asyncio
async def test_collect_and_aggregate() -> None:
    fetcher = fake_fetcher({
        SOURCE_URL: lambda url: rated_page(url, "4.5", "1000"),
        "https://www.newegg.com": lambda url: rated_page(url, "4.5", "100"),
    })
    score = await collector_with(fetcher).collect_and_aggregate("Sony WH-1000XM4", SOURCE_URL)
    assert score.overall_score == 4.5
    assert score.total_review_count == 1100
    assert len(score.platform_breakdown) == 2


@pytest.mark.asyncio
async def test_platform_with_zero_reviews_is_still_offered_to_suggester() -> None:
    fetcher = fake_fetcher({
        SOURCE_URL: lambda url: rated_page(url, "4.6", "100"),
        "https://www.walmart.com/search": lambda url: rated_page(url, "4.4", "0"),
    })
    suggester = MagicMock()
    suggester.suggest_platform_ratings = AsyncMock(return_value=[
        {"platform": "Walmart", "rating": 4.2, "reviewCount": 350},
    ])

    score = await collector_with(fetcher, suggester).collect_and_aggregate("Sony WH-1000XM4", SOURCE_URL)

    requested = suggester.suggest_platform_ratings.call_args.args[1]
    assert "Walmart" in requested
    walmart = [o for o in score.platform_breakdown if o.platform == "Walmart"]
    assert len(walmart) == 1
    assert walmart[0].review_count == 350
