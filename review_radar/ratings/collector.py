"""
Rating collection for Review Radar.

Gathers PlatformRatingObservations for one product from three places:
the product's own page, search pages of the other known retailers, and
(optionally) an LLM suggester for retailers still missing. Every probe
swallows its own failures, so a dead retailer only shrinks the result.
"""
from typing import Awaitable, Callable, List, Optional, Protocol, Sequence

from review_radar.adapters.page_fetcher import PageFetcher, PageFetchError
from review_radar.adapters.claude_client import parse_suggestions
from review_radar.config import config
from review_radar.models.rating import AggregatedScore, PlatformRatingObservation
from review_radar.platforms import PLATFORMS, PlatformProfile, find_platform, platform_name, trust_weight_for
from review_radar.ratings.aggregator import RatingAggregator
from review_radar.ratings.page_ratings import extract_page_rating
from review_radar.utils.concurrency import run_batched
from review_radar.utils.logger import LayerLogger


class RatingSuggester(Protocol):
    """Anything that can suggest raw rating dicts for a product."""

    async def suggest_platform_ratings(self, title: str, platforms: Sequence[str]) -> List[dict]:
        ...


class RatingCollector:
    """
    Collects rating observations across retailers.

    All collaborators are injectable; the defaults fetch live pages and skip
    suggestions entirely.
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        suggester: Optional[RatingSuggester] = None,
        concurrency: Optional[int] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.logger = logger or LayerLogger("rating_collector")
        self.fetcher = fetcher or PageFetcher(logger=self.logger)
        self.suggester = suggester
        self.concurrency = concurrency if concurrency is not None else config.PROBE_CONCURRENCY

    async def collect(self, title: str, url: str) -> List[PlatformRatingObservation]:
        """Observations for `title`, starting from its page at `url`."""
        self.logger.log_action("collect_ratings", "started", url=url, title=title[:80])
        source_profile = find_platform(url)

        tasks: List[Callable[[], Awaitable[Optional[PlatformRatingObservation]]]] = [
            lambda: self.probe_source_page(url)
        ]
        for profile in self.search_targets(source_profile):
            tasks.append(lambda profile=profile: self.probe_search_page(profile, title))

        results = await run_batched(tasks, limit=self.concurrency, logger=self.logger)
        observations = [o for o in results if o is not None]

        missing = self._missing_platforms(observations, source_profile)
        if missing and self.suggester is not None:
            observations.extend(await self._suggest(title, missing))

        self.logger.log_action(
            "collect_ratings",
            "completed",
            url=url,
            observations=len(observations),
            platforms=[o.platform for o in observations],
        )
        return observations

    async def collect_and_aggregate(self, title: str, url: str) -> AggregatedScore:
        """Collect observations and fold them into one score."""
        observations = await self.collect(title, url)
        return RatingAggregator(logger=self.logger).aggregate(observations)

    def search_targets(self, source_profile: Optional[PlatformProfile]) -> List[PlatformProfile]:
        """Retailers with a search page, other than the one the product came from."""
        return [
            profile for profile in PLATFORMS
            if profile.search_url and profile is not source_profile
        ]

    async def probe_source_page(self, url: str) -> Optional[PlatformRatingObservation]:
        """Rating read from the product's own page; verified."""
        profile = find_platform(url)
        platform = profile.name if profile else platform_name(url)
        return await self._probe(url, platform, profile, verified=True)

    async def probe_search_page(self, profile: PlatformProfile, title: str) -> Optional[PlatformRatingObservation]:
        """Rating of the top search hit for `title` on another retailer; unverified."""
        search_url = profile.build_search_url(title)
        if not search_url:
            return None
        return await self._probe(search_url, profile.name, profile, verified=False)

    async def _probe(
        self,
        url: str,
        platform: str,
        profile: Optional[PlatformProfile],
        verified: bool,
    ) -> Optional[PlatformRatingObservation]:
        try:
            source = await self.fetcher.fetch(url)
        except PageFetchError as e:
            self.logger.log_fallback(
                from_source=platform,
                to_source="none",
                reason=e.reason,
                url=url,
            )
            return None

        sample = extract_page_rating(source, profile)
        if sample is None or sample.rating <= 0:
            self.logger.log_decision(
                decision="no_rating",
                reason="no rating found on page",
                url=url,
                platform=platform,
            )
            return None

        return PlatformRatingObservation(
            platform=platform,
            rating=sample.rating,
            review_count=sample.review_count,
            verified=verified,
            source_url=url,
            trust_weight=trust_weight_for(platform),
        )

    def _missing_platforms(
        self,
        observations: List[PlatformRatingObservation],
        source_profile: Optional[PlatformProfile],
    ) -> List[str]:
        found = {o.platform.lower() for o in observations if o.has_data}
        return [
            profile.name for profile in self.search_targets(source_profile)
            if profile.name.lower() not in found
        ]

    async def _suggest(self, title: str, platforms: List[str]) -> List[PlatformRatingObservation]:
        try:
            raw = await self.suggester.suggest_platform_ratings(title, platforms)
        except Exception as e:
            self.logger.log_error(f"Rating suggester failed: {str(e)}", error_type=type(e).__name__)
            return []

        suggestions = parse_suggestions(raw, platforms)
        self.logger.log_fallback(
            from_source="search_probes",
            to_source="suggester",
            reason="platforms without a probed rating",
            requested=platforms,
            accepted=len(suggestions),
        )
        return suggestions
