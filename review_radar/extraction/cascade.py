"""
Extraction Cascade for Review Radar.

Runs the extraction strategies in priority order and stops at the first
accepted candidate. A page on which nothing is accepted yields None
("not a product page"), never an exception.
"""
from typing import List, Optional, Sequence
from urllib.parse import urljoin

from review_radar.adapters.markup_source import MarkupSource
from review_radar.extraction.images import ImageResolver
from review_radar.extraction.normalizer import normalize_title
from review_radar.extraction.strategies import ExtractionStrategy, default_strategies
from review_radar.models.product import CascadeReport, DetectedProduct, StrategyResult
from review_radar.platforms import identify_platform
from review_radar.utils.logger import LayerLogger, NullLayerLogger


class ExtractionCascade:
    """
    First-success fold over an ordered list of strategies.

    The order is plain data: pass `strategies` to reorder, drop or add
    strategies without touching the driver.
    """

    def __init__(
        self,
        strategies: Optional[Sequence[ExtractionStrategy]] = None,
        image_resolver: Optional[ImageResolver] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.strategies: List[ExtractionStrategy] = list(
            strategies if strategies is not None else default_strategies()
        )
        self.logger = logger or NullLayerLogger()
        self.image_resolver = image_resolver or ImageResolver(logger=self.logger)

    def extract(self, source: MarkupSource) -> Optional[DetectedProduct]:
        """Detect the page's product, or None when the page is not a product page."""
        return self.run(source).product

    def run(self, source: MarkupSource) -> CascadeReport:
        """Run the cascade and keep every attempt for inspection."""
        report = CascadeReport()
        self.logger.log_action(
            "product_detection",
            "started",
            url=source.url,
            strategies=[s.name for s in self.strategies],
        )

        for strategy in self.strategies:
            result = self._attempt(strategy, source)

            if result.accepted:
                product = self._build_product(source, result)
                if product is None:
                    result = StrategyResult.not_found(strategy.name, "title empty after normalization")
                else:
                    report.attempts.append(result)
                    report.product = product
                    self.logger.log_strategy(strategy.name, result.outcome.value, selector=result.candidate.selector)
                    self.logger.log_decision(
                        decision="product_detected",
                        reason=product.method.value,
                        url=source.url,
                        title=product.title,
                        has_image=product.image is not None,
                    )
                    return report

            report.attempts.append(result)
            self.logger.log_strategy(strategy.name, result.outcome.value, reason=result.reason)

        self.logger.log_decision(
            decision="no_product",
            reason="no strategy accepted a candidate",
            url=source.url,
        )
        return report

    def _attempt(self, strategy: ExtractionStrategy, source: MarkupSource) -> StrategyResult:
        try:
            return strategy.attempt(source)
        except Exception as e:
            # A broken strategy must not take the whole cascade down
            self.logger.log_error(
                f"Strategy {strategy.name} failed: {str(e)}",
                error_type=type(e).__name__,
                url=source.url,
            )
            return StrategyResult.malformed(strategy.name, f"{type(e).__name__}: {e}")

    def _build_product(self, source: MarkupSource, result: StrategyResult) -> Optional[DetectedProduct]:
        candidate = result.candidate
        title = normalize_title(candidate.title)
        if not title:
            return None

        return DetectedProduct(
            title=title,
            url=source.url,
            source=identify_platform(source.url),
            image=self._resolve_image(source, candidate.image),
            method=candidate.method,
            selector=candidate.selector,
        )

    def _resolve_image(self, source: MarkupSource, image: Optional[str]) -> Optional[str]:
        """Absolute image URL for the product; None when the page's image data is unusable."""
        try:
            if image:
                return urljoin(source.url, image)
            return self.image_resolver.resolve(source)
        except Exception as e:
            self.logger.log_error(
                f"Image resolution failed: {str(e)}",
                error_type=type(e).__name__,
                url=source.url,
            )
            return None


def detect_product(source: MarkupSource, logger: Optional[LayerLogger] = None) -> Optional[DetectedProduct]:
    """Run the default cascade once."""
    return ExtractionCascade(logger=logger).extract(source)
