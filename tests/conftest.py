"""Shared fixtures for Review Radar tests."""
import os

os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FORMAT", "console")
os.environ["CLAUDE_API_KEY"] = ""

import pytest

from review_radar.adapters.markup_source import HTMLMarkupSource
from review_radar.models.rating import PlatformRatingObservation


def page(head: str = "", body: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


def ld_json(payload: str) -> str:
    return f'<script type="application/ld+json">{payload}</script>'


@pytest.fixture
def make_source():
    def _make(head: str = "", body: str = "", url: str = "https://shop.example.com/p/1") -> HTMLMarkupSource:
        return HTMLMarkupSource.from_html(page(head, body), url)
    return _make


@pytest.fixture
def observation():
    def _make(platform: str, rating: float, review_count: int, **kwargs) -> PlatformRatingObservation:
        return PlatformRatingObservation(
            platform=platform,
            rating=rating,
            review_count=review_count,
            **kwargs,
        )
    return _make
