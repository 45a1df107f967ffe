"""Adapters package initialization."""
from review_radar.adapters.markup_source import HTMLMarkupSource, MarkupSource, PageImage
from review_radar.adapters.page_fetcher import PageFetcher, PageFetchError
from review_radar.adapters.claude_client import ClaudeClient, parse_suggestions

__all__ = [
    "HTMLMarkupSource",
    "MarkupSource",
    "PageImage",
    "PageFetcher",
    "PageFetchError",
    "ClaudeClient",
    "parse_suggestions",
]
