"""
Page Fetcher for Review Radar.
Fetches HTML for a URL and wraps it as a MarkupSource. The extraction core
never fetches on its own; callers hand it what this adapter returns.
"""
from typing import Optional

import httpx

from review_radar.adapters.markup_source import HTMLMarkupSource
from review_radar.config import config
from review_radar.platforms import platform_name
from review_radar.utils.logger import LayerLogger


class PageFetchError(Exception):
    """Raised when a page cannot be fetched."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class PageFetcher:
    """
    HTTP fetcher producing MarkupSource objects.

    A shared httpx.AsyncClient may be injected (tests use MockTransport);
    otherwise a short-lived client is opened per fetch.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[LayerLogger] = None,
    ):
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self._client = client
        self.logger = logger or LayerLogger("page_fetcher")

    async def fetch(self, url: str) -> HTMLMarkupSource:
        """
        Fetch a page and parse it.

        Raises:
            PageFetchError: on any transport error, timeout or non-2xx status
        """
        self.logger.log_action("fetch_html", "started", url=url)

        try:
            if self._client is not None:
                response = await self._client.get(url, headers=self._get_headers())
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url, headers=self._get_headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            self.logger.log_http_probe(
                url=url,
                platform=platform_name(url),
                status_code=status_code,
                result="http_error",
            )
            raise PageFetchError(url, f"HTTP {status_code}", status_code=status_code) from e
        except httpx.HTTPError as e:
            self.logger.log_error(
                f"Failed to fetch URL: {str(e)}",
                error_type=type(e).__name__,
                url=url
            )
            raise PageFetchError(url, str(e) or type(e).__name__) from e

        html = response.text
        self.logger.log_http_probe(
            url=url,
            platform=platform_name(url),
            status_code=response.status_code,
            result="ok",
            content_length=len(html),
        )
        return HTMLMarkupSource.from_html(html, str(response.url))

    def _get_headers(self) -> dict:
        """Get request headers mimicking a browser."""
        return {
            "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
