"""
Markup Source Adapter for Review Radar.

Read-only query surface over a page's markup. The extraction cascade only
talks to the `MarkupSource` protocol, so a live-document bridge and the
fetched-HTML implementation below are interchangeable.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError


@dataclass(frozen=True)
class PageImage:
    """An <img> element as seen by the image resolver."""
    src: str
    alt: str = ""
    css_class: str = ""
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def area(self) -> int:
        if self.width is None or self.height is None:
            return 0
        return self.width * self.height


@runtime_checkable
class MarkupSource(Protocol):
    """Query capability the extraction cascade consumes."""

    @property
    def url(self) -> str: ...

    @property
    def title(self) -> Optional[str]: ...

    def select(self, selector: str) -> List[Tag]: ...

    def select_one(self, selector: str) -> Optional[Tag]: ...

    def meta_content(self, selector: str) -> Optional[str]: ...

    def structured_data_blocks(self) -> List[str]: ...

    def images(self) -> List[PageImage]: ...


def _parse_dimension(value: Optional[str]) -> Optional[int]:
    """Parse an HTML width/height attribute ("300", "300px")."""
    if not value:
        return None
    digits = str(value).strip().lower().removesuffix("px").strip()
    try:
        number = float(digits)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return int(number)


class HTMLMarkupSource:
    """
    MarkupSource backed by a fetched HTML string.

    Parsing uses lxml through BeautifulSoup. Invalid CSS selectors are treated
    as "no match" rather than errors so that selector tables can contain
    patterns a given parser does not understand.
    """

    def __init__(self, soup: BeautifulSoup, url: str):
        self._soup = soup
        self._url = url

    @classmethod
    def from_html(cls, html: str, url: str) -> "HTMLMarkupSource":
        return cls(BeautifulSoup(html or "", "lxml"), url)

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> Optional[str]:
        title_tag = self._soup.find("title")
        if not title_tag:
            return None
        return title_tag.get_text()

    def select(self, selector: str) -> List[Tag]:
        try:
            return list(self._soup.select(selector))
        except (SelectorSyntaxError, NotImplementedError):
            return []

    def select_one(self, selector: str) -> Optional[Tag]:
        try:
            return self._soup.select_one(selector)
        except (SelectorSyntaxError, NotImplementedError):
            return None

    def meta_content(self, selector: str) -> Optional[str]:
        """Trimmed `content` attribute of the first element matching selector."""
        element = self.select_one(selector)
        if element is None:
            return None
        content = element.get("content")
        if not content:
            return None
        return str(content).strip() or None

    def structured_data_blocks(self) -> List[str]:
        """Raw text of every JSON-LD script, in document order."""
        blocks = []
        for script in self._soup.find_all("script", type="application/ld+json"):
            text = script.string if script.string is not None else script.get_text()
            if text and text.strip():
                blocks.append(text)
        return blocks

    def images(self) -> List[PageImage]:
        images = []
        for img in self._soup.find_all("img"):
            src = img.get("src") or img.get("data-src")
            if not src:
                continue
            css_class = img.get("class") or []
            if isinstance(css_class, list):
                css_class = " ".join(css_class)
            images.append(PageImage(
                src=str(src),
                alt=str(img.get("alt") or ""),
                css_class=str(css_class),
                width=_parse_dimension(img.get("width")),
                height=_parse_dimension(img.get("height")),
            ))
        return images
