"""
Fetched documents and link extraction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, SoupStrainer

# SoupStrainer to parse only <a> tags (faster link extraction)
LINK_STRAINER = SoupStrainer("a", href=True)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


@dataclass(frozen=True, slots=True)
class PageMetadata:
    """Descriptive fields reported for a returned page."""
    title: Optional[str] = None
    h1_present: bool = False
    h1_contents: List[str] = field(default_factory=list)


class Document(Protocol):
    """A fetched document able to list the hyperlinks it contains."""

    def extract_links(self) -> Sequence[str]:
        """Return absolute, resolved hyperlink targets found in the document."""
        ...


@dataclass(slots=True)
class HtmlDocument:
    """Response of a successful GET request."""
    url: str
    status_code: int
    text: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return (value or "").lower()
        return ""

    @property
    def is_html(self) -> bool:
        return any(ct in self.content_type for ct in HTML_CONTENT_TYPES)

    def extract_links(self) -> List[str]:
        """Extract all href values from <a> tags, resolved against the page URL."""
        if not self.is_html:
            return []
        soup = BeautifulSoup(self.text, "lxml", parse_only=LINK_STRAINER)
        return [
            self._resolve(href)
            for a in soup.find_all("a", href=True)
            if (href := a["href"].strip())
        ]

    def _resolve(self, href: str) -> str:
        # Unresolvable hrefs are passed through so URL parsing rejects them
        try:
            return urljoin(self.url, href)
        except ValueError:
            return href

    def metadata(self) -> PageMetadata:
        """Title and headings of the page; empty for non-HTML documents."""
        if not self.is_html:
            return PageMetadata()

        soup = BeautifulSoup(self.text, "lxml")
        title_tag = soup.find("title")
        h1_tags = soup.find_all("h1")
        return PageMetadata(
            title=(title_tag.get_text(strip=True) or None) if title_tag else None,
            h1_present=bool(h1_tags),
            h1_contents=[h.get_text(" ", strip=True) for h in h1_tags if h.get_text(strip=True)],
        )
