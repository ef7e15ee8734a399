"""
Test configuration and fixtures for crawler tests
"""
from typing import Dict, Iterable, List

import pytest

from sitecrawler.core import Crawler, CrawlerConfig
from sitecrawler.errors import FetchError


class FakeDocument:
    """Document whose links are given up front."""

    def __init__(self, url: str, links: Iterable[str]):
        self.url = url
        self.links = list(links)

    def extract_links(self) -> List[str]:
        return list(self.links)


class FakeFetcher:
    """In-memory site: maps URL strings to the links found on that page."""

    def __init__(self, site: Dict[str, List[str]], failing: Iterable[str] = ()):
        self.site = site
        self.failing = set(failing)
        self.requests: List[str] = []

    def fetch(self, url):
        key = str(url)
        self.requests.append(key)
        if key in self.failing:
            raise FetchError(key, f"Request to {key} failed: connection refused")
        if key not in self.site:
            raise FetchError(key, f"Request to {key} returned HTTP 404", status_code=404)
        return FakeDocument(key, self.site[key])


@pytest.fixture
def site():
    """Seed page linking to /about and to an external host."""
    return {
        "http://example.com/": ["http://example.com/about", "http://other.com/x"],
        "http://example.com/about": [],
    }


@pytest.fixture
def make_crawler():
    """Build a crawler over an in-memory site; returns (crawler, fetcher)."""

    def _make(site, failing=(), **options):
        fetcher = FakeFetcher(site, failing)
        return Crawler(fetcher=fetcher, config=CrawlerConfig(**options)), fetcher

    return _make


@pytest.fixture
def make_fetcher():
    def _make(site, failing=()):
        return FakeFetcher(site, failing)

    return _make
