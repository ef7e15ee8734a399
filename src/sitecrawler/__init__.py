"""
Web crawler that performs a breadth-first traversal of the links found under a seed URL,
yielding accepted pages lazily while tracking crawled, queued, rejected and returned URLs.
"""
import logging

from sitecrawler.core import Crawler, CrawlerConfig, CrawlSession, CrawlStats, Page
from sitecrawler.document import Document, HtmlDocument
from sitecrawler.errors import CrawlerError, FetchError, MalformedUrl
from sitecrawler.fetcher import Fetcher, RequestsFetcher
from sitecrawler.url import Url

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "Crawler",
    "CrawlerConfig",
    "CrawlSession",
    "CrawlStats",
    "CrawlerError",
    "Document",
    "FetchError",
    "Fetcher",
    "HtmlDocument",
    "MalformedUrl",
    "Page",
    "RequestsFetcher",
    "Url",
]
