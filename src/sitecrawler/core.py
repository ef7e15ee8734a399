"""
Core crawling logic: frontier bookkeeping and the breadth-first crawl engine.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from sitecrawler.document import Document
from sitecrawler.errors import FetchError, MalformedUrl
from sitecrawler.fetcher import Fetcher, RequestsFetcher
from sitecrawler.matchers import UrlMatcher
from sitecrawler.normalizers import UrlNormalizer, normalize_chain
from sitecrawler.url import Url

# Sink used when no logger is configured. Kept out of the logging manager
# registry and disabled, so handlers attached to it never receive records.
NULL_LOGGER = logging.Logger("sitecrawler.null")
NULL_LOGGER.addHandler(logging.NullHandler())
NULL_LOGGER.propagate = False
NULL_LOGGER.disabled = True


@dataclass(frozen=True, slots=True)
class Page:
    """A crawled page accepted for return."""
    url: Url
    document: Document


@dataclass(slots=True)
class CrawlStats:
    """Statistics collected during a crawl."""
    pages_crawled: int = 0
    pages_returned: int = 0
    error_counts: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def record_error(self, status_code: Optional[int]) -> None:
        """Record an error by status code category."""
        if status_code is None:
            self.error_counts["connection_error"] += 1
        else:
            self.error_counts[str(status_code)] += 1


@dataclass(slots=True)
class CrawlerConfig:
    """
    Construction options of a Crawler.

    Attributes:
        limit: Maximum number of pages to return, 0 for unbounded.
        stop_on_error: End the crawl on the first fetch failure instead of skipping the page.
        logger: Log sink; a silent logger is used when None.
        whitelist_url_matchers: When non-empty, only matching pages are returned.
        blacklist_url_matchers: Matching pages are not returned (ignored when a whitelist is set).
        url_normalizers: Applied in order to every discovered link.
    """
    limit: int = 0
    stop_on_error: bool = False
    logger: Optional[logging.Logger] = None
    whitelist_url_matchers: List[UrlMatcher] = field(default_factory=list)
    blacklist_url_matchers: List[UrlMatcher] = field(default_factory=list)
    url_normalizers: List[UrlNormalizer] = field(default_factory=list)


@dataclass(slots=True)
class CrawlSession:
    """
    Frontier state of a single crawl.

    ``queued`` is the FIFO frontier keyed by URL string in discovery order.
    ``crawled``, ``rejected`` and ``returned`` are insertion-ordered sets of
    URL strings (dict keys).
    """
    base_url: Url
    queued: Dict[str, Url] = field(default_factory=dict)
    crawled: Dict[str, None] = field(default_factory=dict)
    rejected: Dict[str, None] = field(default_factory=dict)
    returned: Dict[str, None] = field(default_factory=dict)
    stats: CrawlStats = field(default_factory=CrawlStats)

    @classmethod
    def start(cls, base_url: Url) -> "CrawlSession":
        session = cls(base_url=base_url)
        session.queued[str(base_url)] = base_url
        return session

    def pop(self) -> Url:
        """Remove and return the oldest queued URL."""
        key = next(iter(self.queued))
        return self.queued.pop(key)

    def is_known(self, url_string: str) -> bool:
        return (
            url_string in self.rejected
            or url_string in self.crawled
            or url_string in self.queued
        )

    def is_in_scope(self, url: Url) -> bool:
        # Substring containment of the base URL string, not an origin comparison
        return str(self.base_url) in str(url)


class Crawler:
    """
    Breadth-first crawler confined to the seed URL.

    Example:
        crawler = Crawler(config=CrawlerConfig(limit=10))
        for page in crawler.crawl("https://example.com/docs/"):
            print(page.url)
    """

    def __init__(self, fetcher: Optional[Fetcher] = None, config: Optional[CrawlerConfig] = None) -> None:
        config = config or CrawlerConfig()
        self.fetcher = fetcher if fetcher is not None else RequestsFetcher()
        self.limit = config.limit
        self.stop_on_error = config.stop_on_error
        self.logger = config.logger
        self._whitelist_url_matchers: List[UrlMatcher] = list(config.whitelist_url_matchers)
        self._blacklist_url_matchers: List[UrlMatcher] = list(config.blacklist_url_matchers)
        self._url_normalizers: List[UrlNormalizer] = list(config.url_normalizers)
        self._session: Optional[CrawlSession] = None

    # ---- configuration ----

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"limit must be >= 0, got {value}")
        self._limit = value

    @property
    def logger(self) -> logging.Logger:
        return self._logger if self._logger is not None else NULL_LOGGER

    @logger.setter
    def logger(self, value: Optional[logging.Logger]) -> None:
        self._logger = value

    @property
    def whitelist_url_matchers(self) -> Tuple[UrlMatcher, ...]:
        return tuple(self._whitelist_url_matchers)

    def set_whitelist_url_matchers(self, matchers: Iterable[UrlMatcher]) -> "Crawler":
        self._whitelist_url_matchers = list(matchers)
        return self

    def add_whitelist_url_matcher(self, matcher: UrlMatcher) -> "Crawler":
        self._whitelist_url_matchers.append(matcher)
        return self

    def clear_whitelist_url_matchers(self) -> "Crawler":
        self._whitelist_url_matchers = []
        return self

    @property
    def blacklist_url_matchers(self) -> Tuple[UrlMatcher, ...]:
        return tuple(self._blacklist_url_matchers)

    def set_blacklist_url_matchers(self, matchers: Iterable[UrlMatcher]) -> "Crawler":
        self._blacklist_url_matchers = list(matchers)
        return self

    def add_blacklist_url_matcher(self, matcher: UrlMatcher) -> "Crawler":
        self._blacklist_url_matchers.append(matcher)
        return self

    def clear_blacklist_url_matchers(self) -> "Crawler":
        self._blacklist_url_matchers = []
        return self

    @property
    def url_normalizers(self) -> Tuple[UrlNormalizer, ...]:
        return tuple(self._url_normalizers)

    def set_url_normalizers(self, normalizers: Iterable[UrlNormalizer]) -> "Crawler":
        self._url_normalizers = list(normalizers)
        return self

    def add_url_normalizer(self, normalizer: UrlNormalizer) -> "Crawler":
        self._url_normalizers.append(normalizer)
        return self

    def clear_url_normalizers(self) -> "Crawler":
        self._url_normalizers = []
        return self

    # ---- crawl state snapshots ----

    @property
    def base_url(self) -> Optional[Url]:
        return self._session.base_url if self._session else None

    @property
    def urls_queued(self) -> List[str]:
        return list(self._session.queued) if self._session else []

    @property
    def urls_crawled(self) -> List[str]:
        return list(self._session.crawled) if self._session else []

    @property
    def urls_rejected(self) -> List[str]:
        return list(self._session.rejected) if self._session else []

    @property
    def urls_returned(self) -> List[str]:
        return list(self._session.returned) if self._session else []

    @property
    def stats(self) -> CrawlStats:
        return self._session.stats if self._session else CrawlStats()

    # ---- crawling ----

    def crawl(self, seed: str) -> Iterator[Page]:
        """
        Crawl breadth-first from ``seed``, yielding accepted pages lazily.

        One fetch happens per page pulled from the iterator. State from a
        previous call is discarded.

        Raises:
            MalformedUrl: If ``seed`` is not a valid absolute URL (raised by this call, not on iteration).
        """
        base_url = Url.parse(seed)
        session = CrawlSession.start(base_url)
        self._session = session
        return self._run(session)

    def _run(self, session: CrawlSession) -> Iterator[Page]:
        log = self.logger

        while session.queued:
            if self._is_limit_reached(session):
                log.info("Crawl limit of %d was reached", self.limit)
                return

            url = session.pop()
            log.info("Crawling page %s", url)

            try:
                document = self.fetcher.fetch(url)
            except FetchError as e:
                log.error("Error requesting page %s: %s", url, e)
                session.stats.record_error(e.status_code)
                if self.stop_on_error:
                    return
                continue

            log.info("Crawled page %s", url)
            session.crawled[str(url)] = None
            session.stats.pages_crawled += 1

            self._update_queue(session, document)

            if self._should_return_url(url):
                log.debug("Return url %s", url)
                session.returned[str(url)] = None
                session.stats.pages_returned += 1
                yield Page(url, document)

    def _is_limit_reached(self, session: CrawlSession) -> bool:
        return self.limit > 0 and len(session.returned) >= self.limit

    def _update_queue(self, session: CrawlSession, document: Document) -> None:
        log = self.logger
        for raw in document.extract_links():
            if raw in session.rejected:
                continue
            log.debug("Found url %s in page", raw)

            try:
                url = normalize_chain(Url.parse(raw), self._url_normalizers)
            except MalformedUrl as e:
                log.warning("Url %s could not be converted to an object: %s", raw, e)
                if not session.is_known(raw):
                    session.rejected[raw] = None
                continue

            if self._should_crawl_url(session, url):
                session.queued[str(url)] = url

    def _should_crawl_url(self, session: CrawlSession, url: Url) -> bool:
        url_string = str(url)
        if session.is_known(url_string):
            return False

        if not session.is_in_scope(url):
            self.logger.debug("Rejected %s: outside of %s", url, session.base_url)
            session.rejected[url_string] = None
            return False

        return True

    def _should_return_url(self, url: Url) -> bool:
        if self._whitelist_url_matchers:
            if any(matcher.matches(url) for matcher in self._whitelist_url_matchers):
                return True
            self.logger.info('Skipped "%s" because it is not whitelisted', url)
            return False

        if any(matcher.matches(url) for matcher in self._blacklist_url_matchers):
            self.logger.info('Skipped "%s" because it is blacklisted', url)
            return False

        return True
