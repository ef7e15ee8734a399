"""
HTTP fetching of pages for the crawler.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import requests

from sitecrawler.document import Document, HtmlDocument
from sitecrawler.errors import FetchError
from sitecrawler.url import Url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SiteCrawler/1.0"
DEFAULT_TIMEOUT_S = 15.0


class Fetcher(Protocol):
    """Performs a GET request and returns the parsed document."""

    def fetch(self, url: Url) -> Document:
        """
        Raises:
            FetchError: On network errors, timeouts and non-success responses.
        """
        ...


class RequestsFetcher:
    """Fetcher backed by a ``requests.Session``."""

    def __init__(
        self,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent

    def fetch(self, url: Url) -> HtmlDocument:
        target = str(url)
        try:
            resp = self.session.get(target, timeout=self.timeout_s, allow_redirects=True)
        except requests.RequestException as e:
            raise FetchError(target, f"Request to {target} failed: {e}") from e

        if resp.status_code >= 400:
            raise FetchError(
                target,
                f"Request to {target} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        logger.debug("GET %s -> %d", target, resp.status_code)
        return HtmlDocument(
            url=resp.url or target,
            status_code=resp.status_code,
            text=resp.text,
            headers=dict(resp.headers),
        )
