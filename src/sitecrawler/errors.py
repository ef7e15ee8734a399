"""
Exceptions raised by the crawler.
"""
from __future__ import annotations

from typing import Optional


class CrawlerError(Exception):
    """Base class for all crawler errors."""


class MalformedUrl(CrawlerError, ValueError):
    """A string could not be parsed into an absolute URL."""

    def __init__(self, raw: object, reason: str) -> None:
        super().__init__(f"Malformed URL {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class FetchError(CrawlerError):
    """Fetching a page failed (transport error, timeout or non-success status)."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
