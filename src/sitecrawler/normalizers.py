"""
URL normalizers applied, in order, to every link discovered during a crawl.
"""
from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence
from urllib.parse import unquote_plus

from sitecrawler.url import Url


class UrlNormalizer(Protocol):
    """Pure, total transform canonicalizing a URL."""

    def normalize(self, url: Url) -> Url:
        ...


def normalize_chain(url: Url, normalizers: Iterable[UrlNormalizer]) -> Url:
    """Apply normalizers in order, each one consuming the previous one's output."""
    for normalizer in normalizers:
        url = normalizer.normalize(url)
    return url


class FragmentNormalizer:
    """Drop the #fragment."""

    def normalize(self, url: Url) -> Url:
        if "#" not in str(url):
            return url
        return url.replace(fragment="")


class HostNormalizer:
    """
    Normalize scheme/host case and ports.

    - Lowercases scheme and hostname
    - Removes default ports (:80 for http, :443 for https)
    - Uses "/" for an empty path
    """

    DEFAULT_PORTS = {"http": 80, "https": 443}

    def normalize(self, url: Url) -> Url:
        scheme = url.scheme.lower()
        hostname = url.host.lower()
        if ":" in hostname:
            hostname = f"[{hostname}]"
        port = url.port

        if port is None or self.DEFAULT_PORTS.get(scheme) == port:
            hostport = hostname
        else:
            hostport = f"{hostname}:{port}"

        netloc = url.netloc
        userinfo, sep, _ = netloc.rpartition("@")
        netloc = f"{userinfo}{sep}{hostport}"

        return url.replace(scheme=scheme, netloc=netloc, path=url.path or "/")


class TrailingSlashNormalizer:
    """Remove the trailing slash from any path other than the root."""

    def normalize(self, url: Url) -> Url:
        path = url.path
        if len(path) > 1 and path.endswith("/"):
            return url.replace(path=path.rstrip("/") or "/")
        return url


class QueryStringNormalizer:
    """
    Drop query parameters.

    Without ``params`` the whole query string is removed. Otherwise only the
    named parameters are removed; a name ending in ``*`` matches by prefix
    (``"utm_*"`` removes ``utm_source``, ``utm_medium``, ...).
    """

    def __init__(self, params: Optional[Sequence[str]] = None) -> None:
        self.params = tuple(params) if params is not None else None

    def _is_dropped(self, name: str) -> bool:
        for param in self.params or ():
            if param.endswith("*"):
                if name.startswith(param[:-1]):
                    return True
            elif name == param:
                return True
        return False

    def normalize(self, url: Url) -> Url:
        if not url.query:
            return url
        if self.params is None:
            return url.replace(query="")

        # Raw segments are kept byte for byte; only names are decoded for matching
        segments = url.query.split("&")
        kept = [
            segment for segment in segments
            if not self._is_dropped(unquote_plus(segment.partition("=")[0]))
        ]
        if len(kept) == len(segments):
            return url
        return url.replace(query="&".join(kept))
