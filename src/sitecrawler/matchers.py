"""
URL matchers used for the whitelist and blacklist pools of the crawler.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, Pattern, Protocol, Union

from sitecrawler.url import Url

# Non-page file extensions (frozen set for O(1) lookup)
SKIP_EXTENSIONS: frozenset[str] = frozenset((
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg",
    ".pdf", ".zip", ".rar", ".7z",
    ".mp4", ".mp3", ".wav", ".webm",
    ".css", ".js", ".map", ".ico",
    ".woff", ".woff2", ".ttf", ".eot",
))


class UrlMatcher(Protocol):
    """Side-effect free predicate tested against a URL."""

    def matches(self, url: Url) -> bool:
        ...


class RegexUrlMatcher:
    """Match when the pattern is found anywhere in the full URL string."""

    def __init__(self, pattern: Union[str, Pattern[str]]) -> None:
        self.pattern = re.compile(pattern)

    def matches(self, url: Url) -> bool:
        return self.pattern.search(str(url)) is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pattern.pattern!r})"


class PathRegexUrlMatcher(RegexUrlMatcher):
    """Match when the pattern is found in the URL path."""

    def matches(self, url: Url) -> bool:
        return self.pattern.search(url.path) is not None


class PathPrefixUrlMatcher:
    """Match when the URL path starts with the given prefix (e.g. "/products")."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def matches(self, url: Url) -> bool:
        return url.path.startswith(self.prefix)

    def __repr__(self) -> str:
        return f"PathPrefixUrlMatcher({self.prefix!r})"


class ExtensionUrlMatcher:
    """Match URLs whose path ends with one of the extensions (case-insensitive)."""

    def __init__(self, extensions: Iterable[str] = SKIP_EXTENSIONS) -> None:
        self.extensions = tuple(sorted(ext.lower() for ext in extensions))

    def matches(self, url: Url) -> bool:
        return url.path.lower().endswith(self.extensions)


class CallbackUrlMatcher:
    """Adapt a plain callable to the matcher interface."""

    def __init__(self, func: Callable[[Url], bool]) -> None:
        self.func = func

    def matches(self, url: Url) -> bool:
        return bool(self.func(url))
