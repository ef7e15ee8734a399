"""
Immutable URL value used as the unit of identity by the crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

from sitecrawler.errors import MalformedUrl


def _has_forbidden_chars(raw: str) -> bool:
    return any(ch.isspace() or ord(ch) < 32 or ord(ch) == 127 for ch in raw)


@dataclass(frozen=True, slots=True, order=True)
class Url:
    """
    An absolute URL. Equality, hashing and ordering use the exact string form;
    no canonicalization happens here (see ``sitecrawler.normalizers``).
    """
    value: str

    @classmethod
    def parse(cls, raw: str) -> "Url":
        """
        Parse a raw string into a Url.

        Raises:
            MalformedUrl: If ``raw`` is not a syntactically valid absolute URL.
        """
        if not isinstance(raw, str):
            raise MalformedUrl(raw, "not a string")
        if not raw:
            raise MalformedUrl(raw, "empty string")
        if _has_forbidden_chars(raw):
            raise MalformedUrl(raw, "contains whitespace or control characters")

        try:
            parts = urlsplit(raw)
            # Accessing the port validates it
            parts.port
        except ValueError as e:
            raise MalformedUrl(raw, str(e)) from e

        if not parts.scheme:
            raise MalformedUrl(raw, "missing scheme")
        if not parts.netloc or not parts.hostname:
            raise MalformedUrl(raw, "missing host")

        return cls(raw)

    def __str__(self) -> str:
        return self.value

    def _split(self) -> SplitResult:
        return urlsplit(self.value)

    @property
    def scheme(self) -> str:
        return self._split().scheme

    @property
    def netloc(self) -> str:
        return self._split().netloc

    @property
    def host(self) -> str:
        return self._split().hostname or ""

    @property
    def port(self) -> Optional[int]:
        return self._split().port

    @property
    def path(self) -> str:
        return self._split().path

    @property
    def query(self) -> str:
        return self._split().query

    @property
    def fragment(self) -> str:
        return self._split().fragment

    def replace(self, **parts: str) -> "Url":
        """Return a new Url with the given parts (scheme, netloc, path, query, fragment) replaced."""
        return Url.parse(urlunsplit(self._split()._replace(**parts)))
