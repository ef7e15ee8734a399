"""
URL Value Tests
"""
import pytest

from sitecrawler.errors import CrawlerError, MalformedUrl
from sitecrawler.url import Url


def test_parse_keeps_exact_string():
    url = Url.parse("HTTP://Example.com:80/a/../b?q=1#frag")
    assert str(url) == "HTTP://Example.com:80/a/../b?q=1#frag"


def test_equality_is_by_string():
    assert Url.parse("http://example.com/") == Url.parse("http://example.com/")
    assert Url.parse("http://example.com/") != Url.parse("http://example.com")
    assert len({Url.parse("http://example.com/"), Url.parse("http://example.com/")}) == 1


def test_parts():
    url = Url.parse("https://user@Example.com:8443/path/page?x=1&y=2#top")
    assert url.scheme == "https"
    assert url.netloc == "user@Example.com:8443"
    assert url.host == "example.com"
    assert url.port == 8443
    assert url.path == "/path/page"
    assert url.query == "x=1&y=2"
    assert url.fragment == "top"


def test_replace_returns_new_url():
    url = Url.parse("http://example.com/a?x=1")
    replaced = url.replace(query="", path="/b")
    assert str(replaced) == "http://example.com/b"
    assert str(url) == "http://example.com/a?x=1"


@pytest.mark.parametrize("raw", [
    "",
    "example.com/page",
    "/relative/path",
    "mailto:someone@example.com",
    "javascript:void(0)",
    "http://exa mple.com/",
    "http://example.com/\n",
    "http://example.com:99999/",
    "http://[::1/",
    "http://",
])
def test_parse_rejects_malformed(raw):
    with pytest.raises(MalformedUrl) as excinfo:
        Url.parse(raw)
    assert excinfo.value.raw == raw


def test_parse_rejects_non_strings():
    with pytest.raises(MalformedUrl):
        Url.parse(None)


def test_malformed_url_is_a_crawler_error():
    assert issubclass(MalformedUrl, CrawlerError)
    assert issubclass(MalformedUrl, ValueError)
