"""
Fetcher and Document Tests

Tests for HTML link extraction and translation of HTTP failures into FetchError.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from sitecrawler.document import HtmlDocument, PageMetadata
from sitecrawler.errors import FetchError
from sitecrawler.fetcher import RequestsFetcher
from sitecrawler.url import Url

HTML = """
<html>
<head><title>  My Title  </title></head>
<body>
    <h1>Main <em>Header</em></h1>
    <h1></h1>
    <a href="/about">About</a>
    <a href="contact.html#form">Contact</a>
    <a href="  https://other.com/x  ">Other</a>
    <a href="">Empty</a>
    <a name="anchor">No href</a>
    <a href="mailto:someone@example.com">Mail</a>
</body>
</html>
"""


def html_document(text=HTML, content_type="text/html; charset=utf-8"):
    return HtmlDocument(
        url="http://example.com/docs/index.html",
        status_code=200,
        text=text,
        headers={"Content-Type": content_type},
    )


# ==========================================
# Tests for HtmlDocument
# ==========================================


def test_extract_links_resolves_against_page_url():
    assert html_document().extract_links() == [
        "http://example.com/about",
        "http://example.com/docs/contact.html#form",
        "https://other.com/x",
        "mailto:someone@example.com",
    ]


def test_extract_links_passes_unresolvable_hrefs_through():
    html = '<html><body><a href="http://[bad/x">Bad</a><a href="/ok">Ok</a></body></html>'

    links = html_document(html).extract_links()

    assert links == ["http://[bad/x", "http://example.com/ok"]


def test_extract_links_skips_non_html():
    assert html_document(content_type="application/pdf").extract_links() == []


def test_metadata():
    meta = html_document().metadata()
    assert meta.title == "My Title"
    assert meta.h1_present is True
    assert meta.h1_contents == ["Main Header"]


def test_metadata_without_title_or_h1():
    meta = html_document("<html><body><p>x</p></body></html>").metadata()
    assert meta == PageMetadata()


def test_metadata_of_non_html_document():
    assert html_document(content_type="application/pdf").metadata() == PageMetadata()


# ==========================================
# Tests for RequestsFetcher
# ==========================================


def make_response(status_code=200, url="http://example.com/", text="<html></html>"):
    resp = MagicMock()
    resp.status_code = status_code
    resp.url = url
    resp.text = text
    resp.headers = {"Content-Type": "text/html"}
    return resp


def test_fetch_returns_html_document():
    session = requests.Session()
    fetcher = RequestsFetcher(timeout_s=5, user_agent="TestAgent/1.0", session=session)

    with patch.object(session, "get", return_value=make_response(url="http://example.com/final")) as get:
        document = fetcher.fetch(Url.parse("http://example.com/"))

    get.assert_called_once_with("http://example.com/", timeout=5, allow_redirects=True)
    assert session.headers["User-Agent"] == "TestAgent/1.0"
    assert document.url == "http://example.com/final"
    assert document.status_code == 200
    assert document.is_html


def test_fetch_error_status_raises():
    session = requests.Session()
    fetcher = RequestsFetcher(session=session)

    with patch.object(session, "get", return_value=make_response(status_code=404)):
        with pytest.raises(FetchError) as excinfo:
            fetcher.fetch(Url.parse("http://example.com/missing"))

    assert excinfo.value.status_code == 404
    assert excinfo.value.url == "http://example.com/missing"


def test_fetch_transport_error_raises():
    session = requests.Session()
    fetcher = RequestsFetcher(session=session)

    with patch.object(session, "get", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(FetchError) as excinfo:
            fetcher.fetch(Url.parse("http://example.com/"))

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_fetch_timeout_raises():
    session = requests.Session()
    fetcher = RequestsFetcher(session=session)

    with patch.object(session, "get", side_effect=requests.Timeout("slow")):
        with pytest.raises(FetchError):
            fetcher.fetch(Url.parse("http://example.com/"))
