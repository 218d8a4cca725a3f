# File: tests/test_utils.py
import pytest

from fale_proxy.utils import extract_origin, has_http_scheme, normalize_url


@pytest.mark.parametrize(
    "raw",
    ["yale.edu", "www.yale.edu/about", "localhost:3001/page", "ftp://files.example.com", "   "],
)
def test_normalize_adds_http_scheme(raw):
    assert normalize_url(raw) == f"http://{raw}"


@pytest.mark.parametrize(
    "raw",
    ["http://yale.edu", "https://yale.edu/about?q=1", "HTTP://YALE.EDU", "HtTpS://example.com"],
)
def test_normalize_keeps_existing_scheme(raw):
    assert normalize_url(raw) == raw


@pytest.mark.parametrize("raw", ["yale.edu", "https://yale.edu", "HTTP://x", "a/b/c"])
def test_normalize_is_idempotent(raw):
    once = normalize_url(raw)
    assert normalize_url(once) == once


@pytest.mark.parametrize("raw", ["", None])
def test_normalize_empty_passthrough(raw):
    assert normalize_url(raw) == raw


def test_has_http_scheme_requires_slashes():
    assert has_http_scheme("https://a")
    assert not has_http_scheme("http:a")
    assert not has_http_scheme("mailto:someone@yale.edu")


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://yale.edu", "http://yale.edu"),
        ("https://www.yale.edu/about/index.html?x=1#top", "https://www.yale.edu"),
        ("HTTP://YALE.EDU/Path", "http://yale.edu"),
        ("http://localhost:3001/page", "http://localhost:3001"),
        ("https://example.com:443/", "https://example.com"),
        ("http://[::1]:8080/", "http://[::1]:8080"),
    ],
)
def test_extract_origin(url, expected):
    assert extract_origin(url) == expected


@pytest.mark.parametrize("url", ["http://", "yale.edu", "http://host:notaport/"])
def test_extract_origin_invalid(url):
    with pytest.raises(ValueError):
        extract_origin(url)
