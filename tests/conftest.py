# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import List

import pytest
import pytest_asyncio
from aiohttp import web

from fale_proxy.config import ProxyConfig
from fale_proxy.exceptions import FetchError

SAMPLE_HTML = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>Yale University Test Page</title>
</head>
<body>
  <div class="container">
    <h1>Welcome to Yale University</h1>
    <p>Yale University is a private Ivy League research university in New Haven, Connecticut.</p>
    <p>Founded in 1701, yale is one of the oldest institutions of higher education.</p>
    <div class="links">
      <a href="https://www.yale.edu/about">About Yale</a>
      <a href="https://www.yale.edu/admissions">Yale Admissions</a>
      <a href="http://yale.edu">Yale</a>
    </div>
    <img src="https://www.yale.edu/images/logo.png" alt="Yale Logo"/>
    <script>var site = "Yale";</script>
    <!-- Yale footer -->
  </div>
</body>
</html>
"""


class StubSource:
    """Returns canned HTML instead of going to the network; remembers requested URLs."""

    def __init__(self, html: str = SAMPLE_HTML, error: Exception | None = None) -> None:
        self.html = html
        self.error = error
        self.requested: List[str] = []

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        if self.error is not None:
            raise self.error
        return self.html


@pytest.fixture()
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture()
def stub_source() -> StubSource:
    return StubSource()


@pytest.fixture()
def failing_source() -> StubSource:
    return StubSource(error=FetchError("getaddrinfo ENOTFOUND nowhere.invalid"))


@pytest.fixture()
def basic_config() -> ProxyConfig:
    """
    Return a basic valid ProxyConfig with a short fetch timeout.
    """
    return ProxyConfig(timeout=2.0, user_agent="TestAgent/1.0")


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def upstream_site(unused_tcp_port: int) -> AsyncIterator[str]:
    """A fake remote site: sample page, a page with its own <base>, a 404 and a slow page."""
    app = web.Application()

    async def handle_root(_):
        return web.Response(text=SAMPLE_HTML, content_type="text/html")

    async def handle_with_base(_):
        return web.Response(
            text=(
                '<html><head><base href="https://cdn.example.org/"/>'
                "<title>yale mirror</title></head><body><p>yale</p></body></html>"
            ),
            content_type="text/html",
        )

    async def handle_user_agent(request):
        return web.Response(
            text=f"<html><body><p>{request.headers.get('User-Agent', '')}</p></body></html>",
            content_type="text/html",
        )

    async def handle_slow(_):
        await asyncio.sleep(2)
        return web.Response(text="<p>Yale</p>", content_type="text/html")

    app.router.add_get("/", handle_root)
    app.router.add_get("/with-base", handle_with_base)
    app.router.add_get("/ua", handle_user_agent)
    app.router.add_get("/slow", handle_slow)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


@pytest.fixture()
def make_source():
    """Factory for StubSource with custom HTML or error."""
    return StubSource
