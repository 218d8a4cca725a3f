# File: tests/test_fetcher.py
from __future__ import annotations

import pytest

from fale_proxy.config import ProxyConfig
from fale_proxy.exceptions import FetchError
from fale_proxy.fetcher import Fetcher, build_headers, build_session


def test_headers_follow_config():
    cfg = ProxyConfig(user_agent="Agent/2.0", accept_language="ru-RU")
    headers = build_headers(cfg)
    assert headers["User-Agent"] == "Agent/2.0"
    assert headers["Accept-Language"] == "ru-RU"
    assert headers["Accept"].startswith("text/html")


@pytest.mark.asyncio()
async def test_fetch_returns_html(basic_config, upstream_site: str):
    async with build_session(basic_config) as session:
        html = await Fetcher(session).fetch(f"{upstream_site}/")
    assert "<title>Yale University Test Page</title>" in html


@pytest.mark.asyncio()
async def test_fetch_sends_configured_user_agent(basic_config, upstream_site: str):
    async with build_session(basic_config) as session:
        html = await Fetcher(session).fetch(f"{upstream_site}/ua")
    assert "TestAgent/1.0" in html


@pytest.mark.asyncio()
async def test_fetch_non_2xx_is_error(basic_config, upstream_site: str):
    async with build_session(basic_config) as session:
        with pytest.raises(FetchError) as excinfo:
            await Fetcher(session).fetch(f"{upstream_site}/missing")
    assert str(excinfo.value) == "Request failed with status code 404"
    assert excinfo.value.status == 404


@pytest.mark.asyncio()
async def test_fetch_timeout_is_error(upstream_site: str):
    cfg = ProxyConfig(timeout=0.5)
    async with build_session(cfg) as session:
        with pytest.raises(FetchError, match="timed out"):
            await Fetcher(session).fetch(f"{upstream_site}/slow")


@pytest.mark.asyncio()
async def test_fetch_connection_refused(basic_config, unused_tcp_port: int):
    async with build_session(basic_config) as session:
        with pytest.raises(FetchError) as excinfo:
            await Fetcher(session).fetch(f"http://localhost:{unused_tcp_port}/")
    assert excinfo.value.url == f"http://localhost:{unused_tcp_port}/"
    assert excinfo.value.status is None
