# fale_proxy/fetcher.py
"""
Fetcher module: downloads one remote page over HTTP with a browser-like identity.

No retries and no backoff: a failed or slow fetch fails only the request
that triggered it.
"""
from __future__ import annotations

import asyncio
from typing import Dict

from aiohttp import ClientError, ClientSession, ClientTimeout

from fale_proxy.config import ProxyConfig
from fale_proxy.exceptions import FetchError
from fale_proxy.logger import logger

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


def build_headers(config: ProxyConfig) -> Dict[str, str]:
    return {
        "User-Agent": config.user_agent,
        "Accept": _ACCEPT,
        "Accept-Language": config.accept_language,
    }


def build_session(config: ProxyConfig) -> ClientSession:
    """Create the ClientSession shared by all requests of one proxy instance."""
    return ClientSession(
        headers=build_headers(config),
        timeout=ClientTimeout(total=config.timeout),
    )


class Fetcher:
    """Fetches HTML for an absolute URL through a shared aiohttp session."""

    def __init__(self, session: ClientSession) -> None:
        self.session = session

    async def fetch(self, url: str) -> str:
        """
        GET *url* and return the decoded body.

        Raises FetchError on network/DNS errors, timeouts, invalid URLs
        and non-2xx responses.
        """
        logger.debug("Fetching %s", url)
        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(
                        f"Request failed with status code {resp.status}",
                        url=url,
                        status=resp.status,
                    )
                try:
                    return await resp.text()
                except UnicodeDecodeError:
                    return await resp.text(encoding="utf-8", errors="replace")
        except asyncio.TimeoutError as exc:
            raise FetchError(f"Request to {url} timed out", url=url) from exc
        except (ClientError, ValueError) as exc:
            # aiohttp.InvalidURL is both a ClientError and a ValueError
            raise FetchError(str(exc) or exc.__class__.__name__, url=url) from exc
