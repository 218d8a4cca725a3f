# File: fale_proxy/engine.py
"""fale_proxy.engine: оркестрация одного запроса: нормализация URL, загрузка, замена текста."""

from __future__ import annotations

from typing import Optional, Protocol

from fale_proxy.exceptions import FetchError, UrlRequiredError
from fale_proxy.logger import logger
from fale_proxy.models import ResponsePayload
from fale_proxy.parser.html_rewriter import SubstitutionRule, rewrite_document
from fale_proxy.utils import extract_origin, normalize_url

__all__ = ["PageSource", "proxy_page"]


class PageSource(Protocol):
    """Anything that can turn an absolute URL into HTML (see :class:`~fale_proxy.fetcher.Fetcher`)."""

    async def fetch(self, url: str) -> str: ...


async def proxy_page(
    raw_url: Optional[str], source: PageSource, rule: SubstitutionRule
) -> ResponsePayload:
    """Загружает страницу по raw_url и возвращает её с заменённым текстом.

    Raises:
        UrlRequiredError: URL пустой или отсутствует.
        FetchError: страницу не удалось загрузить.
        TransformError: страницу не удалось разобрать или сериализовать.
    """
    url = normalize_url(raw_url)
    if not url:
        raise UrlRequiredError()

    try:
        origin = extract_origin(url)
    except ValueError as exc:
        raise FetchError(str(exc), url=url) from exc

    html = await source.fetch(url)
    result = rewrite_document(html, origin, rule)
    logger.info("Proxied %s (title: %r)", url, result.title)

    return ResponsePayload(
        content=result.html,
        title=result.title,
        original_url=raw_url,
        processed_url=url,
    )
