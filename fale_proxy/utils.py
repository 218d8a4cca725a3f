"""fale_proxy.utils: Утилитарные функции для обработки URL."""

from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import urlparse

from fale_proxy.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "has_http_scheme",
    "extract_origin",
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def has_http_scheme(url: str) -> bool:
    """Проверяет, что строка уже начинается с http:// или https:// (без учёта регистра)."""
    return bool(_SCHEME_RE.match(url))


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Добавляет схему http:// к URL без схемы.

    Пустое значение возвращается как есть: отсутствие URL обрабатывает вызывающий код.
    """
    if not url:
        return url
    if has_http_scheme(url):
        return url
    normalized = f"http://{url}"
    logger.debug("Normalized URL: %s -> %s", url, normalized)
    return normalized


def extract_origin(url: str) -> str:
    """Возвращает origin абсолютного URL: ``scheme://host[:port]``.

    Бросает ValueError, если в URL нет схемы или хоста.
    """
    try:
        parsed = urlparse(url)
        # обращение к .port валидирует номер порта
        port = parsed.port
    except ValueError as exc:
        raise ValueError(f"Invalid URL: {url}") from exc
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"Invalid URL: {url}")

    scheme = parsed.scheme.lower()
    host = parsed.hostname
    if ":" in host:
        host = f"[{host}]"
    default_port = {"http": 80, "https": 443}.get(scheme)
    if port is not None and port != default_port:
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"
