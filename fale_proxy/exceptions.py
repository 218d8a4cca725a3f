"""fale_proxy.exceptions: ошибки, которыми завершается обработка одного запроса."""

from __future__ import annotations

__all__ = ["ProxyError", "UrlRequiredError", "FetchError", "TransformError"]


class ProxyError(Exception):
    """Base class for all proxy failures."""


class UrlRequiredError(ProxyError):
    """The request carried no URL."""

    def __init__(self, message: str = "URL is required") -> None:
        super().__init__(message)


class FetchError(ProxyError):
    """The remote page could not be fetched (network, DNS, timeout, non-2xx)."""

    def __init__(self, message: str, *, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class TransformError(ProxyError):
    """The fetched HTML could not be parsed or serialized."""
