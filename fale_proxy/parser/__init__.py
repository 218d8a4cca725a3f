"""fale_proxy.parser: Разбор и переписывание HTML-страниц."""

from .html_rewriter import SubstitutionRule, replace_token, rewrite_document, substitute

__all__ = ["SubstitutionRule", "replace_token", "rewrite_document", "substitute"]
