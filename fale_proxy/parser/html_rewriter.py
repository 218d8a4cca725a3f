"""Text-only token substitution over a parsed HTML document.

The rewriter walks the document tree and touches **only** character data
that a browser would render as text:

* text nodes outside ``<head>`` and the document ``<title>`` text are rewritten;
* attribute values (``href``, ``src``, ...) are never read, so links keep
  pointing at the original site;
* comments, doctype, CDATA and the contents of ``<script>``, ``<style>``
  and ``<template>`` stay byte-for-byte intact.

A ``<base href="origin/">`` is added to ``<head>`` unless the page already
declares one, so relative resources resolve against the original site when
the output is rendered from the proxy's address.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PageElement, PreformattedString, Script, Stylesheet, TemplateString

from fale_proxy.exceptions import TransformError
from fale_proxy.logger import logger
from fale_proxy.models import SubstitutionResult

__all__: Sequence[str] = (
    "SubstitutionRule",
    "NodeKind",
    "node_kind",
    "replace_token",
    "rewrite_document",
    "substitute",
)

_NON_TEXT_STRINGS = (PreformattedString, Script, Stylesheet, TemplateString)
_OPAQUE_TAGS: FrozenSet[str] = frozenset({"script", "style", "template"})
# html.parser leaves text after </body> outside the body, so the whole
# document is walked and only <head> is skipped besides the opaque tags
_SKIP_TAGS: FrozenSet[str] = _OPAQUE_TAGS | {"head"}


@dataclass(slots=True, frozen=True)
class SubstitutionRule:
    """Literal token swap: ``pattern`` → ``replacement`` plus their lowercase forms."""

    pattern: str
    replacement: str

    @property
    def lower_pattern(self) -> str:
        return self.pattern.lower()

    @property
    def lower_replacement(self) -> str:
        return self.replacement.lower()


class NodeKind(Enum):
    DOCUMENT = "document"
    ELEMENT = "element"
    TEXT = "text"
    OTHER = "other"


def node_kind(node: PageElement) -> NodeKind:
    """Classify a tree node. Comments, doctype and script/style strings are OTHER."""
    if isinstance(node, BeautifulSoup):
        return NodeKind.DOCUMENT
    if isinstance(node, Tag):
        return NodeKind.ELEMENT
    if isinstance(node, NavigableString) and not isinstance(node, _NON_TEXT_STRINGS):
        return NodeKind.TEXT
    return NodeKind.OTHER


def replace_token(text: str, rule: SubstitutionRule) -> str:
    """Replace every ``Pattern`` with ``Replacement``, then every ``pattern`` with ``replacement``.

    Substrings inside longer words are replaced too. Other casings
    (``PATTERN``, ``PaTtErN``) are left alone.
    """
    text = text.replace(rule.pattern, rule.replacement)
    return text.replace(rule.lower_pattern, rule.lower_replacement)


# ---------------------------------------------------------------------------
# Tree passes
# ---------------------------------------------------------------------------


def _ensure_head(soup: BeautifulSoup) -> Tag:
    head = soup.head
    if head is not None:
        return head
    head = soup.new_tag("head")
    if soup.html is not None:
        soup.html.insert(0, head)
        return head
    # keep a leading doctype/comment in front of the synthesized <head>
    index = 0
    for child in soup.contents:
        if not isinstance(child, PreformattedString):
            break
        index += 1
    soup.insert(index, head)
    return head


def _ensure_base(soup: BeautifulSoup, target_origin: str) -> bool:
    """Prepend ``<base href="origin/">`` to <head> unless the page declares a base anywhere.

    A page may omit the <head> tag; its <base> then sits directly under <html>.
    """
    if soup.find("base") is not None:
        return False
    head = _ensure_head(soup)
    head.insert(0, soup.new_tag("base", href=f"{target_origin.rstrip('/')}/"))
    return True


def _find_title(soup: BeautifulSoup) -> Optional[Tag]:
    """Document title: the one in <head>, else the first <title> outside <svg>."""
    if soup.head is not None:
        title_tag = soup.head.find("title")
        if title_tag is not None:
            return title_tag
    for title_tag in soup.find_all("title"):
        if title_tag.find_parent("svg") is None:
            return title_tag
    return None


def _rewrite_text_nodes(
    root: Tag, rule: SubstitutionRule, skip: FrozenSet[str], exclude: Optional[Tag] = None
) -> int:
    """Depth-first walk from *root*; returns the number of text nodes replaced."""
    replaced = 0
    stack: List[PageElement] = [root]
    while stack:
        node = stack.pop()
        kind = node_kind(node)
        if kind is NodeKind.TEXT:
            text = str(node)
            new_text = replace_token(text, rule)
            if new_text != text:
                node.replace_with(NavigableString(new_text))
                replaced += 1
        elif kind is NodeKind.ELEMENT or kind is NodeKind.DOCUMENT:
            if node is not root and (node.name in skip or node is exclude):
                continue
            stack.extend(reversed(node.contents))
    return replaced


def _rewrite_title(title_tag: Optional[Tag], rule: SubstitutionRule) -> str:
    if title_tag is None:
        return ""
    original = title_tag.get_text()
    title = replace_token(original, rule)
    if title != original:
        title_tag.string = title
    return title


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def rewrite_document(
    html: Union[str, bytes], target_origin: str, rule: SubstitutionRule
) -> SubstitutionResult:
    """Parse *html*, apply *rule* to visible text and serialize it back.

    Raises :class:`~fale_proxy.exceptions.TransformError` if the markup
    cannot be parsed or serialized; there is no partial result.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
        _ensure_base(soup, target_origin)

        title_tag = _find_title(soup)
        replaced = _rewrite_text_nodes(soup, rule, _SKIP_TAGS, exclude=title_tag)
        title = _rewrite_title(title_tag, rule)
        output = str(soup)
    except Exception as exc:
        raise TransformError(str(exc) or exc.__class__.__name__) from exc

    logger.debug("Rewrote %d text node(s) for %s", replaced, target_origin)
    return SubstitutionResult(html=output, title=title)


def substitute(
    html: Union[str, bytes], target_origin: str, pattern: str, replacement: str
) -> SubstitutionResult:
    """Four-argument form of :func:`rewrite_document`."""
    return rewrite_document(html, target_origin, SubstitutionRule(pattern, replacement))
