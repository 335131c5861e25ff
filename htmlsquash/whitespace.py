"""Collapse whitespace that cannot change how a document renders."""

from __future__ import annotations

import re

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement

from .dom import (
    HTML_WHITESPACE,
    NEWLINE_ELEMENTS,
    is_element,
    is_inter_element_whitespace,
    is_normal,
    is_phrasing_content,
    is_text,
    next_element,
    previous_element,
    set_text,
    unlink,
)

_WHITESPACE_RUN_RE = re.compile(r"[ \t\n\r\f]+")


def compress_spaces(soup: BeautifulSoup) -> None:
    for child in list(soup.contents):
        compress_node(child)


def compress_node(node: PageElement) -> None:
    if is_text(node):
        _compress_text(node)
    elif not is_element(node) or node.name in NEWLINE_ELEMENTS:
        # The parser already consumed the optional leading line feed of pre
        # and textarea; what remains is content.
        return
    elif is_normal(node) or node.name == "title":
        for child in list(node.contents):
            compress_node(child)


def _compress_text(node: NavigableString) -> None:
    if text_node_removable(node):
        unlink(node)
        return

    content = _WHITESPACE_RUN_RE.sub(" ", node)
    if trim_left(node):
        content = content.lstrip(HTML_WHITESPACE)
    if trim_right(node):
        content = content.rstrip(HTML_WHITESPACE)
    set_text(node, content)


def text_node_removable(node: NavigableString) -> bool:
    """Be conservative: an element that can be phrasing content is assumed to be."""
    if not is_inter_element_whitespace(node):
        return False
    if is_phrasing_content(node.parent):
        return False

    prev_elm = previous_element(node)
    next_elm = next_element(node)
    return (
        prev_elm is None
        or not is_phrasing_content(prev_elm)
        or next_elm is None
        or not is_phrasing_content(next_elm)
    )


def trim_left(node: NavigableString) -> bool:
    prev_elm = previous_element(node)
    if prev_elm is None:
        return not is_phrasing_content(node.parent)
    return prev_elm.name == "br"


def trim_right(node: NavigableString) -> bool:
    next_elm = next_element(node)
    if next_elm is None:
        return not is_phrasing_content(node.parent)
    return next_elm.name == "br"


__all__ = [
    "compress_node",
    "compress_spaces",
    "text_node_removable",
    "trim_left",
    "trim_right",
]
