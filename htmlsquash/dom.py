"""Document model helpers over Beautiful Soup's html5lib tree."""

from __future__ import annotations

from typing import Iterator, Optional

from bs4 import BeautifulSoup
from bs4.element import (
    Comment,
    Doctype,
    NavigableString,
    PageElement,
    PreformattedString,
    ProcessingInstruction,
    Tag,
)

HTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"
XLINK_NAMESPACE = "http://www.w3.org/1999/xlink"

HTML_WHITESPACE = "\t\n\f\r "

# Element kinds
VOID_ELEMENTS = frozenset(
    """area base br col embed hr img input keygen link meta param source
    track wbr""".split()
)
RAW_TEXT_ELEMENTS = frozenset(["script", "style"])
ESCAPABLE_RAW_TEXT_ELEMENTS = frozenset(["textarea", "title"])
FOREIGN_ELEMENTS = frozenset(["math", "svg"])

# If an element can be phrasing content, it is listed here.
PHRASING_CONTENT = frozenset(
    """a abbr area audio b bdi bdo br button canvas cite code data datalist
    del dfn em embed i iframe img input ins kbd keygen label link map mark
    math meta meter noscript object output picture progress q ruby s samp
    script select slot small span strong sub sup svg template textarea time
    u var video wbr""".split()
)

# Elements whose first line feed is dropped by the parser.
NEWLINE_ELEMENTS = frozenset(["pre", "textarea", "listing"])

_LEGACY_COMPAT = 'html SYSTEM "about:legacy-compat"'


def parse(content: str) -> BeautifulSoup:
    """Parse a complete document with the HTML5 tree construction rules."""
    return BeautifulSoup(content, "html5lib", multi_valued_attributes=None)


def is_html5_document(soup: BeautifulSoup) -> bool:
    for node in soup.contents:
        if isinstance(node, Doctype):
            return str(node) in ("html", _LEGACY_COMPAT)
    return False


def is_element(node: Optional[PageElement]) -> bool:
    return isinstance(node, Tag)


def is_text(node: Optional[PageElement]) -> bool:
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


def is_comment(node: Optional[PageElement]) -> bool:
    return isinstance(node, Comment)


def is_processing_instruction(node: Optional[PageElement]) -> bool:
    return isinstance(node, ProcessingInstruction)


def is_void(node: PageElement) -> bool:
    return node.name in VOID_ELEMENTS


def is_raw_text(node: PageElement) -> bool:
    return node.name in RAW_TEXT_ELEMENTS


def is_escapable_raw_text(node: PageElement) -> bool:
    return node.name in ESCAPABLE_RAW_TEXT_ELEMENTS


def is_foreign(node: Optional[PageElement]) -> bool:
    return node is not None and node.name in FOREIGN_ELEMENTS


def is_normal(node: PageElement) -> bool:
    return not (
        is_void(node)
        or is_raw_text(node)
        or is_escapable_raw_text(node)
        or is_foreign(node)
    )


def is_phrasing_content(node: Optional[PageElement]) -> bool:
    return node is not None and node.name in PHRASING_CONTENT


def is_whitespace(text: str) -> bool:
    return all(char in HTML_WHITESPACE for char in text)


def is_inter_element_whitespace(node: Optional[PageElement]) -> bool:
    return is_text(node) and is_whitespace(node)


def starts_with_whitespace(node: PageElement) -> bool:
    return bool(node) and node[0] in HTML_WHITESPACE


def is_content_node(node: PageElement) -> bool:
    """Inter-element whitespace, comments and processing instructions are
    ignored when deciding what an element contains."""
    return not (
        is_comment(node)
        or is_processing_instruction(node)
        or is_inter_element_whitespace(node)
    )


def previous_element(node: PageElement) -> Optional[Tag]:
    for sibling in node.previous_siblings:
        if isinstance(sibling, Tag):
            return sibling
    return None


def next_element(node: PageElement) -> Optional[Tag]:
    for sibling in node.next_siblings:
        if isinstance(sibling, Tag):
            return sibling
    return None


def previous_content_sibling(node: PageElement) -> Optional[PageElement]:
    for sibling in node.previous_siblings:
        if is_content_node(sibling):
            return sibling
    return None


def next_content_sibling(node: PageElement) -> Optional[PageElement]:
    for sibling in node.next_siblings:
        if is_content_node(sibling):
            return sibling
    return None


def first_content_child(node: Tag) -> Optional[PageElement]:
    for child in node.contents:
        if is_content_node(child):
            return child
    return None


def ancestors_and_self(node: PageElement) -> Iterator[PageElement]:
    current: Optional[PageElement] = node
    while current is not None:
        yield current
        current = current.parent


def in_foreign_content(node: PageElement) -> bool:
    """True when the node is, or sits inside, a math or svg element."""
    return any(is_foreign(item) for item in ancestors_and_self(node))


def text_content(tag: Tag) -> str:
    return "".join(str(child) for child in tag.contents if is_text(child))


def set_text(node: NavigableString, content: str) -> NavigableString:
    """Replace a text node with one holding ``content`` and return it."""
    if content == node:
        return node
    replacement = NavigableString(content)
    node.replace_with(replacement)
    return replacement


def replace_children_text(tag: Tag, content: str) -> None:
    tag.clear()
    tag.append(NavigableString(content))


def unlink(node: PageElement) -> None:
    node.extract()


__all__ = [
    "HTML_NAMESPACE",
    "HTML_WHITESPACE",
    "NEWLINE_ELEMENTS",
    "XLINK_NAMESPACE",
    "XMLNS_NAMESPACE",
    "XML_NAMESPACE",
    "first_content_child",
    "in_foreign_content",
    "is_comment",
    "is_content_node",
    "is_element",
    "is_foreign",
    "is_html5_document",
    "is_inter_element_whitespace",
    "is_normal",
    "is_phrasing_content",
    "is_text",
    "is_void",
    "next_content_sibling",
    "next_element",
    "parse",
    "previous_content_sibling",
    "previous_element",
    "replace_children_text",
    "set_text",
    "starts_with_whitespace",
    "text_content",
    "unlink",
]
