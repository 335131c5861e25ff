"""Serialize a document tree as compact HTML."""

from __future__ import annotations

import re
from typing import List

from bs4.dammit import EntitySubstitution
from bs4.element import Doctype, NavigableString, PageElement, Tag
from bs4.formatter import HTMLFormatter

from .dom import (
    HTML_NAMESPACE,
    NEWLINE_ELEMENTS,
    XLINK_NAMESPACE,
    XML_NAMESPACE,
    XMLNS_NAMESPACE,
    is_text,
)
from .omission import TagOmitter

# Text inside these HTML elements is written without escaping.
RAW_TEXT_CONTAINERS = frozenset(
    ["script", "style", "xmp", "iframe", "noembed", "noframes", "plaintext"]
)

TEXT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    cdata_containing_tags=set(),
)

_NEEDS_QUOTES_RE = re.compile(r"[\t\n\f\r \"'`=<>]")


def is_raw_text_container(node: PageElement | None) -> bool:
    """True for HTML raw text elements. An svg or math ``style`` is not one."""
    return (
        node is not None
        and node.name in RAW_TEXT_CONTAINERS
        and node.namespace in (None, HTML_NAMESPACE)
    )


def qualified_attribute_name(name: str) -> str:
    namespace = getattr(name, "namespace", None)
    if namespace is None:
        return str(name)

    local_name = name.name or name.prefix
    if namespace == XML_NAMESPACE:
        return f"xml:{local_name}"
    if namespace == XMLNS_NAMESPACE:
        return "xmlns" if local_name == "xmlns" else f"xmlns:{local_name}"
    if namespace == XLINK_NAMESPACE:
        return f"xlink:{local_name}"
    raise RuntimeError(f"Unsupported attribute namespace {namespace!r} for {name!r}")


def serialize_attribute(name: str, value: str) -> tuple[str, bool]:
    """Return the shortest form of one attribute and whether it is unquoted."""
    # Escape every ampersand so no value can look like a character reference.
    value = value.replace("&", "&amp;")
    if not value:
        return f" {name}", False
    if not _NEEDS_QUOTES_RE.search(value):
        return f" {name}={value}", True
    if '"' not in value:
        return f' {name}="{value}"', False
    if "'" not in value:
        return f" {name}='{value}'", False
    # Contains both ' and ".
    return ' {}="{}"'.format(name, value.replace('"', "&#34;")), False


class Serializer:
    """Writes a tree in one depth-first pass, dropping optional tags."""

    def __init__(self, omitter: TagOmitter):
        self.omitter = omitter

    def serialize(self, nodes: List[PageElement]) -> str:
        parts: List[str] = []
        for node in nodes:
            self._write(node, parts)
        return "".join(parts)

    def _write(self, node: PageElement, parts: List[str]) -> None:
        if isinstance(node, Doctype):
            parts.append(f"<!DOCTYPE {node}>")
            return
        if is_text(node) and is_raw_text_container(node.parent):
            parts.append(str(node))
            return
        if isinstance(node, NavigableString):
            parts.append(node.output_ready(TEXT_FORMATTER))
            return

        self._write_element(node, parts)

    def _write_element(self, node: Tag, parts: List[str]) -> None:
        start_tag_written = not self.omitter.can_omit_start_tag(node)
        if start_tag_written:
            parts.append(f"<{node.name}")
            last_attr_unquoted = False
            for name, value in node.attrs.items():
                attr, last_attr_unquoted = serialize_attribute(
                    qualified_attribute_name(name), value or ""
                )
                parts.append(attr)

            if self.omitter.self_closing(node):
                if last_attr_unquoted:
                    parts.append(" ")
                parts.append("/")
            parts.append(">")

            # The parser drops a line feed right after these start tags, so a
            # leading line feed in the content has to be written twice.
            if node.name in NEWLINE_ELEMENTS and node.contents:
                first_child = node.contents[0]
                if is_text(first_child) and first_child.startswith("\n"):
                    parts.append("\n")

        for child in node.contents:
            self._write(child, parts)

        if not self.omitter.can_omit_end_tag(node):
            parts.append(f"</{node.name}>")


__all__ = [
    "RAW_TEXT_CONTAINERS",
    "Serializer",
    "is_raw_text_container",
    "qualified_attribute_name",
    "serialize_attribute",
]
