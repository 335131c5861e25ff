"""Decide which start and end tags may be left out of the output.

The rules follow the "Optional tags" section of the HTML syntax. Each rule is
looked up by element name; names without a rule never have their tags
omitted. The functions here only read the tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional

from bs4.element import PageElement, Tag

from .dom import (
    HTML_NAMESPACE,
    first_content_child,
    is_comment,
    is_element,
    is_foreign,
    is_inter_element_whitespace,
    is_phrasing_content,
    is_text,
    is_void,
    next_content_sibling,
    previous_content_sibling,
    starts_with_whitespace,
)

Rule = Callable[["TagOmitter", Tag], bool]

BODY_START_KEEPERS = frozenset(["meta", "link", "script", "style", "template"])

P_CLOSERS = frozenset(
    """address article aside blockquote details div dl fieldset figcaption
    figure footer form h1 h2 h3 h4 h5 h6 header hgroup hr main menu nav ol p
    pre section table ul""".split()
)
P_END_KEEPING_PARENTS = frozenset(["a", "audio", "del", "ins", "map", "noscript", "video"])


def _is_named(node: Optional[PageElement], names: FrozenSet[str]) -> bool:
    return is_element(node) and node.name in names


def next_sibling_is_one_of(node: Tag, names: FrozenSet[str]) -> bool:
    return _is_named(next_content_sibling(node), names)


def next_sibling_is_none_or_one_of(node: Tag, names: FrozenSet[str]) -> bool:
    following = next_content_sibling(node)
    return following is None or _is_named(following, names)


def has_more_content(node: Tag) -> bool:
    return next_content_sibling(node) is not None


def _not_followed_by_comment(node: Tag) -> bool:
    return not is_comment(node.next_sibling)


def _not_followed_by_space_or_comment(node: Tag) -> bool:
    following = node.next_sibling
    if following is None:
        return True
    if is_text(following):
        return not starts_with_whitespace(following)
    return not is_comment(following)


def followed_by_kept_space(node: Tag) -> bool:
    """Whitespace after an element inside phrasing content survives compression.
    Without the end tag it would be reparsed as the element's own trailing text.
    """
    return is_inter_element_whitespace(node.next_sibling) and is_phrasing_content(node.parent)


def _none_or(*names: str) -> Rule:
    allowed = frozenset(names)
    return lambda omitter, node: next_sibling_is_none_or_one_of(node, allowed)


def _one_of(*names: str) -> Rule:
    allowed = frozenset(names)
    return lambda omitter, node: next_sibling_is_one_of(node, allowed)


# Start tags


def _html_start(omitter: TagOmitter, node: Tag) -> bool:
    return not node.contents or not is_comment(node.contents[0])


def _head_start(omitter: TagOmitter, node: Tag) -> bool:
    return not node.contents or is_element(node.contents[0])


def _body_start(omitter: TagOmitter, node: Tag) -> bool:
    if not node.contents:
        return True
    first = node.contents[0]
    if is_text(first):
        return not starts_with_whitespace(first)
    if is_comment(first):
        return False
    return not _is_named(first, BODY_START_KEEPERS)


def _first_child_then_previous(child_name: str, previous_names: FrozenSet[str]) -> Rule:
    # Only possible when the element starts with the given child and does not
    # follow a sibling whose end tag was dropped (the parser would merge them).
    def rule(omitter: TagOmitter, node: Tag) -> bool:
        first = first_content_child(node)
        if not is_element(first) or first.name != child_name:
            return False
        prev_node = previous_content_sibling(node)
        return not (_is_named(prev_node, previous_names) and omitter.can_omit_end_tag(prev_node))

    return rule


START_TAG_RULES: Dict[str, Rule] = {
    "html": _html_start,
    "head": _head_start,
    "body": _body_start,
    "colgroup": _first_child_then_previous("col", frozenset(["colgroup"])),
    "tbody": _first_child_then_previous("tr", frozenset(["tbody", "thead", "tfoot"])),
}


# End tags


def _p_end(omitter: TagOmitter, node: Tag) -> bool:
    if next_sibling_is_one_of(node, P_CLOSERS):
        return True
    parent = node.parent
    if is_foreign(parent) or parent.namespace not in (None, HTML_NAMESPACE):
        return False
    return not has_more_content(node) and parent.name not in P_END_KEEPING_PARENTS


END_TAG_RULES: Dict[str, Rule] = {
    "html": lambda omitter, node: _not_followed_by_comment(node),
    "body": lambda omitter, node: _not_followed_by_comment(node),
    "head": lambda omitter, node: _not_followed_by_space_or_comment(node),
    "colgroup": lambda omitter, node: _not_followed_by_space_or_comment(node),
    "li": _none_or("li"),
    "dt": _one_of("dt", "dd"),
    "dd": _none_or("dt", "dd"),
    "p": _p_end,
    "rb": _none_or("rb", "rt", "rtc", "rp"),
    "rt": _none_or("rb", "rt", "rtc", "rp"),
    "rp": _none_or("rb", "rt", "rtc", "rp"),
    "rtc": _none_or("rb", "rtc", "rp"),
    "optgroup": _none_or("optgroup"),
    "option": _none_or("option", "optgroup"),
    "thead": _one_of("tbody", "tfoot"),
    "tbody": _none_or("tbody", "tfoot"),
    "tfoot": lambda omitter, node: not has_more_content(node),
    "tr": _none_or("tr"),
    "td": _none_or("td", "th"),
    "th": _none_or("td", "th"),
}


@dataclass(frozen=True)
class TagOmitter:
    """Answers tag omission questions for one set of options."""

    omit_tags: bool = True

    def self_closing(self, node: Tag) -> bool:
        # Foreign elements are only written as <svg/> when end tags may be
        # omitted at all.
        return self.omit_tags and is_foreign(node) and not node.contents

    def can_omit_start_tag(self, node: Tag) -> bool:
        if not self.omit_tags or node.attrs:
            return False
        rule = START_TAG_RULES.get(node.name)
        return rule is not None and rule(self, node)

    def can_omit_end_tag(self, node: Tag) -> bool:
        if is_void(node) or self.self_closing(node):
            return True
        if not self.omit_tags:
            return False
        if node.parent is not None and node.parent.name == "noscript":
            return False
        if followed_by_kept_space(node):
            return False
        rule = END_TAG_RULES.get(node.name)
        return rule is not None and rule(self, node)


__all__ = [
    "END_TAG_RULES",
    "START_TAG_RULES",
    "TagOmitter",
    "followed_by_kept_space",
    "has_more_content",
    "next_sibling_is_none_or_one_of",
    "next_sibling_is_one_of",
]
