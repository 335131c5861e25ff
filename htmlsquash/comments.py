"""Remove comments that do not need to survive minification."""

from __future__ import annotations

from typing import Pattern

from bs4 import BeautifulSoup

from .dom import is_comment, is_text, set_text, unlink
from .options import DEFAULT_LOUD_COMMENTS

CONDITIONAL_COMMENT_PREFIX = "[if "


def preserve_comment(content: str, loud_comments: Pattern[str] = DEFAULT_LOUD_COMMENTS) -> bool:
    if content.startswith(CONDITIONAL_COMMENT_PREFIX):
        return True
    return loud_comments.search(content) is not None


def remove_comments(
    soup: BeautifulSoup, loud_comments: Pattern[str] = DEFAULT_LOUD_COMMENTS
) -> None:
    """Unlink every comment that is not preserved.

    Text nodes left next to each other by a removal are merged so that later
    stages see one contiguous run of text.
    """
    for node in soup.find_all(string=is_comment):
        if preserve_comment(str(node), loud_comments):
            continue

        prev_node = node.previous_sibling
        next_node = node.next_sibling
        unlink(node)
        if is_text(prev_node) and is_text(next_node):
            set_text(prev_node, prev_node + next_node)
            unlink(next_node)


__all__ = ["CONDITIONAL_COMMENT_PREFIX", "preserve_comment", "remove_comments"]
