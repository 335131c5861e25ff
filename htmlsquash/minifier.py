"""Minify HTML, JavaScript, and CSS with a single set of options.

Example::

    html = '''<!DOCTYPE html>
    <html>
      <head>
        <!-- Set the title -->
        <title>My fancy title!</title>
      </head>
      <body>
        <p>Two</p>
        <p>paragraphs.</p>
      </body>
    </html>
    '''
    minify_html(html)
    # '<!DOCTYPE html><title>My fancy title!</title><p>Two<p>paragraphs.'
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .comments import remove_comments
from .dom import is_html5_document, parse
from .embedded import EmbeddedCodeMinifier
from .omission import TagOmitter
from .options import MinifyOptions, build_options
from .serialize import Serializer
from .whitespace import compress_spaces


class Squasher:
    """A reusable minification pipeline.

    Minified scripts and style sheets are cached per instance, so reusing one
    ``Squasher`` for many documents skips repeated work when the same inline
    handler or style shows up again. Instances are not thread safe.
    """

    def __init__(
        self, options: Optional[MinifyOptions | Mapping[str, Any]] = None, **overrides: Any
    ):
        self.options = build_options(options, **overrides)
        self.code_minifier = EmbeddedCodeMinifier(
            js_options=self.options.js_options,
            css_options=self.options.css_options,
        )
        self.serializer = Serializer(TagOmitter(omit_tags=self.options.omit_tags))

    def minify_html(self, content: str) -> str:
        """Minify HTML and the JavaScript and CSS inside it.

        Content that is not a standards mode document (one starting with
        ``<!DOCTYPE html>``) is returned unchanged.
        """
        soup = parse(content)
        if not is_html5_document(soup):
            return content

        options = self.options
        if options.remove_comments:
            remove_comments(soup, options.loud_comments)
        if options.minify_javascript:
            self.code_minifier.compress_javascript(soup)
        if options.minify_css:
            self.code_minifier.compress_css(soup)
        if options.compress_spaces:
            compress_spaces(soup)
        return self.serializer.serialize(list(soup.contents))

    def minify_css(self, content: str) -> str:
        return self.code_minifier.minify_css(content)

    def minify_js(self, content: str) -> str:
        return self.code_minifier.minify_js(content)


def minify_html(
    content: str, options: Optional[MinifyOptions | Mapping[str, Any]] = None, **overrides: Any
) -> str:
    return Squasher(options, **overrides).minify_html(content)


def minify_css(
    content: str, options: Optional[MinifyOptions | Mapping[str, Any]] = None, **overrides: Any
) -> str:
    return Squasher(options, **overrides).minify_css(content)


def minify_js(
    content: str, options: Optional[MinifyOptions | Mapping[str, Any]] = None, **overrides: Any
) -> str:
    return Squasher(options, **overrides).minify_js(content)


__all__ = ["Squasher", "minify_css", "minify_html", "minify_js"]
