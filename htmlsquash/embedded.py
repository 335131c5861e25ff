"""Minify JavaScript and CSS embedded in a document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

import rcssmin
import rjsmin
import sass
from bs4 import BeautifulSoup
from bs4.element import Tag

from .dom import in_foreign_content, replace_children_text, text_content
from .jssyntax import JavaScriptSyntaxError, check_javascript, escape_inline_script
from .options import CssEngineOptions, JavaScriptEngineOptions

# Event handler content attributes valid on any HTML element.
GLOBAL_EVENT_HANDLERS = frozenset(
    "on" + name
    for name in """abort cancel canplay canplaythrough change click close
    contextmenu cuechange dblclick drag dragend dragenter dragexit dragleave
    dragover dragstart drop durationchange emptied ended input invalid keydown
    keypress keyup loadeddata loadedmetadata loadend loadstart mousedown
    mouseenter mouseleave mousemove mouseout mouseover mouseup wheel pause play
    playing progress ratechange reset seeked seeking select show stalled submit
    suspend timeupdate toggle volumechange waiting cut copy paste blur error
    focus load resize scroll""".split()
)

# Window event handlers, only meaningful on body and frameset.
WINDOW_EVENT_HANDLERS = frozenset(
    "on" + name
    for name in """afterprint beforeprint beforeunload hashchange languagechange
    message offline online pagehide pageshow popstate rejectionhandled storage
    unhandledrejection unload""".split()
)
WINDOW_EVENT_ELEMENTS = frozenset(["body", "frameset"])


def is_event_handler(element: Tag, attr_name: str) -> bool:
    if attr_name in GLOBAL_EVENT_HANDLERS:
        return True
    return element.name in WINDOW_EVENT_ELEMENTS and attr_name in WINDOW_EVENT_HANDLERS


def _has_type(element: Tag, expected: str) -> bool:
    kind = element.get("type")
    return kind is None or kind.lower() == expected


def _strip_statement_end(js: str) -> str:
    return js[:-1] if js.endswith(";") else js


@dataclass
class EmbeddedCodeMinifier:
    """Runs the JavaScript and CSS engines and memoizes their results.

    The caches live as long as the instance, so reusing one minifier across
    many documents avoids minifying the same handler or style twice. It is not
    safe to share an instance between threads.
    """

    js_options: JavaScriptEngineOptions = field(default_factory=JavaScriptEngineOptions)
    css_options: CssEngineOptions = field(default_factory=CssEngineOptions)
    js_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    script_cache: Dict[str, str] = field(default_factory=dict, repr=False)
    css_cache: Dict[str, str] = field(default_factory=dict, repr=False)

    def minify_js(self, content: str) -> str:
        """Minify a JavaScript statement list such as an event handler body."""
        cached = self.js_cache.get(content)
        if cached is None:
            cached = _strip_statement_end(self._jsmin(content))
            self.js_cache[content] = cached
        return cached

    def minify_script(self, content: str) -> str:
        """Minify the body of a script element."""
        cached = self.script_cache.get(content)
        if cached is None:
            cached = escape_inline_script(_strip_statement_end(self._jsmin(content)))
            self.script_cache[content] = cached
        return cached

    def minify_css(self, content: str) -> str:
        cached = self.css_cache.get(content)
        if cached is None:
            # rcssmin never rejects input, libsass does.
            sass.compile(string=content)
            cached = rcssmin.cssmin(content, **self.css_options.model_dump()).strip()
            self.css_cache[content] = cached
        return cached

    def minify_declarations(self, selector: str, declarations: str) -> str:
        """Minify the body of a style attribute by wrapping it in a rule."""
        css = self.minify_css(f"{selector}{{{declarations}}}")
        prefix = f"{selector}{{"
        if css.startswith(prefix) and css.endswith("}"):
            return css[len(prefix):-1]
        raise ValueError(f"unexpected CSS engine output for {selector!r} style: {css!r}")

    def _jsmin(self, content: str) -> str:
        check_javascript(content)
        return rjsmin.jsmin(content, **self.js_options.model_dump()).strip()

    def compress_javascript(self, soup: BeautifulSoup) -> None:
        for node in soup.find_all("script"):
            if in_foreign_content(node) or not _has_type(node, "text/javascript"):
                continue
            replace_children_text(node, self.minify_script(text_content(node)))

        for element in soup.find_all(True):
            if in_foreign_content(element):
                continue
            for name, value in list(element.attrs.items()):
                if is_event_handler(element, name):
                    element[name] = self.minify_js(value)

    def compress_css(self, soup: BeautifulSoup) -> None:
        for node in soup.find_all("style"):
            if in_foreign_content(node) or not _has_type(node, "text/css"):
                continue
            replace_children_text(node, self.minify_css(text_content(node)))

        for element in soup.find_all(style=True):
            if in_foreign_content(element):
                continue
            element["style"] = self.minify_declarations(element.name, element["style"])


__all__ = [
    "EmbeddedCodeMinifier",
    "GLOBAL_EVENT_HANDLERS",
    "JavaScriptSyntaxError",
    "WINDOW_EVENT_HANDLERS",
    "is_event_handler",
]
