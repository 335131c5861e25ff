"""Lexical checks for JavaScript embedded in a document.

``rjsmin`` strips whitespace and comments without parsing, so it minifies
broken code as readily as working code. ``check_javascript`` tokenizes the
source first and rejects unterminated literals and unbalanced brackets.
``escape_inline_script`` reuses the tokens to keep minified code from closing
or confusing the ``<script>`` element it is written into.
"""

from __future__ import annotations

import re
from typing import List

import ply.lex as lex

# After these names a "/" starts a regular expression, not a division.
KEYWORDS_BEFORE_EXPRESSION = frozenset(
    "await case delete do else in instanceof new return throw typeof void yield".split()
)

_OPENERS = {")": "(", "]": "[", "}": "{"}
_SUBSTITUTION = "${"

_NAME_START = r"A-Za-z_$\u0080-\U0010ffff"


class JavaScriptSyntaxError(ValueError):
    """Raised when embedded JavaScript is structurally broken."""

    def __init__(self, message: str, lineno: int):
        super().__init__(f"line {lineno}: {message}")
        self.lineno = lineno


class _JavaScriptRules:
    states = (("template", "exclusive"),)

    tokens = (
        "COMMENT",
        "UNTERMINATED_COMMENT",
        "STRING",
        "UNTERMINATED_STRING",
        "TEMPLATE_START",
        "REGEX",
        "NAME",
        "NUMBER",
        "OPEN",
        "CLOSE",
        "PUNCT",
        "CHUNK",
        "SUBSTITUTION",
        "TEMPLATE_END",
    )

    t_ignore = " \t\r\f\v\u00a0\ufeff\u2028\u2029"
    t_template_ignore = ""

    @lex.TOKEN(r"\n+")
    def t_newline(self, t):
        t.lexer.lineno += len(t.value)

    @lex.TOKEN(r"/\*[\s\S]*?\*/|//[^\n]*")
    def t_COMMENT(self, t):
        t.lexer.lineno += t.value.count("\n")

    @lex.TOKEN(r"/\*")
    def t_UNTERMINATED_COMMENT(self, t):
        raise JavaScriptSyntaxError("unterminated comment", t.lineno)

    @lex.TOKEN(r"\"(?:[^\"\\\n]|\\[\s\S])*\"|'(?:[^'\\\n]|\\[\s\S])*'")
    def t_STRING(self, t):
        t.lexer.lineno += t.value.count("\n")
        t.lexer.regex_allowed = False
        return t

    @lex.TOKEN(r"[\"']")
    def t_UNTERMINATED_STRING(self, t):
        raise JavaScriptSyntaxError("unterminated string literal", t.lineno)

    @lex.TOKEN(r"`")
    def t_TEMPLATE_START(self, t):
        t.lexer.push_state("template")
        return t

    @lex.TOKEN(r"/(?:[^/\\\[\n]|\\.|\[(?:[^\]\\\n]|\\.)*\])+/[A-Za-z]*")
    def t_REGEX(self, t):
        if not t.lexer.regex_allowed:
            # Division: take the slash alone and lex the rest again.
            t.type = "PUNCT"
            t.value = "/"
            t.lexer.lexpos = t.lexpos + 1
        t.lexer.regex_allowed = t.type == "PUNCT"
        return t

    @lex.TOKEN(rf"\#?[{_NAME_START}][\w{_NAME_START}]*")
    def t_NAME(self, t):
        t.lexer.regex_allowed = t.value in KEYWORDS_BEFORE_EXPRESSION
        return t

    @lex.TOKEN(r"\.?\d[\w.]*")
    def t_NUMBER(self, t):
        t.lexer.regex_allowed = False
        return t

    @lex.TOKEN(r"[(\[{]")
    def t_OPEN(self, t):
        t.lexer.brackets.append((t.value, t.lineno))
        t.lexer.regex_allowed = True
        return t

    @lex.TOKEN(r"[)\]}]")
    def t_CLOSE(self, t):
        brackets = t.lexer.brackets
        if not brackets:
            raise JavaScriptSyntaxError(f"unexpected {t.value!r}", t.lineno)
        opener, lineno = brackets.pop()
        if opener == _SUBSTITUTION and t.value == "}":
            t.lexer.pop_state()
        elif _OPENERS[t.value] != opener:
            raise JavaScriptSyntaxError(
                f"{t.value!r} does not close {opener!r} from line {lineno}", t.lineno
            )
        t.lexer.regex_allowed = t.value == "}"
        return t

    @lex.TOKEN(r"[-+*/%&|^!<>=~?:;,.@]")
    def t_PUNCT(self, t):
        t.lexer.regex_allowed = True
        return t

    def t_error(self, t):
        raise JavaScriptSyntaxError(f"unexpected character {t.value[0]!r}", t.lineno)

    @lex.TOKEN(r"(?:[^`\\$]|\\[\s\S]|\$(?!\{))+")
    def t_template_CHUNK(self, t):
        t.lexer.lineno += t.value.count("\n")
        return t

    @lex.TOKEN(r"\$\{")
    def t_template_SUBSTITUTION(self, t):
        t.lexer.brackets.append((_SUBSTITUTION, t.lineno))
        t.lexer.push_state("INITIAL")
        t.lexer.regex_allowed = True
        return t

    @lex.TOKEN(r"`")
    def t_template_TEMPLATE_END(self, t):
        t.lexer.pop_state()
        t.lexer.regex_allowed = False
        return t

    def t_template_error(self, t):
        raise JavaScriptSyntaxError("unterminated template literal", t.lineno)


_LEXER = lex.lex(module=_JavaScriptRules(), reflags=0)


def tokenize(source: str) -> List[lex.LexToken]:
    """Return the significant tokens of ``source``.

    Raises :class:`JavaScriptSyntaxError` for unterminated comments, strings
    and template literals, unexpected characters, and brackets that do not
    pair up.
    """
    lexer = _LEXER.clone()
    lexer.lexstatestack = []
    lexer.begin("INITIAL")
    lexer.lineno = 1
    lexer.brackets = []
    lexer.regex_allowed = True
    lexer.input(source)

    found = list(iter(lexer.token, None))
    if lexer.current_state() == "template":
        raise JavaScriptSyntaxError("unterminated template literal", lexer.lineno)
    if lexer.brackets:
        opener, lineno = lexer.brackets[-1]
        raise JavaScriptSyntaxError(f"{opener!r} is never closed", lineno)
    return found


def check_javascript(source: str) -> None:
    tokenize(source)


# "<!--", "-->" and "</script" switch the HTML tokenizer into states that can
# end a script element early. Each match is the single character to neutralize.
_INLINE_HAZARD_RE = re.compile(r"(?<=<)!(?=--)|(?<=<)/(?=script)|(?<=--)>", re.IGNORECASE)
_LITERAL_ESCAPES = {"!": "\\x21", "/": "\\/", ">": "\\x3e"}
_LITERAL_TOKENS = frozenset(["STRING", "REGEX", "CHUNK"])


def escape_inline_script(js: str) -> str:
    """Rewrite ``js`` so it cannot end or comment out its script element.

    Inside string, template and regular expression literals the character is
    escaped; elsewhere a space is inserted in front of it.
    """
    if not _INLINE_HAZARD_RE.search(js):
        return js

    literals = [
        (tok.lexpos, tok.lexpos + len(tok.value))
        for tok in tokenize(js)
        if tok.type in _LITERAL_TOKENS
    ]

    def neutralize(match: re.Match) -> str:
        pos = match.start()
        if any(start <= pos < end for start, end in literals):
            return _LITERAL_ESCAPES[match.group()]
        return " " + match.group()

    return _INLINE_HAZARD_RE.sub(neutralize, js)


__all__ = [
    "JavaScriptSyntaxError",
    "check_javascript",
    "escape_inline_script",
    "tokenize",
]
