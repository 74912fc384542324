"""Lexer for ladle templates.

Two passes share this module:

1. ``tokenize(source)`` splits a template into DATA, OUTPUT (``{{ ... }}``)
   and TAG (``{% ... %}``) tokens. ``{% raw %}...{% endraw %}`` bodies come
   back as DATA. A dash inside a delimiter (``{{-``, ``-%}``) trims the
   whitespace of the neighbouring DATA token.
2. ``tokenize_arguments(markup)`` splits the inside of a tag or output into
   argument tokens. A whole value is one token: ``'a b'``, ``-1.5``,
   ``(1..n)``, ``page.tags[0]``. Identifiers stay NAME tokens so tag parsers
   can tell ``key:`` apart from ``page.key:``.

"""

from __future__ import annotations

import re

from ladle._types import Token, TokenType
from ladle.environment.exceptions import ErrorCode, TemplateSyntaxError

_MARKUP_RE = re.compile(
    r"\{%(?P<raw_open>-?)\s*raw\s*-?%\}(?P<raw>.*?)\{%-?\s*endraw\s*(?P<raw_close>-?)%\}"
    r"|\{\{(?P<output_open>-?)(?P<output>.*?)(?P<output_close>-?)\}\}"
    r"|\{%(?P<tag_open>-?)(?P<tag>.*?)(?P<tag_close>-?)%\}",
    re.DOTALL,
)

_ARGUMENT_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<string>'[^']*'|"[^"]*")
    | (?P<range>\(\s*[^()]*?\.\.[^()]*?\))
    | (?P<number>-?\d+(?:\.\d+)?(?![\w.]))
    | (?P<variable>[A-Za-z_][\w-]*\??(?:\.[A-Za-z_][\w-]*\??|\[[^\]]*\])+)
    | (?P<name>[A-Za-z_][\w-]*\??)
    | (?P<symbol>==|!=|<>|<=|>=|<|>|:|,|\||=)
    """,
    re.VERBOSE,
)

_ARGUMENT_TYPES = {
    "string": TokenType.STRING,
    "range": TokenType.RANGE,
    "number": TokenType.NUMBER,
    "variable": TokenType.VARIABLE,
    "name": TokenType.NAME,
    "symbol": TokenType.SYMBOL,
}


def _position(source: str, offset: int) -> tuple[int, int]:
    """1-based line and 0-based column of ``offset``."""
    lineno = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return lineno, offset - line_start


def _check_data(
    source: str, start: int, end: int, name: str | None
) -> None:
    for opener in ("{{", "{%"):
        index = source.find(opener, start, end)
        if index != -1:
            lineno, col = _position(source, index)
            closer = "}}" if opener == "{{" else "%}"
            raise TemplateSyntaxError(
                f"Unclosed '{opener}': expected '{closer}'",
                lineno,
                name=name,
                source=source,
                col_offset=col,
                code=ErrorCode.UNCLOSED_TAG,
            )


def tokenize(source: str, name: str | None = None) -> list[Token]:
    """Split template source into DATA, OUTPUT and TAG tokens.

    Raises:
        TemplateSyntaxError: If a ``{{`` or ``{%`` is never closed.
    """
    tokens: list[Token] = []
    pos = 0
    trim_next = False

    def push_data(text: str, offset: int, trim_right: bool) -> None:
        if trim_next:
            text = text.lstrip()
        if trim_right:
            text = text.rstrip()
        if text:
            lineno, col = _position(source, offset)
            tokens.append(Token(TokenType.DATA, text, lineno, col))

    for match in _MARKUP_RE.finditer(source):
        _check_data(source, pos, match.start(), name)
        if match.group("raw") is not None:
            kind = "raw"
        elif match.group("output") is not None:
            kind = "output"
        else:
            kind = "tag"

        push_data(source[pos : match.start()], pos, bool(match.group(f"{kind}_open")))
        trim_next = bool(match.group(f"{kind}_close"))

        lineno, col = _position(source, match.start())
        if kind == "raw":
            tokens.append(Token(TokenType.DATA, match.group("raw"), lineno, col))
        elif kind == "output":
            tokens.append(Token(TokenType.OUTPUT, match.group("output").strip(), lineno, col))
        else:
            tokens.append(Token(TokenType.TAG, match.group("tag").strip(), lineno, col))
        pos = match.end()

    _check_data(source, pos, len(source), name)
    push_data(source[pos:], pos, False)
    return tokens


def tokenize_arguments(markup: str, lineno: int = 1, col_offset: int = 0) -> list[Token]:
    """Split tag or output markup into argument tokens.

    Example:
        >>> [t.value for t in tokenize_arguments("'card.html' title: page.title")]
        ["'card.html'", 'title', ':', 'page.title']

    Raises:
        TemplateSyntaxError: On a character no token can start with.
    """
    tokens: list[Token] = []
    pos = 0
    while pos < len(markup):
        match = _ARGUMENT_RE.match(markup, pos)
        if match is None:
            raise TemplateSyntaxError(
                f"Unexpected character {markup[pos]!r} in {markup!r}",
                lineno,
                col_offset=col_offset + pos,
                code=ErrorCode.UNEXPECTED_CHARACTER,
            )
        kind = match.lastgroup
        if kind != "ws":
            tokens.append(
                Token(_ARGUMENT_TYPES[kind], match.group(kind), lineno, col_offset + pos)
            )
        pos = match.end()
    return tokens
