"""Cursor over the argument tokens of a single tag or output.

Tag parsers receive a ``TagArguments`` and pull tokens from it strictly left
to right. The ``expect_*`` helpers turn malformed input into a
TemplateSyntaxError carrying an ErrorCode, the tag's location and the
template source:

    token = arguments.expect_next("Identifier or literal expected.")
    partial = arguments.expect_value(token)

Value grammar (one token each, see ``ladle.lexer``):
    'text' | "text" | 42 | -1.5 | true | false | nil | (a..b) | name | a.b[0]

"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from ladle._types import Token, TokenType
from ladle.environment.exceptions import ErrorCode, TemplateSyntaxError
from ladle.lexer import tokenize_arguments
from ladle.nodes.expressions import (
    COMPARISON_OPERATORS,
    BoolOp,
    Compare,
    Expr,
    FilterCall,
    Filtered,
    Literal,
    Range,
    Variable,
)

_KEYWORD_LITERALS: dict[str, Any] = {
    "true": True,
    "false": False,
    "nil": None,
    "null": None,
}

_PATH_HEAD = re.compile(r"[A-Za-z_][\w-]*\??")
_PATH_SEGMENT = re.compile(r"\.(?P<attr>[A-Za-z_][\w-]*\??)|\[(?P<key>[^\]]*)\]")


class TagArguments:
    """Left-to-right cursor over a tag's argument tokens.

    Attributes:
        tag: Tag name (``include``), or ``""`` for ``{{ ... }}`` output.
        markup: Argument text as written in the template.
        lineno: Line of the tag in the template source.
    """

    __slots__ = ("_name", "_pos", "_source", "_tokens", "col_offset", "lineno", "markup", "tag")

    def __init__(
        self,
        tag: str,
        markup: str,
        tokens: list[Token],
        *,
        lineno: int = 1,
        col_offset: int = 0,
        name: str | None = None,
        source: str | None = None,
    ):
        self.tag = tag
        self.markup = markup
        self.lineno = lineno
        self.col_offset = col_offset
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._source = source

    @classmethod
    def from_markup(
        cls,
        tag: str,
        markup: str,
        *,
        lineno: int = 1,
        col_offset: int = 0,
        name: str | None = None,
        source: str | None = None,
    ) -> TagArguments:
        """Tokenize ``markup`` and wrap the tokens.

        Example:
            >>> args = TagArguments.from_markup("include", "'nav.html' active: true")
            >>> args.invocation
            "{% include 'nav.html' active: true %}"
        """
        try:
            tokens = tokenize_arguments(markup, lineno, col_offset)
        except TemplateSyntaxError as e:
            e.name = name
            e.source = source
            raise
        return cls(
            tag,
            markup,
            tokens,
            lineno=lineno,
            col_offset=col_offset,
            name=name,
            source=source,
        )

    @property
    def invocation(self) -> str:
        """The tag as written, normalized: ``{% include 'a.html' x: 1 %}``."""
        if not self.tag:
            return f"{{{{ {self.markup} }}}}"
        if not self.markup:
            return f"{{% {self.tag} %}}"
        return f"{{% {self.tag} {self.markup} %}}"

    # ------------------------------------------------------------------
    # Token navigation
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next()
        if token is None:
            raise StopIteration
        return token

    def peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def next(self) -> Token | None:
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek_symbol(self, symbol: str) -> bool:
        token = self.peek()
        return token is not None and token.type == TokenType.SYMBOL and token.value == symbol

    def peek_keyword(self, *keywords: str) -> bool:
        token = self.peek()
        return token is not None and token.type == TokenType.NAME and token.value in keywords

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def error(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_SYNTAX,
        token: Token | None = None,
    ) -> TemplateSyntaxError:
        """Build a syntax error located at ``token`` (or the tag itself)."""
        return TemplateSyntaxError(
            f"{message} in '{self.invocation}'",
            token.lineno if token else self.lineno,
            name=self._name,
            source=self._source,
            col_offset=token.col_offset if token else self.col_offset,
            code=code,
        )

    # ------------------------------------------------------------------
    # Expectations
    # ------------------------------------------------------------------

    def expect_next(
        self, message: str, code: ErrorCode = ErrorCode.MISSING_ARGUMENT
    ) -> Token:
        token = self.next()
        if token is None:
            raise self.error(message or "Unexpected end of arguments", code)
        return token

    def expect_identifier(self, token: Token) -> str:
        if token.type != TokenType.NAME or token.value in _KEYWORD_LITERALS:
            raise self.error(
                f"Expected an identifier, found {token.value!r}",
                ErrorCode.INVALID_IDENTIFIER,
                token,
            )
        return token.value

    def expect_symbol(self, token: Token, symbol: str, message: str) -> Token:
        if token.type != TokenType.SYMBOL or token.value != symbol:
            raise self.error(
                f"{message}, found {token.value!r}", ErrorCode.INVALID_SYNTAX, token
            )
        return token

    def expect_exhausted(self) -> None:
        token = self.peek()
        if token is not None:
            raise self.error(f"Unexpected argument {token.value!r}", ErrorCode.INVALID_SYNTAX, token)

    def expect_value(self, token: Token) -> Expr:
        """Parse one value token into an expression."""
        if token.type == TokenType.STRING:
            return Literal(token.lineno, token.col_offset, token.value, token.value[1:-1])
        if token.type == TokenType.NUMBER:
            number: int | float = float(token.value) if "." in token.value else int(token.value)
            return Literal(token.lineno, token.col_offset, token.value, number)
        if token.type == TokenType.NAME:
            if token.value in _KEYWORD_LITERALS:
                return Literal(
                    token.lineno, token.col_offset, token.value, _KEYWORD_LITERALS[token.value]
                )
            return Variable(token.lineno, token.col_offset, token.value, token.value)
        if token.type == TokenType.VARIABLE:
            return self._parse_path(token)
        if token.type == TokenType.RANGE:
            return self._parse_range(token)
        raise self.error(
            f"Expected a literal or variable, found {token.value!r}",
            ErrorCode.INVALID_EXPRESSION,
            token,
        )

    def _single_value(self, text: str, token: Token) -> Expr:
        inner = tokenize_arguments(text, token.lineno, token.col_offset)
        if len(inner) != 1:
            raise self.error(
                f"Expected a single value, found {text.strip()!r}",
                ErrorCode.INVALID_EXPRESSION,
                token,
            )
        return self.expect_value(inner[0])

    def _parse_path(self, token: Token) -> Variable:
        text = token.value
        head = _PATH_HEAD.match(text)
        assert head is not None  # guaranteed by the lexer
        path: list[Expr] = []
        pos = head.end()
        while pos < len(text):
            match = _PATH_SEGMENT.match(text, pos)
            if match is None:
                raise self.error(
                    f"Invalid variable path {text!r}", ErrorCode.INVALID_EXPRESSION, token
                )
            attr = match.group("attr")
            if attr is not None:
                path.append(Literal(token.lineno, token.col_offset, attr, attr))
            else:
                path.append(self._single_value(match.group("key"), token))
            pos = match.end()
        return Variable(token.lineno, token.col_offset, text, head.group(), tuple(path))

    def _parse_range(self, token: Token) -> Range:
        start, _, stop = token.value[1:-1].partition("..")
        return Range(
            token.lineno,
            token.col_offset,
            token.value,
            self._single_value(start, token),
            self._single_value(stop, token),
        )

    # ------------------------------------------------------------------
    # Composite expressions
    # ------------------------------------------------------------------

    def parse_filtered(self, filters: Mapping[str, Callable[..., Any]]) -> Expr:
        """Parse ``value (| filter [: arg (, arg)*])*``.

        Filters are bound here, so an unknown filter fails at compile time.
        """
        value = self.expect_value(self.expect_next("Expected a value"))
        calls: list[FilterCall] = []
        source_parts = [value.source]
        while self.peek_symbol("|"):
            self.next()
            name_token = self.expect_next("Expected a filter name after '|'")
            if name_token.type != TokenType.NAME:
                raise self.error(
                    f"Expected a filter name, found {name_token.value!r}",
                    ErrorCode.INVALID_SYNTAX,
                    name_token,
                )
            func = filters.get(name_token.value)
            if func is None:
                raise self.error(
                    f"Unknown filter '{name_token.value}'", ErrorCode.UNKNOWN_FILTER, name_token
                )
            args: list[Expr] = []
            if self.peek_symbol(":"):
                self.next()
                args.append(self.expect_value(self.expect_next("Expected a filter argument")))
                while self.peek_symbol(","):
                    self.next()
                    args.append(self.expect_value(self.expect_next("Expected a filter argument")))
            call_source = name_token.value
            if args:
                call_source += ": " + ", ".join(arg.source for arg in args)
            source_parts.append(call_source)
            calls.append(
                FilterCall(name_token.lineno, name_token.col_offset, name_token.value, func, tuple(args))
            )
        if not calls:
            return value
        return Filtered(value.lineno, value.col_offset, " | ".join(source_parts), value, tuple(calls))

    def parse_condition(self) -> Expr:
        """Parse comparisons joined by ``and`` / ``or`` (right-associative)."""
        left = self._parse_comparison()
        if self.peek_keyword("and", "or"):
            op = self.next().value  # type: ignore[union-attr]
            right = self.parse_condition()
            return BoolOp(left.lineno, left.col_offset, f"{left} {op} {right}", op, left, right)
        return left

    def _parse_comparison(self) -> Expr:
        left = self.expect_value(self.expect_next("Expected a condition"))
        token = self.peek()
        if token is None:
            return left
        is_operator = (
            token.type == TokenType.SYMBOL and token.value in COMPARISON_OPERATORS
        ) or (token.type == TokenType.NAME and token.value == "contains")
        if not is_operator:
            return left
        self.next()
        right = self.expect_value(
            self.expect_next(f"Expected a value after '{token.value}'", ErrorCode.INVALID_EXPRESSION)
        )
        return Compare(
            left.lineno, left.col_offset, f"{left} {token.value} {right}", left, token.value, right
        )
