"""Parser for ladle templates.

Turns the lexer's DATA / OUTPUT / TAG stream into a tuple of renderable
nodes. The parser itself knows no tag names: every ``{% name ... %}`` is
dispatched to the environment's tag registry (single tags such as
``assign`` and ``include``) or block registry (tags with a body such as
``if`` and ``for``).

Block parsers get the parser back so they can read their body:

    class CaptureBlock:
        name = "capture"

        def parse(self, arguments, parser, env):
            target = arguments.expect_identifier(arguments.expect_next("..."))
            body, _, _ = parser.parse_until("endcapture")
            return Capture(arguments.lineno, arguments.col_offset, target, body)

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ladle._types import Token, TokenType
from ladle.environment.exceptions import ErrorCode, TemplateSyntaxError
from ladle.lexer import tokenize
from ladle.nodes.base import Renderable
from ladle.nodes.output import Data, Output
from ladle.parser.arguments import TagArguments

if TYPE_CHECKING:
    from ladle.environment.core import Environment

_TAG_NAME = re.compile(r"(?P<name>\w+)\s*(?P<markup>.*)", re.DOTALL)


class Parser:
    """Recursive-descent parser over the template token stream.

    Attributes:
        name: Template name (for error messages)
        source: Template source (for error snippets)
    """

    __slots__ = ("_block_stack", "_env", "_pos", "_tokens", "filename", "name", "source")

    def __init__(
        self,
        env: Environment,
        source: str,
        name: str | None = None,
        filename: str | None = None,
    ):
        self._env = env
        self.source = source
        self.name = name
        self.filename = filename
        self._tokens = tokenize(source, name)
        self._pos = 0
        self._block_stack: list[TagArguments] = []

    def parse(self) -> tuple[Renderable, ...]:
        """Parse the whole template."""
        body, _ = self._parse_body(frozenset())
        return body

    def parse_until(self, *end_tags: str) -> tuple[tuple[Renderable, ...], str, TagArguments]:
        """Parse a block body up to one of ``end_tags``.

        Returns:
            (body, name of the tag that closed it, that tag's arguments)

        Raises:
            TemplateSyntaxError: If the template ends first.
        """
        body, closing = self._parse_body(frozenset(end_tags))
        if closing is None:
            raise self._unclosed(end_tags)
        return body, closing.tag, closing

    def skip_until(self, end_tag: str) -> None:
        """Discard tokens up to the matching ``end_tag`` without parsing them.

        Used by ``comment``: tags inside need not be valid. Nested blocks of
        the same kind are balanced.
        """
        opener = self._block_stack[-1].tag if self._block_stack else None
        depth = 1
        while self._pos < len(self._tokens):
            token = self._tokens[self._pos]
            self._pos += 1
            if token.type != TokenType.TAG:
                continue
            name = token.value.split(None, 1)[0] if token.value else ""
            if name == opener:
                depth += 1
            elif name == end_tag:
                depth -= 1
                if depth == 0:
                    return
        raise self._unclosed((end_tag,))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _arguments(self, tag: str, markup: str, token: Token) -> TagArguments:
        return TagArguments.from_markup(
            tag,
            markup,
            lineno=token.lineno,
            col_offset=token.col_offset,
            name=self.name,
            source=self.source,
        )

    def _error(self, message: str, token: Token, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            token.lineno,
            name=self.name,
            filename=self.filename,
            source=self.source,
            col_offset=token.col_offset,
            code=code,
        )

    def _unclosed(self, end_tags: tuple[str, ...]) -> TemplateSyntaxError:
        opener = self._block_stack[-1] if self._block_stack else None
        expected = " or ".join(f"'{{% {tag} %}}'" for tag in end_tags)
        message = f"Unclosed block: expected {expected} before end of template"
        if opener is not None:
            message = f"Unclosed '{opener.invocation}': expected {expected}"
        return TemplateSyntaxError(
            message,
            opener.lineno if opener else None,
            name=self.name,
            filename=self.filename,
            source=self.source,
            code=ErrorCode.UNCLOSED_BLOCK,
        )

    def _parse_body(
        self, end_tags: frozenset[str]
    ) -> tuple[tuple[Renderable, ...], TagArguments | None]:
        nodes: list[Renderable] = []
        while self._pos < len(self._tokens):
            token = self._tokens[self._pos]
            self._pos += 1

            if token.type == TokenType.DATA:
                nodes.append(Data(token.lineno, token.col_offset, token.value))
                continue

            if token.type == TokenType.OUTPUT:
                arguments = self._arguments("", token.value, token)
                expr = arguments.parse_filtered(self._env.filters)
                arguments.expect_exhausted()
                nodes.append(Output(token.lineno, token.col_offset, expr))
                continue

            match = _TAG_NAME.fullmatch(token.value)
            if match is None:
                raise self._error(
                    f"Expected a tag name in '{{% {token.value} %}}'",
                    token,
                    ErrorCode.INVALID_SYNTAX,
                )
            tag = match.group("name")
            arguments = self._arguments(tag, match.group("markup").strip(), token)

            if tag in end_tags:
                return tuple(nodes), arguments

            parse_tag = self._env.tags.get(tag)
            if parse_tag is not None:
                nodes.append(parse_tag.parse(arguments, self._env))
                continue

            parse_block = self._env.blocks.get(tag)
            if parse_block is None:
                raise self._error(f"Unknown tag '{tag}'", token, ErrorCode.UNKNOWN_TAG)
            self._block_stack.append(arguments)
            try:
                node = parse_block.parse(arguments, self, self._env)
            finally:
                self._block_stack.pop()
            if node is not None:
                nodes.append(node)

        return tuple(nodes), None
