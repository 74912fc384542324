"""Standard Liquid tags and blocks.

Tags (``parse(arguments, env)``): assign.
Blocks (``parse(arguments, parser, env)``): capture, if, unless, for, comment.
``raw`` is handled by the lexer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ladle.environment.exceptions import ErrorCode
from ladle.nodes.base import Renderable
from ladle.nodes.control_flow import For, If
from ladle.nodes.expressions import Expr
from ladle.nodes.variables import Assign, Capture
from ladle.parser.arguments import TagArguments

if TYPE_CHECKING:
    from ladle.environment.core import Environment
    from ladle.parser.core import Parser


class AssignTag:
    """{% assign name = value | filter %}"""

    name = "assign"
    description = "Assign a value to a global variable."

    def parse(self, arguments: TagArguments, env: Environment) -> Assign:
        target = arguments.expect_identifier(
            arguments.expect_next("Expected a variable name")
        )
        arguments.expect_symbol(
            arguments.expect_next("Expected '='", ErrorCode.INVALID_SYNTAX),
            "=",
            "Expected '=' after the variable name",
        )
        value = arguments.parse_filtered(env.filters)
        arguments.expect_exhausted()
        return Assign(arguments.lineno, arguments.col_offset, target, value)


class CaptureBlock:
    """{% capture name %}...{% endcapture %}"""

    name = "capture"
    description = "Render a block into a global variable."

    def parse(self, arguments: TagArguments, parser: Parser, env: Environment) -> Capture:
        target = arguments.expect_identifier(
            arguments.expect_next("Expected a variable name")
        )
        arguments.expect_exhausted()
        body, _, _ = parser.parse_until("endcapture")
        return Capture(arguments.lineno, arguments.col_offset, target, body)


class IfBlock:
    """{% if cond %}...{% elsif cond %}...{% else %}...{% endif %}"""

    name = "if"
    description = "Render the first branch whose condition is truthy."
    negated = False

    def parse(self, arguments: TagArguments, parser: Parser, env: Environment) -> If:
        end_tag = f"end{self.name}"
        branches: list[tuple[Expr, tuple[Renderable, ...]]] = []
        else_: tuple[Renderable, ...] = ()
        condition = self._condition(arguments)
        while True:
            body, closing, closing_args = parser.parse_until("elsif", "else", end_tag)
            branches.append((condition, body))
            if closing == "elsif":
                condition = self._condition(closing_args)
                continue
            if closing == "else":
                closing_args.expect_exhausted()
                else_, _, _ = parser.parse_until(end_tag)
            break
        return If(
            arguments.lineno,
            arguments.col_offset,
            tuple(branches),
            else_,
            negated=self.negated,
        )

    @staticmethod
    def _condition(arguments: TagArguments) -> Expr:
        condition = arguments.parse_condition()
        arguments.expect_exhausted()
        return condition


class UnlessBlock(IfBlock):
    """{% unless cond %}...{% else %}...{% endunless %}"""

    name = "unless"
    description = "Render the body when the condition is falsy."
    negated = True


class ForBlock:
    """{% for item in items [reversed] [limit: n] [offset: n] %}...{% else %}...{% endfor %}"""

    name = "for"
    description = "Render the body once per item."

    def parse(self, arguments: TagArguments, parser: Parser, env: Environment) -> For:
        target = arguments.expect_identifier(
            arguments.expect_next("Expected a loop variable")
        )
        keyword = arguments.expect_next("Expected 'in'", ErrorCode.INVALID_SYNTAX)
        if keyword.value != "in":
            raise arguments.error(
                f"Expected 'in', found {keyword.value!r}", ErrorCode.INVALID_SYNTAX, keyword
            )
        iterable = arguments.expect_value(arguments.expect_next("Expected a collection"))

        reversed_ = False
        options: dict[str, Expr] = {}
        while (token := arguments.next()) is not None:
            if token.value == "reversed":
                reversed_ = True
                continue
            option = arguments.expect_identifier(token)
            if option not in ("limit", "offset"):
                raise arguments.error(
                    f"Unknown for-loop option {option!r}", ErrorCode.INVALID_SYNTAX, token
                )
            arguments.expect_symbol(
                arguments.expect_next("Expected ':'", ErrorCode.INVALID_SYNTAX),
                ":",
                f"Expected ':' after '{option}'",
            )
            options[option] = arguments.expect_value(
                arguments.expect_next("Expected a value", ErrorCode.INVALID_EXPRESSION)
            )

        body, closing, closing_args = parser.parse_until("else", "endfor")
        else_: tuple[Renderable, ...] = ()
        if closing == "else":
            closing_args.expect_exhausted()
            else_, _, _ = parser.parse_until("endfor")
        return For(
            arguments.lineno,
            arguments.col_offset,
            target,
            iterable,
            body,
            else_,
            reversed=reversed_,
            limit=options.get("limit"),
            offset=options.get("offset"),
        )


class CommentBlock:
    """{% comment %}...{% endcomment %}"""

    name = "comment"
    description = "Ignore everything up to endcomment."

    def parse(self, arguments: TagArguments, parser: Parser, env: Environment) -> None:
        parser.skip_until("endcomment")
        return None


STANDARD_TAGS = {tag.name: tag for tag in (AssignTag(),)}

STANDARD_BLOCKS = {
    block.name: block
    for block in (CaptureBlock(), IfBlock(), UnlessBlock(), ForBlock(), CommentBlock())
}
