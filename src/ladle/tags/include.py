"""The ``include`` tag: render a partial, optionally passing it variables.

Syntax:
    {% include <value> [<identifier>: <value>]* %}

    {% include 'image.html' path: page.cover alt: "Cover" %}

Inside ``image.html`` the extra variables are read through the reserved
``include`` object, while the caller's own variables stay visible through
the scope chain:

    <img src="{{ include.path }}" alt="{{ include.alt }}" title="{{ page.title }}">

Render steps:
    1. Evaluate the partial name; anything but a scalar is rejected.
    2. Open a scope named after the partial (always closed again).
    3. Evaluate the bindings against that scope and store them, as a
       read-only mapping, under ``include``. No bindings, no ``include``.
    4. Look the partial up in the runtime's partial store and render it into
       the same buffer.

Every error leaving the tag is annotated (never replaced) with the tag as
written and, once known, the resolved partial name, so a failure three
includes deep carries three trace frames.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from ladle.environment.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateRuntimeError,
)
from ladle.nodes.base import Node
from ladle.nodes.expressions import Expr
from ladle.values import MISSING, is_scalar, to_liquid_string

if TYPE_CHECKING:
    from ladle.environment.core import Environment
    from ladle.parser.arguments import TagArguments
    from ladle.runtime import Runtime

logger = logging.getLogger(__name__)

INCLUDE_VARIABLE = "include"


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Compiled ``{% include %}`` occurrence.

    Attributes:
        markup: The tag as written, used in error traces.
        partial: Expression yielding the partial name.
        bindings: ``(identifier, expression)`` pairs in source order.
    """

    markup: str
    partial: Expr
    bindings: Sequence[tuple[str, Expr]] = ()

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        try:
            name = self._partial_name(runtime)
        except TemplateError as e:
            e.add_trace(self.markup)
            raise
        except Exception as e:
            raise _render_failure(e).add_trace(self.markup) from e

        try:
            runtime.check_include_depth(name)
            with runtime.named_scope(name) as scope:
                if self.bindings:
                    scope.set(INCLUDE_VARIABLE, self._evaluate_bindings(scope))
                partial = scope.get_partial(name)
                logger.debug(f"Including partial {name!r} at depth {scope.include_depth}")
                partial.render_to(buf, scope)
        except TemplateError as e:
            e.add_trace(self.markup, name)
            raise
        except Exception as e:
            raise _render_failure(e).add_trace(self.markup, name) from e

    def _partial_name(self, runtime: Runtime) -> str:
        value = self.partial.try_evaluate(runtime)
        if not is_scalar(value):
            found = "an undefined value" if value is MISSING else type(value).__name__
            error = TemplateRuntimeError(
                f"Can only include strings, got {found}",
                code=ErrorCode.INVALID_PARTIAL_NAME,
                expression=str(self.partial),
            )
            error.add_context("partial", str(self.partial))
            raise error
        return to_liquid_string(value)

    def _evaluate_bindings(self, scope: Runtime) -> MappingProxyType[str, Any]:
        values: dict[str, Any] = {}
        for identifier, expr in self.bindings:
            try:
                value = expr.try_evaluate(scope)
            except TemplateError as e:
                raise _binding_error(identifier, expr, e.message) from e
            except Exception as e:
                raise _binding_error(identifier, expr, f"{type(e).__name__}: {e}") from e
            if value is MISSING:
                raise _binding_error(identifier, expr, "failed to evaluate value")
            values[identifier] = value
        return MappingProxyType(values)


class IncludeTag:
    """Parser for ``{% include %}``, registered under the ``include`` tag name."""

    name = "include"
    description = "Render a partial, exposing extra arguments as `include.<name>`."

    def parse(self, arguments: TagArguments, env: Environment) -> Include:
        partial = arguments.expect_value(
            arguments.expect_next("Identifier or literal expected.")
        )

        bindings: list[tuple[str, Expr]] = []
        while (token := arguments.next()) is not None:
            identifier = arguments.expect_identifier(token)
            arguments.expect_symbol(
                arguments.expect_next("':' expected.", ErrorCode.INVALID_SYNTAX),
                ":",
                "expected ':' to be used for the assignment",
            )
            value = arguments.expect_value(
                arguments.expect_next("expected value", ErrorCode.INVALID_EXPRESSION)
            )
            bindings.append((identifier, value))

        return Include(
            arguments.lineno,
            arguments.col_offset,
            arguments.invocation,
            partial,
            tuple(bindings),
        )


def _render_failure(e: Exception) -> TemplateRuntimeError:
    return TemplateRuntimeError(f"{type(e).__name__}: {e}", code=ErrorCode.RENDER_FAILURE)


def _binding_error(identifier: str, expr: Expr, message: str) -> TemplateRuntimeError:
    error = TemplateRuntimeError(
        message,
        code=ErrorCode.BINDING_EVALUATION_FAILED,
        expression=str(expr),
    )
    error.add_context("binding", identifier)
    return error
