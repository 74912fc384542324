"""Control flow nodes for the ladle AST."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ladle.environment.exceptions import ErrorCode, TemplateRuntimeError
from ladle.nodes.base import Node, Renderable, render_body
from ladle.nodes.expressions import Expr
from ladle.values import is_array, is_truthy

if TYPE_CHECKING:
    from ladle.runtime import Runtime


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {% if a %}...{% elsif b %}...{% else %}...{% endif %}

    ``unless`` compiles to the same node with ``negated=True``, which inverts
    only the first condition.
    """

    branches: Sequence[tuple[Expr, Sequence[Renderable]]]
    else_: Sequence[Renderable] = ()
    negated: bool = False

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        for index, (test, body) in enumerate(self.branches):
            matched = is_truthy(test.evaluate(runtime))
            if index == 0 and self.negated:
                matched = not matched
            if matched:
                render_body(body, buf, runtime)
                return
        render_body(self.else_, buf, runtime)


@dataclass(frozen=True, slots=True)
class For(Node):
    """Loop: {% for item in items reversed limit: 2 offset: 1 %}...{% endfor %}

    The loop variable and ``forloop`` live in a scope of their own, so they
    disappear when the loop ends.
    """

    target: str
    iter: Expr
    body: Sequence[Renderable]
    else_: Sequence[Renderable] = ()
    reversed: bool = False
    limit: Expr | None = None
    offset: Expr | None = None

    def _items(self, runtime: Runtime) -> list[Any]:
        value = self.iter.evaluate(runtime)
        if value is None:
            items: list[Any] = []
        elif isinstance(value, Mapping):
            items = [[key, item] for key, item in value.items()]
        elif is_array(value):
            items = list(value)
        else:
            raise TemplateRuntimeError(
                f"Cannot iterate over {type(value).__name__}",
                code=ErrorCode.INVALID_VALUE,
                expression=str(self.iter),
            )
        offset = max(self._int_option(self.offset, runtime) or 0, 0)
        limit = self._int_option(self.limit, runtime)
        if limit is not None:
            limit = max(limit, 0)
        items = items[offset:] if limit is None else items[offset : offset + limit]
        if self.reversed:
            items.reverse()
        return items

    @staticmethod
    def _int_option(expr: Expr | None, runtime: Runtime) -> int | None:
        if expr is None:
            return None
        value = expr.evaluate(runtime)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise TemplateRuntimeError(
                f"Expected an integer, got {value!r}",
                code=ErrorCode.INVALID_VALUE,
                expression=str(expr),
            ) from None

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        items = self._items(runtime)
        if not items:
            render_body(self.else_, buf, runtime)
            return
        length = len(items)
        with runtime.scope() as scope:
            for index, item in enumerate(items):
                scope.set(self.target, item)
                scope.set(
                    "forloop",
                    {
                        "index": index + 1,
                        "index0": index,
                        "rindex": length - index,
                        "rindex0": length - index - 1,
                        "first": index == 0,
                        "last": index == length - 1,
                        "length": length,
                    },
                )
                render_body(self.body, buf, scope)
