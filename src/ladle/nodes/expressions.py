"""Expression nodes for the ladle AST.

Every expression keeps the ``source`` text it was parsed from, which is what
error messages and include traces print (``str(expr)``).

Evaluation comes in two flavours:

- ``evaluate(runtime)`` is used for output and conditions. An undefined
  variable raises UndefinedError in strict mode and yields nil otherwise.
- ``try_evaluate(runtime)`` never raises for undefined names; it returns the
  ``MISSING`` sentinel instead, letting callers such as ``{% include %}``
  report the failure in their own terms.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ladle.environment.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateRuntimeError,
    UndefinedError,
)
from ladle.nodes.base import Node
from ladle.values import MISSING, get_item, is_array, is_truthy

if TYPE_CHECKING:
    from ladle.runtime import Runtime


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""

    source: str

    def evaluate(self, runtime: Runtime) -> Any:
        raise NotImplementedError(f"{type(self).__name__}.evaluate")

    def try_evaluate(self, runtime: Runtime) -> Any:
        return self.evaluate(runtime)

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True, slots=True)
class Literal(Expr):
    """Constant value: string, number, boolean, nil."""

    value: str | int | float | bool | None

    def evaluate(self, runtime: Runtime) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Variable(Expr):
    """Variable path: {{ page.tags[0] }}

    ``path`` holds one expression per ``.attr`` or ``[key]`` segment; dotted
    segments are string literals.
    """

    name: str
    path: Sequence[Expr] = ()

    def try_evaluate(self, runtime: Runtime) -> Any:
        value = runtime.lookup(self.name)
        for segment in self.path:
            if value is MISSING:
                break
            key = segment.try_evaluate(runtime)
            if key is MISSING:
                return MISSING
            value = get_item(value, key)
        return value

    def evaluate(self, runtime: Runtime) -> Any:
        value = self.try_evaluate(runtime)
        if value is MISSING:
            if runtime.strict_variables:
                raise UndefinedError(self.source, available_names=runtime.names())
            return None
        return value


@dataclass(frozen=True, slots=True)
class Range(Expr):
    """Inclusive integer range: (1..5)"""

    start: Expr
    stop: Expr

    def _bounds(self, evaluate: Callable[[Expr], Any]) -> Any:
        bounds = []
        for bound in (self.start, self.stop):
            value = evaluate(bound)
            if value is MISSING:
                return MISSING
            try:
                bounds.append(int(value))
            except (TypeError, ValueError):
                raise TemplateRuntimeError(
                    f"Range bounds must be integers, got {value!r}",
                    code=ErrorCode.INVALID_VALUE,
                    expression=self.source,
                ) from None
        return list(range(bounds[0], bounds[1] + 1))

    def evaluate(self, runtime: Runtime) -> Any:
        return self._bounds(lambda bound: bound.evaluate(runtime))

    def try_evaluate(self, runtime: Runtime) -> Any:
        return self._bounds(lambda bound: bound.try_evaluate(runtime))


@dataclass(frozen=True, slots=True)
class FilterCall(Node):
    """One filter application inside a chain: ``| append: ' ', name``

    ``func`` is bound at parse time from the environment's filter registry.
    """

    name: str
    func: Callable[..., Any]
    args: Sequence[Expr] = ()

    def apply(self, value: Any, runtime: Runtime) -> Any:
        args = [arg.evaluate(runtime) for arg in self.args]
        try:
            return self.func(value, *args)
        except TemplateError:
            raise
        except Exception as e:
            raise TemplateRuntimeError(
                f"Filter '{self.name}' failed: {e}",
                code=ErrorCode.FILTER_ERROR,
                values={"input": value, **{f"arg{i}": a for i, a in enumerate(args)}},
            ) from e


@dataclass(frozen=True, slots=True)
class Filtered(Expr):
    """Value followed by a filter chain: {{ title | upcase | append: '!' }}"""

    value: Expr
    filters: Sequence[FilterCall]

    def evaluate(self, runtime: Runtime) -> Any:
        if self.filters and self.filters[0].name == "default":
            # `| default` is how templates opt out of strict undefined checks.
            result = self.value.try_evaluate(runtime)
            if result is MISSING:
                result = None
        else:
            result = self.value.evaluate(runtime)
        for call in self.filters:
            result = call.apply(result, runtime)
        return result


def _contains(left: Any, right: Any) -> bool:
    if isinstance(left, str):
        return isinstance(right, str) and right in left
    if isinstance(left, Mapping) or is_array(left):
        return right in left
    return False


_COMPARISONS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<>": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
    "contains": _contains,
}

COMPARISON_OPERATORS = frozenset(_COMPARISONS)


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Binary comparison: num < numTwo, tags contains 'draft'"""

    left: Expr
    op: str
    right: Expr

    def evaluate(self, runtime: Runtime) -> Any:
        left = self.left.evaluate(runtime)
        right = self.right.evaluate(runtime)
        try:
            return bool(_COMPARISONS[self.op](left, right))
        except TypeError:
            # Ordering between unrelated types (e.g. 1 < 'a') is simply false.
            return False


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Logical ``and`` / ``or``, right-associative as in Liquid."""

    op: str
    left: Expr
    right: Expr

    def evaluate(self, runtime: Runtime) -> Any:
        left = is_truthy(self.left.evaluate(runtime))
        if self.op == "and":
            return left and is_truthy(self.right.evaluate(runtime))
        return left or is_truthy(self.right.evaluate(runtime))
