"""Output nodes for the ladle AST."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ladle.nodes.base import Node
from ladle.nodes.expressions import Expr
from ladle.values import to_liquid_string

if TYPE_CHECKING:
    from ladle.runtime import Runtime


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text data between template constructs."""

    value: str

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        buf.append(self.value)


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr }}"""

    expr: Expr

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        buf.append(to_liquid_string(self.expr.evaluate(runtime)))
