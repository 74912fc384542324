"""Variable assignment nodes for the ladle AST.

Both ``assign`` and ``capture`` write to the globals frame, so a value
assigned inside an included partial or a loop body stays visible after it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ladle.nodes.base import Node, Renderable, render_body
from ladle.nodes.expressions import Expr

if TYPE_CHECKING:
    from ladle.runtime import Runtime


@dataclass(frozen=True, slots=True)
class Assign(Node):
    """Global assignment: {% assign name = expr | filter %}"""

    name: str
    value: Expr

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        runtime.set_global(self.name, self.value.evaluate(runtime))


@dataclass(frozen=True, slots=True)
class Capture(Node):
    """Capture block output: {% capture name %}...{% endcapture %}"""

    name: str
    body: Sequence[Renderable]

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        captured: list[str] = []
        render_body(self.body, captured, runtime)
        runtime.set_global(self.name, "".join(captured))
