"""ladle AST nodes.

Nodes are frozen, slotted dataclasses. Statement nodes implement
``render_to(buf, runtime)``; expression nodes implement ``evaluate`` and
``try_evaluate``.
"""

from ladle.nodes.base import Node, Renderable, render_body
from ladle.nodes.control_flow import For, If
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
from ladle.nodes.output import Data, Output
from ladle.nodes.variables import Assign, Capture

__all__ = [
    "COMPARISON_OPERATORS",
    "Assign",
    "BoolOp",
    "Capture",
    "Compare",
    "Data",
    "Expr",
    "FilterCall",
    "Filtered",
    "For",
    "If",
    "Literal",
    "Node",
    "Output",
    "Range",
    "Renderable",
    "Variable",
    "render_body",
]
