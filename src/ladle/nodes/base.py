"""Base node class for the ladle AST."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ladle.runtime import Runtime


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location for error reporting.
    Nodes are immutable, so one compiled template can be rendered by any
    number of threads at once.

    """

    lineno: int
    col_offset: int


@runtime_checkable
class Renderable(Protocol):
    """Anything the renderer can walk: built-in statements and custom tags."""

    def render_to(self, buf: list[str], runtime: Runtime) -> None: ...


def render_body(body: Sequence[Renderable], buf: list[str], runtime: Runtime) -> None:
    """Render a sequence of nodes into ``buf``."""
    for node in body:
        node.render_to(buf, runtime)
