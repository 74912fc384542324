"""Per-render state: the variable scope stack and the partial store.

A ``Runtime`` is created fresh by ``Template.render()`` and handed down the
node tree. Nothing in it is shared between renders, so two renders of the
same template never observe each other's variables.

Scopes:
    The stack always holds a globals frame at the bottom. ``scope()`` and
    ``named_scope()`` push a frame for the duration of a ``with`` block and
    pop it on exit, including exit by exception:

        with runtime.named_scope("card.html") as scope:
            scope.set("include", {"title": "Hi"})
            partial.render_to(buf, scope)
        # frame is gone here, success or not

    ``lookup()`` walks from the innermost frame outwards, so inner frames
    shadow outer ones without modifying them.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ladle.environment.exceptions import ErrorCode, TemplateNotFoundError, TemplateRuntimeError
from ladle.values import MISSING

if TYPE_CHECKING:
    from ladle.environment.partials import PartialStore
    from ladle.template import Template


@dataclass(slots=True)
class Frame:
    """One level of the scope stack.

    Attributes:
        name: Descriptive name (the partial name for include scopes),
            None for anonymous scopes such as loop bodies.
        variables: Names bound in this frame.
    """

    name: str | None = None
    variables: dict[str, Any] = field(default_factory=dict)


class Runtime:
    """Scope stack plus render options for a single render call.

    Attributes:
        partials: Partial store used by ``{% include %}``.
        strict_variables: Raise UndefinedError for unknown variables.
        max_include_depth: Include nesting limit (circular include guard).
        include_depth: Number of currently open named scopes.
    """

    __slots__ = (
        "_frames",
        "include_depth",
        "max_include_depth",
        "partials",
        "strict_variables",
    )

    def __init__(
        self,
        globals: Mapping[str, Any] | None = None,
        *,
        partials: PartialStore | None = None,
        strict_variables: bool = True,
        max_include_depth: int = 50,
    ):
        self._frames: list[Frame] = [Frame("globals", dict(globals or {}))]
        self.partials = partials
        self.strict_variables = strict_variables
        self.max_include_depth = max_include_depth
        self.include_depth = 0

    # ------------------------------------------------------------------
    # Variable access
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Any:
        """Find ``name`` in the innermost frame that binds it, else MISSING."""
        for frame in reversed(self._frames):
            if name in frame.variables:
                return frame.variables[name]
        return MISSING

    def get(self, name: str, default: Any = None) -> Any:
        value = self.lookup(name)
        return default if value is MISSING else value

    def set(self, name: str, value: Any) -> None:
        """Bind ``name`` in the innermost frame."""
        self._frames[-1].variables[name] = value

    def set_global(self, name: str, value: Any) -> None:
        """Bind ``name`` in the globals frame (``assign`` / ``capture``)."""
        self._frames[0].variables[name] = value

    def names(self) -> frozenset[str]:
        """Every name visible from the innermost frame."""
        return frozenset(name for frame in self._frames for name in frame.variables)

    @property
    def depth(self) -> int:
        """Number of frames on the stack, globals included."""
        return len(self._frames)

    @property
    def scope_names(self) -> list[str | None]:
        """Frame names from outermost to innermost (debugging aid)."""
        return [frame.name for frame in self._frames]

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    @contextmanager
    def scope(self, name: str | None = None) -> Iterator[Runtime]:
        """Push an anonymous frame for the duration of the ``with`` block."""
        self._frames.append(Frame(name))
        try:
            yield self
        finally:
            self._frames.pop()

    @contextmanager
    def named_scope(self, name: str) -> Iterator[Runtime]:
        """Push a frame named after a partial and count it as an include level."""
        self._frames.append(Frame(name))
        self.include_depth += 1
        try:
            yield self
        finally:
            self.include_depth -= 1
            self._frames.pop()

    def get_partial(self, name: str) -> Template:
        """Resolve a partial through the partial store.

        Raises:
            TemplateNotFoundError: If the store has no such partial, or there
                is no store at all.
        """
        if self.partials is None:
            raise TemplateNotFoundError(
                f"Partial '{name}' not found: no partial source configured", name=name
            )
        return self.partials.get(name)

    def check_include_depth(self, partial_name: str) -> None:
        """Raise if opening another include would exceed the limit.

        Raises:
            TemplateRuntimeError: If include_depth >= max_include_depth
        """
        if self.include_depth >= self.max_include_depth:
            raise TemplateRuntimeError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when including '{partial_name}'",
                code=ErrorCode.INCLUDE_DEPTH,
                suggestion="Check for circular includes: A → B → A",
            )
