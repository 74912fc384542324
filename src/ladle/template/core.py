"""ladle Template: a parsed node tree ready for rendering.

Architecture:
    ```
    Template
    ├── _env_ref: WeakRef[Environment]  # Template → (weak) → Environment
    ├── _nodes: tuple[Renderable, ...]  # Immutable node tree
    └── _name, _filename, _source       # For error messages
    ```

StringBuilder Pattern:
Nodes append to a shared ``list[str]`` and ``render()`` joins once at the
end. An included partial renders into its caller's buffer, so a page with
fifty includes still does a single join.

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (buffer and Runtime)
- Multiple threads can call ``render()`` concurrently

"""

from __future__ import annotations

import weakref
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ladle.environment.exceptions import ErrorCode, TemplateError, TemplateRuntimeError
from ladle.nodes.base import render_body

if TYPE_CHECKING:
    from ladle.environment import Environment
    from ladle.nodes.base import Renderable
    from ladle.runtime import Runtime


class Template:
    """Parsed template ready for rendering.

    Example:
            >>> from ladle import Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name | upcase }}!")
            >>> t.render(name="World")
            'Hello, WORLD!'

            >>> t.render({"name": "World"})  # Dict context also works
            'Hello, WORLD!'

    """

    __slots__ = ("_env_ref", "_filename", "_name", "_nodes", "_source")

    def __init__(
        self,
        env: Environment,
        nodes: Sequence[Renderable],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)
        self._nodes = tuple(nodes)
        self._name = name
        self._filename = filename
        self._source = source

    @property
    def _env(self) -> Environment:
        """Get the Environment (dereferences weak reference)."""
        env = self._env_ref()
        if env is None:
            raise RuntimeError(
                f"Environment has been garbage collected"
                f" (template: {self._name or 'unknown'})"
            )
        return env

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def nodes(self) -> tuple[Renderable, ...]:
        return self._nodes

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render with a fresh runtime.

        Args:
            *args: Single dict of context variables
            **kwargs: Context variables as keyword arguments

        Raises:
            TemplateError: Any parse, lookup or render failure, annotated with
                the include trace when it happened inside a partial.
        """
        ctx: dict[str, Any] = {}
        if args:
            if len(args) == 1 and isinstance(args[0], dict):
                ctx.update(args[0])
            else:
                raise TypeError(
                    f"render() takes at most 1 positional argument (a dict), got {len(args)}"
                )
        ctx.update(kwargs)

        runtime = self._env.new_runtime(ctx)
        buf: list[str] = []
        try:
            self.render_to(buf, runtime)
        except TemplateError:
            raise
        except Exception as e:
            error = TemplateRuntimeError(
                f"{type(e).__name__}: {e}", code=ErrorCode.RENDER_FAILURE
            )
            if self._name:
                error.add_context("template", self._name)
            raise error from e
        return "".join(buf)

    def render_to(self, buf: list[str], runtime: Runtime) -> None:
        """Render into an existing buffer with an existing runtime.

        This is how ``{% include %}`` renders a partial inside its caller.
        """
        render_body(self._nodes, buf, runtime)

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'!r}>"
