"""The Environment: configuration, registries and entry points.

An Environment owns everything shared between renders: the loader and
partial store, the filter / tag / block registries, global variables and
render options. Templates keep only a weak reference back to it.

Example:
    >>> from ladle import DictLoader, Environment
    >>> env = Environment(loader=DictLoader({"greet.html": "Hi {{ include.who }}"}))
    >>> env.from_string("{% include 'greet.html' who: name %}!").render(name="Ada")
    'Hi Ada!'

Registries are copy-on-write, so adding a filter while other threads parse
is safe:

    >>> env.filters["shout"] = lambda value: f"{value}!"

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ladle.environment.loaders import Loader
from ladle.environment.partials import PARTIAL_CACHE_STRATEGIES, PartialStore
from ladle.environment.registry import Registry
from ladle.filters import DEFAULT_FILTERS, JEKYLL_FILTERS
from ladle.parser import Parser
from ladle.runtime import Runtime
from ladle.tags import STANDARD_BLOCKS, STANDARD_TAGS, IncludeTag
from ladle.template import Template

logger = logging.getLogger(__name__)


class Environment:
    """Central configuration for parsing and rendering templates.

    Args:
        loader: Source of partials for ``{% include %}``.
        partial_cache: ``"lazy"``, ``"eager"`` or ``"on_demand"``; see
            ``ladle.environment.partials``.
        strict_variables: Raise UndefinedError when output or a condition
            references an unknown variable. When False, unknown variables
            render as nil.
        max_include_depth: Maximum include nesting before the render is
            aborted with INCLUDE_DEPTH.
        globals: Variables visible to every render.

    Raises:
        ValueError: If ``partial_cache`` or ``max_include_depth`` is invalid.
    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        partial_cache: str = "lazy",
        strict_variables: bool = True,
        max_include_depth: int = 50,
        globals: Mapping[str, Any] | None = None,
    ):
        if partial_cache not in PARTIAL_CACHE_STRATEGIES:
            raise ValueError(
                f"partial_cache must be one of {', '.join(PARTIAL_CACHE_STRATEGIES)}, "
                f"got {partial_cache!r}"
            )
        if max_include_depth < 1:
            raise ValueError(f"max_include_depth must be at least 1, got {max_include_depth}")

        self.loader = loader
        self.strict_variables = strict_variables
        self.max_include_depth = max_include_depth
        self.globals: dict[str, Any] = dict(globals or {})

        self._filters: dict[str, Any] = {**DEFAULT_FILTERS, **JEKYLL_FILTERS}
        self._tags: dict[str, Any] = {**STANDARD_TAGS, IncludeTag.name: IncludeTag()}
        self._blocks: dict[str, Any] = dict(STANDARD_BLOCKS)

        self.partial_cache = partial_cache
        self.partials: PartialStore = PARTIAL_CACHE_STRATEGIES[partial_cache](self)

    @property
    def filters(self) -> Registry:
        """Filter callables by name: ``value | name: args``."""
        return Registry(self, "_filters")

    @property
    def tags(self) -> Registry:
        """Single tags by name, each with ``parse(arguments, env)``."""
        return Registry(self, "_tags")

    @property
    def blocks(self) -> Registry:
        """Block tags by name, each with ``parse(arguments, parser, env)``."""
        return Registry(self, "_blocks")

    def from_string(
        self, source: str, name: str | None = None, filename: str | None = None
    ) -> Template:
        """Parse template source.

        Raises:
            TemplateSyntaxError: If the source does not parse.
        """
        nodes = Parser(self, source, name, filename).parse()
        return Template(self, nodes, name=name, filename=filename, source=source)

    def get_template(self, name: str) -> Template:
        """Fetch a template through the partial store.

        Raises:
            TemplateNotFoundError: If the loader has no such template.
        """
        return self.partials.get(name)

    def render(self, name: str, *args: Any, **kwargs: Any) -> str:
        """Shortcut for ``get_template(name).render(...)``."""
        return self.get_template(name).render(*args, **kwargs)

    def new_runtime(self, context: Mapping[str, Any] | None = None) -> Runtime:
        """Build a fresh per-render runtime whose globals are ``env.globals`` + ``context``."""
        variables = {**self.globals, **(context or {})}
        return Runtime(
            variables,
            partials=self.partials,
            strict_variables=self.strict_variables,
            max_include_depth=self.max_include_depth,
        )

    def clear_cache(self) -> None:
        """Forget compiled partials (no-op for the on-demand store)."""
        clear = getattr(self.partials, "clear", None)
        if clear is not None:
            clear()
            logger.debug("Partial cache cleared")

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__ if self.loader else None} "
            f"partial_cache={self.partial_cache!r}>"
        )
