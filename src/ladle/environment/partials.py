"""Partial stores: name → compiled Template, for ``{% include %}``.

Three strategies, chosen with ``Environment(partial_cache=...)``:

- ``LazyPartials`` (``"lazy"``): compile on first use, then reuse.
- ``EagerPartials`` (``"eager"``): compile everything the loader lists up
  front; names it did not list are still compiled lazily.
- ``OnDemandPartials`` (``"on_demand"``): compile on every lookup, so edits
  to partial files show up without rebuilding the environment.

All stores raise TemplateNotFoundError for unknown names. Syntax errors in
a partial propagate unchanged.

Thread-Safety:
    Compiled templates are immutable. ``LazyPartials`` guards its cache with
    a lock; two threads missing the same name may both compile it, the
    first result stored wins.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING, Protocol

from ladle.environment.exceptions import TemplateNotFoundError

if TYPE_CHECKING:
    from ladle.environment.core import Environment
    from ladle.template import Template

logger = logging.getLogger(__name__)


class PartialStore(Protocol):
    def get(self, name: str) -> Template: ...


class OnDemandPartials:
    """Load and compile the partial on every lookup."""

    __slots__ = ("_env_ref",)

    def __init__(self, env: Environment):
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)

    @property
    def _env(self) -> Environment:
        env = self._env_ref()
        if env is None:
            raise RuntimeError("Environment has been garbage collected")
        return env

    def get(self, name: str) -> Template:
        return self._compile(name)

    def _compile(self, name: str) -> Template:
        env = self._env
        if env.loader is None:
            raise TemplateNotFoundError(
                f"Partial '{name}' not found: no loader configured", name=name
            )
        source, filename = env.loader.get_source(name)
        logger.debug(f"Compiling partial {name!r} from {filename or '<memory>'}")
        return env.from_string(source, name=name, filename=filename)


class LazyPartials(OnDemandPartials):
    """Compile each partial once, on first use."""

    __slots__ = ("_cache", "_lock")

    def __init__(self, env: Environment):
        super().__init__(env)
        self._cache: dict[str, Template] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Template:
        with self._lock:
            cached = self._cache.get(name)
        if cached is not None:
            logger.debug(f"Partial cache hit: {name!r}")
            return cached

        template = self._compile(name)
        with self._lock:
            return self._cache.setdefault(name, template)

    def clear(self) -> None:
        """Drop every compiled partial."""
        with self._lock:
            self._cache.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)


class EagerPartials(LazyPartials):
    """Compile every partial the loader lists when the store is created.

    A syntax error in any listed partial surfaces immediately, at
    environment construction, instead of on the first render that includes
    it.
    """

    __slots__ = ()

    def __init__(self, env: Environment):
        super().__init__(env)
        self.preload()

    def preload(self) -> None:
        env = self._env
        if env.loader is None:
            return
        names = env.loader.list_templates()
        for name in names:
            self._cache[name] = self._compile(name)
        logger.debug(f"Preloaded {len(names)} partials")


PARTIAL_CACHE_STRATEGIES: dict[str, type[OnDemandPartials]] = {
    "lazy": LazyPartials,
    "eager": EagerPartials,
    "on_demand": OnDemandPartials,
}
