"""Partial sources.

A loader turns a partial name into source text. It implements
``get_source(name)`` returning ``(source, filename)`` and, optionally,
``list_templates()`` so the eager partial store can compile everything up
front.

Built-in loaders:
- ``FileSystemLoader``: files under one or more directories (``_includes/``)
- ``DictLoader``: in-memory mapping (tests, embedded partials)
- ``ChoiceLoader``: first match across several loaders (theme overrides)
- ``FunctionLoader``: wrap a callable

Custom loaders only need the same two methods:

    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM partials WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Partial '{name}' not found", name=name)
            return row.source, f"db://{name}"

        def list_templates(self) -> list[str]:
            return [r.name for r in db.query("SELECT name FROM partials")]

A loader only reads; it must be safe to call from several threads at once.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol, runtime_checkable

from ladle.environment.exceptions import TemplateNotFoundError


@runtime_checkable
class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_templates(self) -> list[str]: ...


class FileSystemLoader:
    """Load partials from directories, first match wins.

    Example:
            >>> loader = FileSystemLoader(["site/_includes", "theme/_includes"])
            >>> source, filename = loader.get_source("nav.html")
            >>> filename
            'site/_includes/nav.html'

    Names may contain subdirectories (``cards/post.html``) but must stay
    inside the search paths; ``../secret`` is reported as not found.

    Raises:
        TemplateNotFoundError: If no search path contains the partial
    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | Iterable[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    def get_source(self, name: str) -> tuple[str, str]:
        for base in self._paths:
            path = base / name
            if not _is_within(path, base):
                continue
            if path.is_file():
                return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Partial '{name}' not found in: {', '.join(str(p) for p in self._paths)}",
            name=name,
        )

    def list_templates(self) -> list[str]:
        """Every file under the search paths, as a ``/``-separated name."""
        templates: set[str] = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*"):
                    if path.is_file() and not path.name.startswith("."):
                        templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


def _is_within(path: Path, base: Path) -> bool:
    try:
        path.resolve().relative_to(base.resolve())
    except ValueError:
        return False
    return True


class DictLoader:
    """Load partials from an in-memory mapping.

    Example:
            >>> loader = DictLoader({"example_var.txt": "{{ include.example_var }}"})
            >>> env = Environment(loader=loader)
            >>> env.from_string("{% include 'example_var.txt' example_var: 'hi' %}").render()
            'hi'

    Raises:
        TemplateNotFoundError: If the name is not in the mapping; the message
            suggests a close match when there is one.
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping)
            msg = f"Partial '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg, name=name)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping)


class ChoiceLoader:
    """Try several loaders in order.

    Typical use is a site directory overriding a theme:

            >>> loader = ChoiceLoader([
            ...     FileSystemLoader("_includes"),
            ...     DictLoader({"footer.html": "<footer>default</footer>"}),
            ... ])

    Raises:
        TemplateNotFoundError: If none of the loaders has the partial
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: Iterable[Loader]):
        self._loaders = list(loaders)

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Partial '{name}' not found in any of {len(self._loaders)} loaders",
            name=name,
        )

    def list_templates(self) -> list[str]:
        templates: set[str] = set()
        for loader in self._loaders:
            templates.update(loader.list_templates())
        return sorted(templates)


class FunctionLoader:
    """Wrap a callable as a loader.

    The callable takes a partial name and returns the source, a
    ``(source, filename)`` pair, or ``None`` when there is no such partial.

    Example:
            >>> def load(name):
            ...     return PARTIALS.get(name)
            >>> env = Environment(loader=FunctionLoader(load))

    Raises:
        TemplateNotFoundError: If the callable returns ``None``
    """

    __slots__ = ("_load_func",)

    def __init__(
        self,
        load_func: Callable[[str], str | tuple[str, str | None] | None],
    ):
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._load_func(name)
        if result is None:
            raise TemplateNotFoundError(f"Partial '{name}' not found", name=name)
        if isinstance(result, str):
            return result, "<function>"
        return result

    def list_templates(self) -> list[str]:
        """A function cannot be enumerated."""
        return []
