"""Jekyll's filter extensions: slugs, XML escaping, array helpers."""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from ladle.values import is_array, to_liquid_string

SLUGIFY_MODES = ("none", "raw", "default", "pretty")

_SLUGIFY_PATTERNS = {
    "raw": re.compile(r"\s+"),
    "default": re.compile(r"[\W_]+"),
    "pretty": re.compile(r"[^\w._~!$&'()+,;=@]+"),
}

_XML_ESCAPES = str.maketrans(
    {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;"}
)


def _slugify(value: Any, mode: Any = "default") -> str:
    """Turn text into a URL slug.

    Modes:
        none: return the text unchanged
        raw: replace whitespace runs with hyphens
        default: replace everything but letters and digits with hyphens
        pretty: like default, but keep ``_.~!$&'()+,;=@``

    Example:
        >>> _slugify("The _config.yml file")
        'the-config-yml-file'
        >>> _slugify("The _config.yml file", "pretty")
        'the-_config.yml-file'
    """
    text = to_liquid_string(value)
    mode = to_liquid_string(mode) or "default"
    if mode not in SLUGIFY_MODES:
        raise ValueError(f"Unknown slugify mode {mode!r}, expected one of {', '.join(SLUGIFY_MODES)}")
    if mode == "none":
        return text
    slug = _SLUGIFY_PATTERNS[mode].sub("-", text)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    return slug.lower()


def _xml_escape(value: Any) -> str:
    return to_liquid_string(value).translate(_XML_ESCAPES)


def _array(value: Any) -> list[Any]:
    if value is None:
        return []
    if is_array(value):
        return list(value)
    return [value]


def _push(value: Any, item: Any) -> list[Any]:
    return [*_array(value), item]


def _pop(value: Any) -> list[Any]:
    return _array(value)[:-1]


def _shift(value: Any) -> list[Any]:
    return _array(value)[1:]


def _unshift(value: Any, item: Any) -> list[Any]:
    return [item, *_array(value)]


def _array_to_sentence_string(value: Any, connector: Any = "and") -> str:
    """["a", "b", "c"] -> "a, b, and c"."""
    items = [to_liquid_string(item) for item in _array(value)]
    connector = to_liquid_string(connector)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} {connector} {items[1]}"
    return f"{', '.join(items[:-1])}, {connector} {items[-1]}"


JEKYLL_FILTERS: dict[str, Callable[..., Any]] = {
    "array_to_sentence_string": _array_to_sentence_string,
    "pop": _pop,
    "push": _push,
    "shift": _shift,
    "slugify": _slugify,
    "unshift": _unshift,
    "xml_escape": _xml_escape,
}
