"""Standard Liquid filters.

Filters are plain callables ``f(input, *args)``. They receive evaluated
Python values and return a new value; exceptions raised here are wrapped in
a FILTER_ERROR TemplateRuntimeError by the renderer.
"""

from __future__ import annotations

import html
from collections.abc import Callable
from typing import Any

from ladle.values import is_array, is_truthy, size_of, to_liquid_string


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if is_array(value):
        return list(value)
    return [value]


def _number(value: Any) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = to_liquid_string(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def _upcase(value: Any) -> str:
    return to_liquid_string(value).upper()


def _downcase(value: Any) -> str:
    return to_liquid_string(value).lower()


def _capitalize(value: Any) -> str:
    return to_liquid_string(value).capitalize()


def _append(value: Any, suffix: Any) -> str:
    return to_liquid_string(value) + to_liquid_string(suffix)


def _prepend(value: Any, prefix: Any) -> str:
    return to_liquid_string(prefix) + to_liquid_string(value)


def _strip(value: Any) -> str:
    return to_liquid_string(value).strip()


def _lstrip(value: Any) -> str:
    return to_liquid_string(value).lstrip()


def _rstrip(value: Any) -> str:
    return to_liquid_string(value).rstrip()


def _replace(value: Any, search: Any, replacement: Any = "") -> str:
    return to_liquid_string(value).replace(to_liquid_string(search), to_liquid_string(replacement))


def _remove(value: Any, search: Any) -> str:
    return to_liquid_string(value).replace(to_liquid_string(search), "")


def _split(value: Any, separator: Any = " ") -> list[str]:
    text = to_liquid_string(value)
    separator = to_liquid_string(separator)
    if not text:
        return []
    if separator == "":
        return list(text)
    return text.split(separator)


def _escape(value: Any) -> str:
    return html.escape(to_liquid_string(value), quote=True)


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------


def _size(value: Any) -> int:
    return size_of(value)


def _join(value: Any, separator: Any = " ") -> str:
    return to_liquid_string(separator).join(to_liquid_string(item) for item in _as_list(value))


def _first(value: Any) -> Any:
    if isinstance(value, str):
        return value[:1]
    items = _as_list(value)
    return items[0] if items else None


def _last(value: Any) -> Any:
    if isinstance(value, str):
        return value[-1:]
    items = _as_list(value)
    return items[-1] if items else None


def _reverse(value: Any) -> list[Any]:
    return _as_list(value)[::-1]


def _sort(value: Any) -> list[Any]:
    return sorted(_as_list(value))


def _uniq(value: Any) -> list[Any]:
    seen: list[Any] = []
    for item in _as_list(value):
        if item not in seen:
            seen.append(item)
    return seen


def _compact(value: Any) -> list[Any]:
    return [item for item in _as_list(value) if item is not None]


# ---------------------------------------------------------------------------
# Math
# ---------------------------------------------------------------------------


def _plus(value: Any, operand: Any) -> int | float:
    return _number(value) + _number(operand)


def _minus(value: Any, operand: Any) -> int | float:
    return _number(value) - _number(operand)


def _times(value: Any, operand: Any) -> int | float:
    return _number(value) * _number(operand)


def _divided_by(value: Any, operand: Any) -> int | float:
    left, right = _number(value), _number(operand)
    if isinstance(left, int) and isinstance(right, int):
        return left // right
    return left / right


def _modulo(value: Any, operand: Any) -> int | float:
    return _number(value) % _number(operand)


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


def _default(value: Any, fallback: Any = "") -> Any:
    if not is_truthy(value) or value == "" or (is_array(value) and len(value) == 0):
        return fallback
    return value


DEFAULT_FILTERS: dict[str, Callable[..., Any]] = {
    "append": _append,
    "capitalize": _capitalize,
    "compact": _compact,
    "default": _default,
    "divided_by": _divided_by,
    "downcase": _downcase,
    "escape": _escape,
    "first": _first,
    "join": _join,
    "last": _last,
    "lstrip": _lstrip,
    "minus": _minus,
    "modulo": _modulo,
    "plus": _plus,
    "prepend": _prepend,
    "remove": _remove,
    "replace": _replace,
    "reverse": _reverse,
    "rstrip": _rstrip,
    "size": _size,
    "sort": _sort,
    "split": _split,
    "strip": _strip,
    "times": _times,
    "uniq": _uniq,
    "upcase": _upcase,
}
