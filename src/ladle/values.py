"""Liquid value semantics over plain Python objects.

Templates see ordinary Python values. This module defines how those values
behave inside a template:

- Scalars are ``str``, ``int``, ``float`` and ``bool``. ``None`` is nil and
  is *not* a scalar; lists/tuples are arrays; mappings are objects.
- Truthiness follows Liquid: only ``False`` and ``None`` are falsy.
- String form follows Liquid: ``True`` → ``"true"``, ``None`` → ``""``,
  integral floats drop their fraction (``5.0`` → ``"5"``), arrays render
  their items back to back.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final


class _Missing:
    """Sentinel for a lookup that found nothing (distinct from nil)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

_SCALAR_TYPES = (str, int, float)


def is_scalar(value: Any) -> bool:
    """True for strings, numbers and booleans."""
    return isinstance(value, _SCALAR_TYPES)


def is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str)


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_truthy(value: Any) -> bool:
    return value is not False and value is not None and value is not MISSING


def to_liquid_string(value: Any) -> str:
    """Render a value the way ``{{ value }}`` prints it."""
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        items = ", ".join(f"{key}: {to_liquid_string(item)}" for key, item in value.items())
        return "{" + items + "}"
    if is_array(value):
        return "".join(to_liquid_string(item) for item in value)
    return str(value)


def get_item(value: Any, key: Any) -> Any:
    """Index ``value`` by ``key`` the way ``a.b`` / ``a[b]`` does.

    Arrays accept integer keys (negative counts from the end) plus the
    ``size``, ``first`` and ``last`` properties; strings support ``size``;
    mappings accept any key and fall back to ``size``. Returns ``MISSING``
    when nothing matches.
    """
    if isinstance(value, Mapping):
        try:
            if key in value:
                return value[key]
        except TypeError:
            # unhashable key
            return MISSING
        if key == "size":
            return len(value)
        return MISSING
    if is_array(value):
        if isinstance(key, int) and not isinstance(key, bool):
            if -len(value) <= key < len(value):
                return value[key]
            return MISSING
        if key == "size":
            return len(value)
        if key == "first":
            return value[0] if value else MISSING
        if key == "last":
            return value[-1] if value else MISSING
        return MISSING
    if isinstance(value, str) and key == "size":
        return len(value)
    return MISSING


def size_of(value: Any) -> int:
    if value is None or value is MISSING:
        return 0
    if is_scalar(value) and not isinstance(value, str):
        return len(to_liquid_string(value))
    try:
        return len(value)
    except TypeError:
        return 0
