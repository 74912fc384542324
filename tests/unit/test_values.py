"""Unit tests for Liquid value semantics."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from ladle.values import (
    MISSING,
    get_item,
    is_array,
    is_object,
    is_scalar,
    is_truthy,
    size_of,
    to_liquid_string,
)


class TestPredicates:
    @pytest.mark.parametrize("value", ["a", "", 0, 1.5, True, False])
    def test_scalars(self, value: object) -> None:
        assert is_scalar(value)

    @pytest.mark.parametrize("value", [None, [], (), {}, MISSING, object()])
    def test_non_scalars(self, value: object) -> None:
        assert not is_scalar(value)

    def test_arrays_and_objects(self) -> None:
        assert is_array([1]) and is_array((1,))
        assert not is_array("abc")
        assert is_object({}) and is_object(MappingProxyType({}))

    @pytest.mark.parametrize(
        ("value", "truthy"),
        [(False, False), (None, False), (MISSING, False), (0, True), ("", True), ([], True)],
    )
    def test_truthiness(self, value: object, truthy: bool) -> None:
        assert is_truthy(value) is truthy


class TestToLiquidString:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            (MISSING, ""),
            (True, "true"),
            (False, "false"),
            (5, "5"),
            (5.0, "5"),
            (2.5, "2.5"),
            ("x", "x"),
            (["a", 1, None], "a1"),
            ({"a": 1}, "{a: 1}"),
        ],
    )
    def test_conversion(self, value: object, expected: str) -> None:
        assert to_liquid_string(value) == expected


class TestGetItem:
    def test_mapping(self) -> None:
        assert get_item({"a": 1}, "a") == 1
        assert get_item({"a": 1}, "b") is MISSING
        assert get_item({"a": 1}, "size") == 1

    def test_mapping_unhashable_key(self) -> None:
        assert get_item({"a": 1}, ["a"]) is MISSING
        assert get_item({"a": 1}, {"a": 1}) is MISSING

    def test_array(self) -> None:
        items = ["x", "y"]
        assert get_item(items, 0) == "x"
        assert get_item(items, -1) == "y"
        assert get_item(items, 2) is MISSING
        assert get_item(items, "first") == "x"
        assert get_item(items, "last") == "y"
        assert get_item([], "first") is MISSING

    def test_string_size(self) -> None:
        assert get_item("abc", "size") == 3
        assert get_item("abc", 0) is MISSING

    def test_bool_is_not_an_index(self) -> None:
        assert get_item(["x"], True) is MISSING


@pytest.mark.parametrize(
    ("value", "size"),
    [("whooo", 5), ([1, 2], 2), ({"a": 1}, 1), (None, 0), (12345, 5), (object(), 0)],
)
def test_size_of(value: object, size: int) -> None:
    assert size_of(value) == size
