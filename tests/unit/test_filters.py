"""Unit tests for the standard and Jekyll filters."""

from __future__ import annotations

import pytest

from ladle import Environment, ErrorCode, TemplateRuntimeError
from ladle.filters import DEFAULT_FILTERS, JEKYLL_FILTERS


@pytest.fixture
def render():
    env = Environment()

    def _render(source: str, **context: object) -> str:
        return env.from_string(source).render(**context)

    return _render


class TestStandardFilters:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("{{ 'whooo' | size }}", "5"),
            ("{{ 'abc' | upcase }}", "ABC"),
            ("{{ 'ABC' | downcase }}", "abc"),
            ("{{ 'hello world' | capitalize }}", "Hello world"),
            ("{{ 'a' | append: 'b' }}", "ab"),
            ("{{ 'b' | prepend: 'a' }}", "ab"),
            ("{{ '  x  ' | strip }}", "x"),
            ("{{ 'a,b,c' | split: ',' | join: '-' }}", "a-b-c"),
            ("{{ 'a,b,c' | split: ',' | first }}", "a"),
            ("{{ 'a,b,c' | split: ',' | last }}", "c"),
            ("{{ 'a,b,c' | split: ',' | reverse | join: '' }}", "cba"),
            ("{{ 'c,a,b' | split: ',' | sort | join: '' }}", "abc"),
            ("{{ 'a,b,a' | split: ',' | uniq | join: '' }}", "ab"),
            ("{{ 1 | plus: 2 }}", "3"),
            ("{{ '4' | minus: 1 }}", "3"),
            ("{{ 2 | times: 1.5 }}", "3"),
            ("{{ 7 | divided_by: 2 }}", "3"),
            ("{{ 7.0 | divided_by: 2 }}", "3.5"),
            ("{{ 7 | modulo: 3 }}", "1"),
            ("{{ 'a-b-c' | replace: '-', '+' }}", "a+b+c"),
            ("{{ 'a-b-c' | remove: '-' }}", "abc"),
            ("{{ '<b>' | escape }}", "&lt;b&gt;"),
            ("{{ nil | default: 'd' }}", "d"),
            ("{{ false | default: 'd' }}", "d"),
            ("{{ '' | default: 'd' }}", "d"),
            ("{{ 0 | default: 'd' }}", "0"),
        ],
    )
    def test_filter(self, render, source: str, expected: str) -> None:
        assert render(source) == expected

    def test_size_of_array(self, render) -> None:
        assert render("{{ xs | size }}", xs=[1, 2, 3]) == "3"

    def test_size_property(self, render) -> None:
        assert render("{{ xs.size }}-{{ xs.first }}-{{ xs.last }}", xs=[1, 2, 3]) == "3-1-3"

    def test_filter_failure_wrapped(self, render) -> None:
        with pytest.raises(TemplateRuntimeError) as exc_info:
            render("{{ 1 | divided_by: 0 }}")
        assert exc_info.value.code is ErrorCode.FILTER_ERROR
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)


class TestJekyllFilters:
    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            ("none", "The _config.yml file?"),
            ("raw", "the-_config.yml-file?"),
            ("default", "the-config-yml-file"),
            ("pretty", "the-_config.yml-file"),
        ],
    )
    def test_slugify_modes(self, render, mode: str, expected: str) -> None:
        source = f"{{{{ text | slugify: '{mode}' }}}}"
        assert render(source, text="The _config.yml file?") == expected

    def test_slugify_default_mode(self, render) -> None:
        assert render("{{ 'Hello, World!' | slugify }}") == "hello-world"

    def test_slugify_unknown_mode(self, render) -> None:
        with pytest.raises(TemplateRuntimeError) as exc_info:
            render("{{ 'x' | slugify: 'weird' }}")
        assert exc_info.value.code is ErrorCode.FILTER_ERROR

    def test_xml_escape(self, render) -> None:
        assert render("{{ s | xml_escape }}", s="<a href=\"x\">Tom & 'Jerry'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#39;Jerry&#39;&lt;/a&gt;"
        )

    def test_array_filters(self, render) -> None:
        context = {"xs": ["b", "c"]}
        assert render("{{ xs | push: 'd' | join: '' }}", **context) == "bcd"
        assert render("{{ xs | unshift: 'a' | join: '' }}", **context) == "abc"
        assert render("{{ xs | pop | join: '' }}", **context) == "b"
        assert render("{{ xs | shift | join: '' }}", **context) == "c"

    def test_array_filters_do_not_mutate(self, render) -> None:
        xs = ["a"]
        render("{{ xs | push: 'b' }}", xs=xs)
        assert xs == ["a"]

    @pytest.mark.parametrize(
        ("items", "expected"),
        [
            ([], ""),
            (["a"], "a"),
            (["a", "b"], "a and b"),
            (["a", "b", "c"], "a, b, and c"),
        ],
    )
    def test_array_to_sentence_string(self, render, items: list[str], expected: str) -> None:
        assert render("{{ xs | array_to_sentence_string }}", xs=items) == expected

    def test_array_to_sentence_connector(self, render) -> None:
        assert render("{{ xs | array_to_sentence_string: 'or' }}", xs=["a", "b"]) == "a or b"


def test_filter_sets_disjoint() -> None:
    assert not set(DEFAULT_FILTERS) & set(JEKYLL_FILTERS)
