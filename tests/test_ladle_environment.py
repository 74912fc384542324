"""Tests for Environment configuration, registries and partial stores."""

from __future__ import annotations

import gc

import pytest

from ladle import (
    DictLoader,
    EagerPartials,
    Environment,
    FunctionLoader,
    LazyPartials,
    OnDemandPartials,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from ladle.environment import Registry
from ladle.tags import IncludeTag


class TestEnvironmentBasics:
    """Construction, globals and render entry points."""

    def test_from_string(self, env: Environment) -> None:
        assert env.from_string("Hello, {{ name }}!").render(name="World") == "Hello, World!"

    def test_render_dict_argument(self, env: Environment) -> None:
        assert env.from_string("{{ a }}{{ b }}").render({"a": 1}, b=2) == "12"

    def test_render_rejects_extra_positional(self, env: Environment) -> None:
        with pytest.raises(TypeError):
            env.from_string("x").render({}, {})

    def test_globals_visible(self) -> None:
        env = Environment(globals={"site": {"title": "Blog"}})
        assert env.from_string("{{ site.title }}").render() == "Blog"

    def test_kwargs_shadow_globals(self) -> None:
        env = Environment(globals={"x": "global"})
        assert env.from_string("{{ x }}").render(x="local") == "local"

    def test_globals_visible_in_partials(self) -> None:
        env = Environment(loader=DictLoader({"p.html": "{{ site }}"}), globals={"site": "S"})
        assert env.from_string("{% include 'p.html' %}").render() == "S"

    def test_get_template_and_render(self, env_with_loader: Environment) -> None:
        assert env_with_loader.get_template("greet.html").name == "greet.html"
        assert env_with_loader.render("example.txt", num=1, numTwo=2) == "5 wat wot"

    def test_get_template_without_loader(self, env: Environment) -> None:
        with pytest.raises(TemplateNotFoundError):
            env.get_template("a.html")

    def test_include_without_loader(self, env: Environment) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            env.from_string("{% include 'a.html' %}").render()
        assert "no loader configured" in exc_info.value.message

    def test_template_keeps_weak_reference(self) -> None:
        env = Environment()
        template = env.from_string("x")
        del env
        gc.collect()
        with pytest.raises(RuntimeError, match="garbage collected"):
            template.render()

    def test_strict_variables_off(self) -> None:
        env = Environment(strict_variables=False)
        assert env.from_string("[{{ nothing.here }}]").render() == "[]"

    @pytest.mark.parametrize(
        "kwargs",
        [{"partial_cache": "sometimes"}, {"max_include_depth": 0}],
    )
    def test_invalid_options(self, kwargs: dict) -> None:
        with pytest.raises(ValueError):
            Environment(**kwargs)


class TestRegistries:
    """Filters, tags and blocks are copy-on-write registries."""

    def test_include_registered(self, env: Environment) -> None:
        assert "include" in env.tags
        assert isinstance(env.tags["include"], IncludeTag)

    def test_standard_registrations(self, env: Environment) -> None:
        assert {"assign"} <= set(env.tags)
        assert {"if", "unless", "for", "capture", "comment"} <= set(env.blocks)
        assert {"size", "slugify", "xml_escape", "push"} <= set(env.filters)

    def test_add_filter(self, env: Environment) -> None:
        env.filters["shout"] = lambda value: f"{value}!"
        assert env.from_string("{{ 'hi' | shout }}").render() == "hi!"

    def test_update_is_copy_on_write(self, env: Environment) -> None:
        before = env.filters.copy()
        env.filters.update({"a": str, "b": str})
        assert "a" not in before
        assert "a" in env.filters and "b" in env.filters

    def test_remove_tag(self, env: Environment) -> None:
        del env.tags["include"]
        with pytest.raises(TemplateSyntaxError):
            env.from_string("{% include 'a' %}")

    def test_custom_tag(self, env: Environment) -> None:
        from ladle.nodes import Data

        class Hello:
            name = "hello"

            def parse(self, arguments, env):
                arguments.expect_exhausted()
                return Data(arguments.lineno, arguments.col_offset, "hello!")

        env.tags["hello"] = Hello()
        assert env.from_string("{% hello %}").render() == "hello!"

    def test_registry_is_mapping_like(self, env: Environment) -> None:
        registry = env.filters
        assert isinstance(registry, Registry)
        assert len(registry) == len(list(registry.keys()))
        assert registry.get("nope") is None


class TestPartialStores:
    """lazy / eager / on_demand partial caching."""

    def _counting_loader(self, sources: dict[str, str]) -> tuple[FunctionLoader, list[str]]:
        calls: list[str] = []

        def load(name: str) -> str | None:
            calls.append(name)
            return sources.get(name)

        return FunctionLoader(load), calls

    def test_store_types(self) -> None:
        loader = DictLoader({})
        assert isinstance(Environment(loader).partials, LazyPartials)
        assert isinstance(Environment(loader, partial_cache="eager").partials, EagerPartials)
        assert isinstance(
            Environment(loader, partial_cache="on_demand").partials, OnDemandPartials
        )

    def test_lazy_compiles_once(self) -> None:
        loader, calls = self._counting_loader({"p": "x"})
        env = Environment(loader=loader)
        template = env.from_string("{% include 'p' %}{% include 'p' %}")
        assert template.render() == "xx"
        assert template.render() == "xx"
        assert calls == ["p"]

    def test_on_demand_reloads(self) -> None:
        sources = {"p": "one"}
        loader, calls = self._counting_loader(sources)
        env = Environment(loader=loader, partial_cache="on_demand")
        template = env.from_string("{% include 'p' %}")
        assert template.render() == "one"
        sources["p"] = "two"
        assert template.render() == "two"
        assert calls == ["p", "p"]

    def test_eager_preloads(self) -> None:
        env = Environment(loader=DictLoader({"a": "A", "b": "B"}), partial_cache="eager")
        assert "a" in env.partials and "b" in env.partials
        assert len(env.partials) == 2

    def test_eager_surfaces_syntax_errors(self) -> None:
        with pytest.raises(TemplateSyntaxError):
            Environment(loader=DictLoader({"bad": "{% if %}"}), partial_cache="eager")

    def test_eager_falls_back_to_lazy(self) -> None:
        sources = {"late": "L"}
        loader, _ = self._counting_loader(sources)
        env = Environment(loader=loader, partial_cache="eager")
        assert len(env.partials) == 0
        assert env.from_string("{% include 'late' %}").render() == "L"
        assert "late" in env.partials

    def test_clear_cache(self) -> None:
        loader, calls = self._counting_loader({"p": "x"})
        env = Environment(loader=loader)
        env.get_template("p")
        env.clear_cache()
        env.get_template("p")
        assert calls == ["p", "p"]

    def test_miss_is_not_cached(self) -> None:
        sources: dict[str, str] = {}
        loader, _ = self._counting_loader(sources)
        env = Environment(loader=loader)
        with pytest.raises(TemplateNotFoundError):
            env.get_template("p")
        sources["p"] = "now"
        assert env.get_template("p").render() == "now"

    def test_partial_store_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        env = Environment(loader=DictLoader({"p": "x"}))
        with caplog.at_level("DEBUG", logger="ladle"):
            env.from_string("{% include 'p' %}{% include 'p' %}").render()
        messages = [record.getMessage() for record in caplog.records]
        assert any("Compiling partial 'p'" in message for message in messages)
        assert any("Partial cache hit: 'p'" in message for message in messages)
        assert any("Including partial 'p'" in message for message in messages)
