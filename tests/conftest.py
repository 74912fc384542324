"""Pytest configuration and fixtures for ladle tests."""

import pytest

from ladle import DictLoader, Environment

EXAMPLE_PARTIALS = {
    "example.txt": (
        "{{'whooo' | size}}{%comment%}What happens{%endcomment%} "
        "{%if num < numTwo%}wat{%else%}wot{%endif%} "
        "{%if num > numTwo%}wat{%else%}wot{%endif%}"
    ),
    "example_var.txt": "{{include.example_var}}",
}


@pytest.fixture
def env():
    """Create a basic ladle Environment with no partial source."""
    return Environment()


@pytest.fixture
def partials():
    """Partials shared by the include tests (a fresh, mutable copy)."""
    return {
        **EXAMPLE_PARTIALS,
        "greet.html": "Hello {{ include.who }}",
        "card.html": "<h2>{{ include.title }}</h2>{% include 'body.html' %}",
        "body.html": "<p>{{ page.body }}</p>",
        "broken.html": "{{ missing_var }}",
        "outer.html": "[{% include 'inner.html' %}]",
        "inner.html": "{% include 'missing.html' %}",
        "self.html": "x{% include 'self.html' %}",
        "echo.html": "{{ include | size }}:{{ include.a }}{{ include.b }}",
        "bad_syntax.html": "{% if %}",
    }


@pytest.fixture
def env_with_loader(partials):
    """Create a ladle Environment with a DictLoader of test partials."""
    return Environment(loader=DictLoader(partials))


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
