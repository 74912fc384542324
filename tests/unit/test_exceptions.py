"""Unit tests for error codes and error annotation."""

from __future__ import annotations

import pytest

from ladle.environment import terminal
from ladle.environment.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    TraceFrame,
    UndefinedError,
    build_source_snippet,
    format_include_trace,
)


@pytest.fixture(autouse=True)
def no_colors(monkeypatch):
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


class TestErrorCode:
    def test_codes_unique(self) -> None:
        values = [code.value for code in ErrorCode]
        assert len(values) == len(set(values))

    @pytest.mark.parametrize(
        ("code", "category"),
        [
            (ErrorCode.UNCLOSED_TAG, "lexer"),
            (ErrorCode.INVALID_IDENTIFIER, "parser"),
            (ErrorCode.INVALID_PARTIAL_NAME, "runtime"),
            (ErrorCode.PARTIAL_NOT_FOUND, "template"),
        ],
    )
    def test_category(self, code: ErrorCode, category: str) -> None:
        assert code.category == category


class TestDefaultCodes:
    def test_defaults(self) -> None:
        assert TemplateError("x").code is None
        assert TemplateNotFoundError("x").code is ErrorCode.PARTIAL_NOT_FOUND
        assert TemplateSyntaxError("x").code is ErrorCode.INVALID_SYNTAX
        assert TemplateRuntimeError("x").code is ErrorCode.RENDER_FAILURE
        assert UndefinedError("x").code is ErrorCode.UNDEFINED_VARIABLE

    def test_explicit_code(self) -> None:
        error = TemplateRuntimeError("x", code=ErrorCode.INVALID_PARTIAL_NAME)
        assert error.code is ErrorCode.INVALID_PARTIAL_NAME
        assert TemplateRuntimeError.code is ErrorCode.RENDER_FAILURE


class TestAnnotations:
    def test_add_context_and_trace_return_self(self) -> None:
        error = TemplateRuntimeError("Can only include strings")
        assert error.add_context("partial", "page.sections") is error
        assert error.add_trace("{% include page.sections %}") is error
        assert error.context == [("partial", "page.sections")]
        assert error.trace == [TraceFrame("{% include page.sections %}")]
        assert error.partial_chain == []

    def test_trace_appends_innermost_first(self) -> None:
        error = TemplateNotFoundError("missing")
        error.add_trace("{% include 'c' %}", "c").add_trace("{% include 'b' %}", "b")
        assert error.partial_chain == ["c", "b"]

    def test_str_includes_annotations(self) -> None:
        error = TemplateRuntimeError("bad", expression="x", suggestion="fix it")
        error.add_context("binding", "title")
        text = str(error)
        assert text.splitlines() == [
            "Runtime Error: bad",
            "  Expression: x",
            "  Suggestion: fix it",
            "  binding=title",
        ]

    def test_trace_frame_str(self) -> None:
        assert str(TraceFrame("{% include x %}")) == "{% include x %}"
        assert str(TraceFrame("{% include x %}", "a.html")) == "{% include x %} (partial: a.html)"

    def test_format_include_trace_empty(self) -> None:
        assert format_include_trace([]) == ""

    def test_values_truncated(self) -> None:
        error = TemplateRuntimeError("bad", values={"big": "x" * 200})
        line = next(line for line in str(error).splitlines() if "big =" in line)
        assert line.endswith("... (str)")


class TestSourceSnippet:
    def test_context_lines(self) -> None:
        snippet = build_source_snippet("a\nb\nc\nd\ne", 3, context_lines=1)
        assert snippet.lines == ((2, "b"), (3, "c"), (4, "d"))
        assert snippet.error_line == 3

    def test_caret(self) -> None:
        text = build_source_snippet("{% include %}", 1, context_lines=0, column=3).format()
        assert "   |    ^" in text

    def test_syntax_error_without_source(self) -> None:
        error = TemplateSyntaxError("oops", 4, name="t.html")
        assert str(error) == "Syntax Error: oops\n  --> t.html:4"
