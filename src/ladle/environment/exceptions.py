"""Exceptions for the ladle template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateSyntaxError       # Parse-time error (tag arguments, unclosed blocks)
├── TemplateNotFoundError     # Partial not found by the partial store
├── TemplateRuntimeError      # Render-time error (bad partial name, filters)
└── UndefinedError            # Undefined variable access in strict mode

Every error carries two ordered, append-only annotation lists:

- ``context``: ``(key, value)`` pairs describing *what* failed, e.g.
  ``("partial", "page.title")`` or ``("binding", "image")``.
- ``trace``: one ``TraceFrame`` per include site the error travelled through,
  innermost first. Nested includes therefore produce a full attribution path:

    ```
    L-TPL-001: Partial 'missing.html' not found
      Include trace:
        • {% include 'missing.html' %} (partial: missing.html)
        • {% include 'card.html' title: page.title %} (partial: card.html)
    ```

Annotation never replaces the original exception; ``add_context`` and
``add_trace`` mutate and return the same object so call sites can write
``raise exc.add_trace(markup)``.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ladle.environment import terminal

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for ladle template errors.

    Format: L-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), RUN (runtime), TPL (partial loading)
    """

    # Lexer errors (L-LEX-xxx)
    UNCLOSED_TAG = "L-LEX-001"
    UNEXPECTED_CHARACTER = "L-LEX-002"

    # Parser errors (L-PAR-xxx)
    MISSING_ARGUMENT = "L-PAR-001"
    INVALID_SYNTAX = "L-PAR-002"
    INVALID_IDENTIFIER = "L-PAR-003"
    INVALID_EXPRESSION = "L-PAR-004"
    UNKNOWN_TAG = "L-PAR-005"
    UNCLOSED_BLOCK = "L-PAR-006"
    UNKNOWN_FILTER = "L-PAR-007"

    # Runtime errors (L-RUN-xxx)
    UNDEFINED_VARIABLE = "L-RUN-001"
    FILTER_ERROR = "L-RUN-002"
    INVALID_VALUE = "L-RUN-003"
    INVALID_PARTIAL_NAME = "L-RUN-004"
    BINDING_EVALUATION_FAILED = "L-RUN-005"
    INCLUDE_DEPTH = "L-RUN-006"
    RENDER_FAILURE = "L-RUN-007"

    # Partial loading errors (L-TPL-xxx)
    PARTIAL_NOT_FOUND = "L-TPL-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Trace frames and source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TraceFrame:
    """One include site an error propagated through.

    Attributes:
        markup: Literal tag invocation, e.g. ``{% include 'nav.html' %}``.
        partial: Resolved partial name, or None when the failure happened
            before the name could be resolved.
    """

    markup: str
    partial: str | None = None

    def __str__(self) -> str:
        if self.partial is None:
            return self.markup
        return f"{self.markup} (partial: {self.partial})"


def format_include_trace(trace: list[TraceFrame]) -> str:
    """Format the include trace, innermost site first.

    Example:
        >>> print(format_include_trace([TraceFrame("{% include 'a' %}", "a")]))
        Include trace:
            • {% include 'a' %} (partial: a)
    """
    if not trace:
        return ""
    lines = [terminal.dim_text("Include trace:")]
    for frame in trace:
        text = terminal.markup(frame.markup)
        if frame.partial is not None:
            text += f" (partial: {terminal.location(frame.partial)})"
        lines.append(f"  • {text}")
    return "\n  ".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            parts.append(f"{terminal.dim_text('   |')} {' ' * self.column}^")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.
        column: Optional column offset for caret pointer.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class TemplateError(Exception):
    """Base exception for all ladle template errors.

    Attributes:
        message: Error description without annotations.
        code: ErrorCode identifying the error kind.
        context: Ordered ``(key, value)`` annotations.
        trace: Include sites the error propagated through, innermost first.
    """

    code: ErrorCode | None = None

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        self.message = message
        if code is not None:
            self.code = code
        self.context: list[tuple[str, str]] = []
        self.trace: list[TraceFrame] = []
        super().__init__(message)

    def add_context(self, key: str, value: str) -> TemplateError:
        """Append a ``key=value`` annotation and return self."""
        self.context.append((key, value))
        return self

    def add_trace(self, markup: str, partial: str | None = None) -> TemplateError:
        """Append an include site to the trace and return self."""
        self.trace.append(TraceFrame(markup, partial))
        return self

    @property
    def partial_chain(self) -> list[str]:
        """Resolved partial names along the trace, innermost first."""
        return [frame.partial for frame in self.trace if frame.partial is not None]

    def __str__(self) -> str:
        return self._format_message()

    def _format_message(self) -> str:
        return "\n".join([self.message, *self._format_annotations()])

    def _format_annotations(self) -> list[str]:
        parts: list[str] = []
        for key, value in self.context:
            parts.append(f"  {key}={value}")
        if self.trace:
            parts.append(f"  {format_include_trace(self.trace)}")
        return parts

    def format_compact(self) -> str:
        """Format error as a structured, human-readable summary.

        Format::

            L-RUN-004: Can only include strings
              partial=page.sections
              Include trace:
                • {% include page.sections %}
        """
        header = terminal.format_error_header(
            self.code.value if self.code else None, self.message
        )
        return "\n".join([header, *self._format_annotations()])


class TemplateNotFoundError(TemplateError):
    """Partial not found by the partial store or its loader.

    Example:
            >>> env.get_template("nonexistent.html")
        TemplateNotFoundError: Partial 'nonexistent.html' not found

    """

    code: ErrorCode | None = ErrorCode.PARTIAL_NOT_FOUND

    def __init__(self, message: str, *, name: str | None = None):
        self.name = name
        super().__init__(message)


class TemplateSyntaxError(TemplateError):
    """Parse-time syntax error in template source.

    Raised by the lexer, the parser and tag parsers. When ``source`` and
    ``lineno`` are provided, the message includes a snippet of the offending
    line; ``col_offset`` adds a caret (``^``).
    """

    code: ErrorCode | None = ErrorCode.INVALID_SYNTAX

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        *,
        code: ErrorCode | None = None,
    ):
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        self.col_offset = col_offset
        super().__init__(message, code=code)

    @property
    def location(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
        return location

    def _snippet(self) -> str | None:
        if self.source and self.lineno and 0 < self.lineno <= len(self.source.splitlines()):
            return build_source_snippet(
                self.source, self.lineno, context_lines=0, column=self.col_offset
            ).format()
        return None

    def _format_message(self) -> str:
        parts = [f"Syntax Error: {self.message}", f"  --> {terminal.location(self.location)}"]
        snippet = self._snippet()
        if snippet:
            parts.append(snippet)
        parts.extend(self._format_annotations())
        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format syntax error as structured terminal diagnostic."""
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  --> {terminal.location(self.location)}",
        ]
        snippet = self._snippet()
        if snippet:
            parts.append(snippet)
        parts.extend(self._format_annotations())
        return "\n".join(parts)


class TemplateRuntimeError(TemplateError):
    """Render-time error with debugging context.

    Output Format:
            ```
            Runtime Error: Can only include strings
              Expression: page.sections
              Values:
                page.sections = ['intro', 'body'] (list)
              partial=page.sections
            ```

    Attributes:
        expression: Template expression that failed
        values: Dict of variable names → values for context
        suggestion: Actionable fix suggestion

    """

    code: ErrorCode | None = ErrorCode.RENDER_FAILURE

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        expression: str | None = None,
        values: dict[str, Any] | None = None,
        suggestion: str | None = None,
    ):
        self.expression = expression
        self.values = values or {}
        self.suggestion = suggestion
        super().__init__(message, code=code)

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        parts.extend(self._format_details())
        parts.extend(self._format_annotations())
        return "\n".join(parts)

    def _format_details(self) -> list[str]:
        parts: list[str] = []
        if self.expression:
            parts.append(f"  Expression: {self.expression}")
        if self.values:
            parts.append("  Values:")
            for name, value in self.values.items():
                value_repr = repr(value)
                if len(value_repr) > 80:
                    value_repr = value_repr[:77] + "..."
                parts.append(f"    {name} = {value_repr} ({type(value).__name__})")
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return parts

    def format_compact(self) -> str:
        header = terminal.format_error_header(
            self.code.value if self.code else None, self.message
        )
        return "\n".join([header, *self._format_details(), *self._format_annotations()])


class UndefinedError(TemplateError):
    """Raised when a strict-mode render reads an undefined variable.

    If ``available_names`` is provided, a "Did you mean?" suggestion is
    included when a close match is found.

    Example:
            >>> env = Environment()
            >>> env.from_string("{{ titl }}").render(title="Hi")
        UndefinedError: Undefined variable 'titl'. Did you mean 'title'?

    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(self, name: str, available_names: frozenset[str] | None = None):
        self.name = name
        self._available_names = available_names
        super().__init__(f"Undefined variable '{name}'")

    def _suggestion(self) -> str | None:
        if not self._available_names:
            return None
        from difflib import get_close_matches

        root = self.name.split(".", 1)[0].split("[", 1)[0]
        matches = get_close_matches(root, self._available_names, n=1, cutoff=0.6)
        if matches and matches[0] != root:
            return matches[0]
        return None

    def _format_message(self) -> str:
        msg = self.message
        suggested = self._suggestion()
        if suggested:
            msg += f". Did you mean '{suggested}'?"
        hint_text = f"Use {{{{ {self.name} | default: '' }}}} for optional variables"
        return "\n".join([msg, *self._format_annotations(), f"  {terminal.hint('Hint:')} {hint_text}"])
