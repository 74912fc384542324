"""Terminal colors for ladle error messages.

ANSI styling is applied only when stdout is a TTY, unless overridden by the
``NO_COLOR`` / ``FORCE_COLOR`` environment variables (https://no-color.org/).
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

StyleName = Literal["bold", "dim", "red", "green", "yellow", "cyan", "bright_red"]

_STYLES: dict[str, str] = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
}
_RESET = "\033[0m"

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Decide once per process whether to emit ANSI codes."""
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    return _USE_COLORS


def colorize(text: str, *styles: StyleName) -> str:
    """Wrap ``text`` in the given styles, or return it unchanged.

    Example:
        >>> colorize("Error", "red", "bold")  # on a TTY
        '\\033[31m\\033[1mError\\033[0m'
    """
    if not _USE_COLORS or not styles:
        return text
    prefix = "".join(_STYLES.get(style, "") for style in styles)
    return f"{prefix}{text}{_RESET}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences (used by tests and log sinks)."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def markup(text: str) -> str:
    """Color a template tag invocation, e.g. ``{% include 'nav.html' %}``."""
    return colorize(text, "yellow")


def hint(text: str) -> str:
    return colorize(text, "green")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """Prefix ``message`` with a colored error code when one is given."""
    if code:
        return f"{error_code(code)}: {message}"
    return message


def format_source_line(lineno: int, content: str, *, is_error: bool = False) -> str:
    """Format one numbered source line; the error line gets a ``>`` marker."""
    marker = ">" if is_error else " "
    number = colorize(f"{marker}{lineno:>3}", "yellow")
    body = colorize(content, "bright_red") if is_error else dim_text(content)
    return f"{number} | {body}"
