"""ladle: Liquid templates for Python, with Jekyll's ``include`` tag.

Quickstart:
    >>> from ladle import Environment
    >>> env = Environment()
    >>> env.from_string("Hello, {{ name | upcase }}!").render(name="World")
    'Hello, WORLD!'

Partials:
    >>> from ladle import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("_includes/"))
    >>> page = env.from_string("{% include 'image.html' path: cover alt: 'Cover' %}")
    >>> page.render(cover="/img/cover.png")

Inside ``image.html`` the arguments are read as ``{{ include.path }}`` and
``{{ include.alt }}``; the caller's variables stay visible.

Architecture:
Template Source → Lexer → Parser → ladle AST → render_to(buf, runtime)

Pipeline stages:
1. **Lexer**: splits source into text, ``{{ output }}`` and ``{% tag %}`` tokens
2. **Parser**: dispatches each tag to the Environment's tag/block registries
3. **Template**: walks the immutable node tree into a single string buffer

Errors:
Every failure is a ``TemplateError`` carrying an ``ErrorCode`` and, when it
happened inside a partial, one include trace frame per include site:

    L-TPL-001: Partial 'missing.html' not found
      Include trace:
        • {% include 'missing.html' %} (partial: missing.html)

Thread-Safety:
Templates are immutable and every render gets its own Runtime, so one
Environment can serve concurrent renders. Declares GIL-independence via
``_Py_mod_gil = 0``.

"""

from ladle.environment import (
    ChoiceLoader,
    DictLoader,
    EagerPartials,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    LazyPartials,
    OnDemandPartials,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    TraceFrame,
    UndefinedError,
)
from ladle.runtime import Runtime
from ladle.tags import Include, IncludeTag
from ladle.template import Template
from ladle.values import MISSING, is_scalar, to_liquid_string

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "ChoiceLoader",
    "DictLoader",
    "EagerPartials",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "Include",
    "IncludeTag",
    "LazyPartials",
    "OnDemandPartials",
    "Runtime",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "TraceFrame",
    "UndefinedError",
    "__version__",
    "is_scalar",
    "to_liquid_string",
]


# Free-threading declaration (PEP 703)
def __getattr__(name: str) -> object:
    if name == "_Py_mod_gil":
        # 0 = Py_MOD_GIL_NOT_USED
        return 0
    raise AttributeError(f"module 'ladle' has no attribute {name!r}")
