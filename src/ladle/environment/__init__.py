"""Environment, loaders, partial stores and the error hierarchy."""

from ladle.environment.core import Environment
from ladle.environment.exceptions import (
    ErrorCode,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    TraceFrame,
    UndefinedError,
)
from ladle.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    Loader,
)
from ladle.environment.partials import (
    EagerPartials,
    LazyPartials,
    OnDemandPartials,
    PartialStore,
)
from ladle.environment.registry import Registry

__all__ = [
    "ChoiceLoader",
    "DictLoader",
    "EagerPartials",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "LazyPartials",
    "Loader",
    "OnDemandPartials",
    "PartialStore",
    "Registry",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "TraceFrame",
    "UndefinedError",
]
