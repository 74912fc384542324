"""Template parser: token stream to renderable node tree."""

from ladle.parser.arguments import TagArguments
from ladle.parser.core import Parser

__all__ = ["Parser", "TagArguments"]
